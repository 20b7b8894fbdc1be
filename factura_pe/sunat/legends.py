"""
FACTURA-PE: Leyendas SUNAT (Catálogo 52)
"""
from factura_pe.schemas.models import LineaCalculada, Leyenda, TipoAfectacionIGV
from factura_pe.utils.numero_letras import to_words

LEYENDA_MONTO_LETRAS = "1000"
LEYENDA_GRATUITA = "1002"
LEYENDA_PERCEPCION = "2000"
LEYENDA_BANCARIZACION = "2005"
LEYENDA_DETRACCION = "2006"
LEYENDA_IVAP = "2007"

TEXTOS = {
    LEYENDA_GRATUITA: "TRANSFERENCIA GRATUITA DE UN BIEN Y/O SERVICIO PRESTADO GRATUITAMENTE",
    LEYENDA_PERCEPCION: "COMPROBANTE DE PERCEPCIÓN",
    LEYENDA_BANCARIZACION: "OPERACIÓN SUJETA A BANCARIZACIÓN - LEY N° 28194",
    LEYENDA_DETRACCION: "Operación sujeta a detracción",
    LEYENDA_IVAP: "OPERACIÓN SUJETA AL IVAP",
}


def leyenda(code: str) -> Leyenda:
    return Leyenda(code=code, value=TEXTOS[code])


def has_gratuitas(lineas: list[LineaCalculada]) -> bool:
    return any(l.es_gratuita for l in lineas)


def has_ivap(lineas: list[LineaCalculada]) -> bool:
    return any(l.tip_afe_igv == TipoAfectacionIGV.IVAP for l in lineas)


def generar_leyendas(total, moneda: str, lineas: list[LineaCalculada], *,
                     detraccion: bool = False, percepcion: bool = False,
                     bancarizacion: bool = False) -> list[Leyenda]:
    leyendas = [Leyenda(code=LEYENDA_MONTO_LETRAS, value=to_words(total, moneda))]
    if has_gratuitas(lineas):
        leyendas.append(leyenda(LEYENDA_GRATUITA))
    if percepcion:
        leyendas.append(leyenda(LEYENDA_PERCEPCION))
    if detraccion:
        leyendas.append(leyenda(LEYENDA_DETRACCION))
    if has_ivap(lineas):
        leyendas.append(leyenda(LEYENDA_IVAP))
    if bancarizacion:
        leyendas.append(leyenda(LEYENDA_BANCARIZACION))
    return leyendas
