"""
FACTURA-PE: Detracciones (SPOT)
===============================
Catálogo 54 de bienes y servicios sujetos a detracción y medios de pago
del depósito en el Banco de la Nación. Ambos catálogos son de solo lectura.

Un código desconocido falla de inmediato (DetraccionError); un medio de
pago desconocido cae a '001' (Depósito en cuenta) y se registra en el log.
"""
import logging
from collections import defaultdict
from decimal import Decimal
from types import MappingProxyType

from factura_pe.core.config import settings
from factura_pe.schemas.models import (
    CalculoDetraccion, CatalogoDetraccion, DetraccionEntrada, DetraccionResult, MedioPagoDetraccion,
)
from factura_pe.utils.money import money, rate, to_decimal

logger = logging.getLogger("factura-pe.detraccion")

MEDIO_PAGO_DEFAULT = "001"


class DetraccionError(Exception):
    def __init__(self, message: str, code: str = "DETRACCION_ERROR", status_code: int = 400):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# (código, descripción, porcentaje, código interno)
_BIENES_SERVICIOS = [
    ("001", "Azúcar y melaza de caña", "10", "8"),
    ("003", "Alcohol etílico", "10", "9"),
    ("004", "Recursos hidrobiológicos", "4", "10"),
    ("005", "Maíz amarillo duro", "4", "11"),
    ("007", "Caña de azúcar", "10", "12"),
    ("008", "Madera", "4", "13"),
    ("009", "Arena y piedra", "10", "14"),
    ("010", "Residuos, subproductos, desechos, recortes y desperdicios", "15", "15"),
    ("012", "Intermediación laboral y tercerización", "12", "16"),
    ("014", "Carnes y despojos comestibles", "4", "17"),
    ("016", "Aceite de pescado", "10", "18"),
    ("017", "Harina, polvo y pellets de pescado, crustáceos, moluscos y demás invertebrados acuáticos",
     "4", "19"),
    ("019", "Arrendamiento de bienes muebles", "10", "20"),
    ("020", "Mantenimiento y reparación de bienes muebles", "12", "21"),
    ("021", "Movimiento de carga", "10", "22"),
    ("022", "Otros servicios empresariales", "12", "23"),
    ("023", "Leche", "4", "24"),
    ("024", "Comisión mercantil", "10", "25"),
    ("025", "Fabricación de bienes por encargo", "10", "26"),
    ("026", "Servicio de transporte de personas", "10", "27"),
    ("027", "Servicio de transporte de carga", "4", "28"),
    ("028", "Transporte de pasajeros", "10", "29"),
    ("030", "Contratos de construcción", "4", "30"),
    ("031", "Oro gravado con el IGV", "10", "31"),
    ("032", "Páprika y otros frutos de los géneros capsicum o pimienta", "10", "32"),
    ("034", "Minerales metálicos no auríferos", "10", "33"),
    ("035", "Bienes exonerados del IGV", "1.50", "34"),
    ("036", "Oro y demás minerales metálicos exonerados del IGV", "1.50", "35"),
    ("037", "Demás servicios gravados con el IGV", "12", "36"),
    ("039", "Minerales no metálicos", "10", "37"),
    ("040", "Bien inmueble gravado con IGV", "4", "38"),
    ("041", "Plomo", "15", "39"),
    ("099", "Ley 30737", "0.00", "40"),
]

CATALOGO_DETRACCIONES = MappingProxyType({
    codigo: CatalogoDetraccion(codigo=codigo, descripcion=desc, porcentaje=Decimal(pct), codigo_factpro=interno)
    for codigo, desc, pct, interno in _BIENES_SERVICIOS
})

MEDIOS_PAGO_DETRACCION = MappingProxyType({
    codigo: MedioPagoDetraccion(codigo=codigo, descripcion=desc)
    for codigo, desc in [
        ("001", "Depósito en cuenta"),
        ("002", "Giro"),
        ("003", "Transferencia de fondos"),
        ("004", "Orden de pago"),
        ("005", "Tarjeta de débito"),
        ("006", "Tarjeta de crédito emitida en el país por una empresa del sistema financiero"),
        ("007", 'Cheques con la cláusula de "NO NEGOCIABLE"'),
        ("008", "Efectivo"),
        ("009", "Efectivo, por operaciones en las que no existe obligación de utilizar medio de pago"),
        ("010", "Medios de pago usados en comercio exterior"),
        ("011", "Documentos emitidos por las EDPYMES"),
        ("012", "Tarjeta de crédito emitida en el exterior"),
        ("101", "Transferencias – Comercio exterior"),
        ("102", "Cheques bancarios – Comercio exterior"),
        ("103", "Orden de pago simple – Comercio exterior"),
        ("104", "Orden de pago documentario – Comercio exterior"),
        ("105", "Remesa simple – Comercio exterior"),
        ("106", "Remesa documentaria – Comercio exterior"),
        ("107", "Carta de crédito simple – Comercio exterior"),
        ("108", "Carta de crédito documentario – Comercio exterior"),
    ]
})


class DetraccionService:
    """Consulta del catálogo 54 y cálculo del monto a depositar."""

    @staticmethod
    def normalizar_codigo(codigo) -> str:
        return str(codigo).strip().zfill(3)

    def resolver(self, codigo) -> CatalogoDetraccion:
        normalizado = self.normalizar_codigo(codigo)
        item = CATALOGO_DETRACCIONES.get(normalizado)
        if item is None:
            raise DetraccionError(
                f"Código de detracción '{normalizado}' no encontrado en el catálogo 54.",
                code="DETRACCION_NO_ENCONTRADA",
            )
        return item

    def calcular(self, monto_total, codigo, porcentaje_personalizado=None) -> CalculoDetraccion:
        """Amount = total x percentage / 100, rounded to 2 dp.

        A custom percentage replaces the catalog one but the code must still exist.
        """
        item = self.resolver(codigo)
        porcentaje = item.porcentaje if porcentaje_personalizado is None else to_decimal(porcentaje_personalizado)
        monto = money(to_decimal(monto_total) * rate(porcentaje))

        logger.info(f"Detracción calculada: código {item.codigo}, total {monto_total}, "
                    f"porcentaje {porcentaje}%, monto {monto}")
        return CalculoDetraccion(codigo=item.codigo, porcentaje=porcentaje, monto=monto)

    def procesar(self, entrada: DetraccionEntrada, monto_total,
                 cuenta_empresa: str | None = None) -> DetraccionResult:
        if not entrada.codigo_bien_servicio:
            raise DetraccionError("El código de bien o servicio es requerido para la detracción.",
                                  code="DETRACCION_REQUERIDA")

        item = self.resolver(entrada.codigo_bien_servicio)
        porcentaje = entrada.porcentaje if entrada.porcentaje is not None else item.porcentaje
        if entrada.monto is not None:
            monto = money(entrada.monto)
        else:
            monto = self.calcular(monto_total, item.codigo, porcentaje).monto

        cuenta = entrada.cuenta_banco or cuenta_empresa or settings.cuenta_detraccion_default

        codigo_medio = entrada.codigo_medio_pago or MEDIO_PAGO_DEFAULT
        medio = MEDIOS_PAGO_DETRACCION.get(codigo_medio)
        if medio is None:
            logger.warning(f"Medio de pago de detracción '{codigo_medio}' desconocido, "
                           f"se usa {MEDIO_PAGO_DEFAULT}")
            medio = MEDIOS_PAGO_DETRACCION[MEDIO_PAGO_DEFAULT]

        logger.info(f"Detracción procesada: {item.codigo} {item.descripcion}, monto {monto}")
        return DetraccionResult(
            codigo_bien_servicio=item.codigo,
            descripcion_bien_servicio=item.descripcion,
            codigo_medio_pago=medio.codigo,
            descripcion_medio_pago=medio.descripcion,
            cuenta_banco=cuenta,
            porcentaje=porcentaje,
            monto=monto,
        )

    # ── Consultas ──

    def catalogo(self) -> list[CatalogoDetraccion]:
        return list(CATALOGO_DETRACCIONES.values())

    def medios_pago(self) -> list[MedioPagoDetraccion]:
        return list(MEDIOS_PAGO_DETRACCION.values())

    def es_codigo_valido(self, codigo) -> bool:
        return self.normalizar_codigo(codigo) in CATALOGO_DETRACCIONES

    def buscar(self, texto: str) -> list[CatalogoDetraccion]:
        texto = texto.lower()
        return [item for item in CATALOGO_DETRACCIONES.values() if texto in item.descripcion.lower()]

    def agrupado_por_porcentaje(self) -> dict[str, list[CatalogoDetraccion]]:
        grupos = defaultdict(list)
        for item in CATALOGO_DETRACCIONES.values():
            grupos[f"{item.porcentaje}%"].append(item)
        return dict(grupos)


detraccion_service = DetraccionService()
