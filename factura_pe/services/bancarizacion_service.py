"""
FACTURA-PE: Bancarización (Ley N° 28194)
========================================
Operaciones por encima de S/ 2,000.00 o US$ 500.00 deben pagarse con un
medio de pago del sistema financiero para que el gasto sea deducible y
otorgue crédito fiscal. Este servicio:
  - decide si la operación supera el umbral (estrictamente mayor)
  - valida los datos del medio de pago según lo que exige cada medio
  - genera la advertencia legal y la leyenda 2005
No escribe nada: quien lo llama guarda el resultado.
"""
import logging
from types import MappingProxyType

from factura_pe.core.config import SIMBOLOS_MONEDA, get_umbral_bancarizacion
from factura_pe.schemas.models import (
    BancarizacionResult, DatosBancarizacion, Leyenda, MedioPagoBancarizacion,
    ValidacionBancarizacion,
)
from factura_pe.sunat.legends import LEYENDA_BANCARIZACION, leyenda
from factura_pe.utils.money import format_amount, to_decimal

logger = logging.getLogger("factura-pe.bancarizacion")

LEY_BANCARIZACION = "Ley N° 28194"


def _medio(codigo, descripcion, operacion=True, banco=True, fecha=True, obs=None):
    return MedioPagoBancarizacion(
        codigo=codigo, descripcion=descripcion, requiere_numero_operacion=operacion,
        requiere_banco=banco, requiere_fecha=fecha, observaciones=obs,
    )


_MEDIOS = [
    _medio("TRAN", "Transferencia bancaria", obs="Transferencia interbancaria o dentro del mismo banco"),
    _medio("TDEB", "Tarjeta de débito", obs="Tarjeta de débito expedida en el país"),
    _medio("TCRE", "Tarjeta de crédito", obs="Tarjeta de crédito expedida en el país"),
    _medio("CHEQ", "Cheque no negociable",
           obs='Debe incluir cláusula "no negociable", "intransferible" o "no a la orden"'),
    _medio("DEPO", "Depósito en cuenta", obs="Depósito directo en cuenta bancaria"),
    _medio("GIRO", "Giro u orden de pago", obs="Giro bancario u orden de pago"),
    _medio("REME", "Remesa", obs="Remesa bancaria, comúnmente para operaciones internacionales"),
    _medio("CRED", "Carta de crédito", obs="Utilizada en operaciones de comercio exterior"),
    # Billeteras digitales: no piden banco
    _medio("YAPE", "Yape (BCP)", banco=False, obs="Billetera digital del Banco de Crédito del Perú"),
    _medio("PLIN", "Plin (Consorcio de bancos)", banco=False,
           obs="Billetera digital multi-banco (BBVA, Interbank, Scotiabank, etc.)"),
    _medio("TUNK", "Tunki (Scotiabank)", banco=False, obs="Billetera digital de Scotiabank"),
    _medio("LUKI", "Lukita (Caja Arequipa)", banco=False, obs="Billetera digital de Caja Arequipa"),
    _medio("AGORA", "Agora Pay (Interbank)", banco=False, obs="Billetera digital de Interbank"),
    _medio("BIM", "BIM - Billetera Móvil (ASBANC)", banco=False,
           obs="Billetera móvil interbancaria respaldada por ASBANC"),
    # Referencia opcional
    _medio("POS", "Pago con POS", operacion=False, banco=False, fecha=False,
           obs="Pago mediante terminal POS - Referencia opcional"),
    _medio("QR", "Pago QR Bancario", obs="Pago mediante código QR generado por banco o entidad financiera"),
    _medio("BANCA_WEB", "Banca por Internet", obs="Pago realizado mediante plataforma web del banco"),
    _medio("BANCA_APP", "App Móvil Bancaria",
           obs="Pago mediante aplicación móvil del banco (no billetera digital)"),
    _medio("EFEC", "Efectivo", operacion=False, banco=False, fecha=False,
           obs="Pago en efectivo - No requiere datos adicionales"),
]

MEDIOS_PAGO_BANCARIZACION = MappingProxyType({m.codigo: m for m in _MEDIOS})


def get_medio_pago(codigo: str | None) -> MedioPagoBancarizacion | None:
    if not codigo:
        return None
    return MEDIOS_PAGO_BANCARIZACION.get(codigo)


class BancarizacionService:
    """Evaluación de bancarización sin efectos secundarios."""

    def aplica(self, monto_total, moneda: str) -> bool:
        umbral = get_umbral_bancarizacion(moneda)
        if umbral is None:
            return False
        return to_decimal(monto_total) > umbral

    def get_umbral(self, moneda: str):
        return get_umbral_bancarizacion(moneda)

    def medios_pago(self) -> list[MedioPagoBancarizacion]:
        return sorted(MEDIOS_PAGO_BANCARIZACION.values(), key=lambda m: m.descripcion)

    def validar_datos(self, datos: DatosBancarizacion) -> ValidacionBancarizacion:
        if not datos.medio_pago:
            return ValidacionBancarizacion(valido=False, errores=[
                "El medio de pago es requerido para operaciones sujetas a bancarización."])

        medio = get_medio_pago(datos.medio_pago)
        if medio is None:
            return ValidacionBancarizacion(valido=False, errores=[
                "El medio de pago especificado no es válido o no está activo."])

        errores = []
        if medio.requiere_numero_operacion and not datos.numero_operacion:
            errores.append(f"El medio de pago '{medio.descripcion}' requiere número de operación.")
        if medio.requiere_banco and not datos.banco:
            errores.append(f"El medio de pago '{medio.descripcion}' requiere especificar el banco.")
        if medio.requiere_fecha and not datos.fecha_pago:
            errores.append(f"El medio de pago '{medio.descripcion}' requiere fecha de pago.")

        return ValidacionBancarizacion(valido=not errores, errores=errores, medio_pago=medio)

    def mensaje_advertencia(self, moneda: str) -> str:
        umbral = self.get_umbral(moneda)
        simbolo = SIMBOLOS_MONEDA.get(moneda, "US$")
        return (
            f"⚠️ ADVERTENCIA LEGAL: Esta operación supera el umbral de bancarización "
            f"({simbolo} {format_amount(umbral)}). "
            f"Según la {LEY_BANCARIZACION}, sin un medio de pago bancario válido, el gasto NO será "
            "deducible para Impuesto a la Renta y NO otorgará derecho a crédito fiscal de IGV. "
            "Se recomienda registrar el medio de pago utilizado para evitar sanciones fiscales."
        )

    def evaluar(self, monto_total, moneda: str,
                datos: DatosBancarizacion | None = None) -> BancarizacionResult:
        aplica = self.aplica(monto_total, moneda)
        result = BancarizacionResult(aplica=aplica, umbral=self.get_umbral(moneda))
        if not aplica:
            return result

        if datos is None or not datos.medio_pago:
            result.advertencia = self.mensaje_advertencia(moneda)
            return result

        result.medio_pago = datos.medio_pago
        result.numero_operacion = datos.numero_operacion
        result.fecha_pago = datos.fecha_pago
        result.banco = datos.banco
        result.observaciones = datos.observaciones

        validacion = self.validar_datos(datos)
        result.validado = validacion.valido
        result.errores = validacion.errores
        if not validacion.valido:
            result.advertencia = "Datos de bancarización incompletos: " + " ".join(validacion.errores)
        return result

    def leyenda(self) -> Leyenda:
        return leyenda(LEYENDA_BANCARIZACION)

    def log_operacion(self, tipo_documento: str, numero_documento: str, monto_total,
                      moneda: str, tiene_bancarizacion: bool) -> None:
        if not self.aplica(monto_total, moneda):
            return
        if tiene_bancarizacion:
            logger.info(f"Documento {tipo_documento} {numero_documento} con bancarización registrada "
                        f"({moneda} {monto_total})")
        else:
            logger.warning(
                f"Documento {tipo_documento} {numero_documento} sujeto a bancarización sin medio de pago: "
                f"{moneda} {monto_total} > umbral {self.get_umbral(moneda)} ({LEY_BANCARIZACION})"
            )


bancarizacion_service = BancarizacionService()
