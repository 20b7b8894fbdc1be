"""
FACTURA-PE: Cálculo completo de un comprobante
==============================================
Orquesta el motor antes de crear o actualizar un documento:
  1. Exportación (0200): todas las líneas pasan a código 40 sin IGV
  2. Líneas y totales
  3. Bancarización sobre el importe total de venta
  4. Medios de pago (explícitos o convertidos desde la bancarización)
  5. Detracción, si se informa un código de bien o servicio
  6. Boletas > S/ 700.00: cliente identificado (RS 0120-2017/SUNAT)
  7. Leyendas

Los errores de los pasos 4 y 6 se acumulan en el resultado; validar()
los convierte en DocumentoInvalidoError. Un código de detracción
desconocido falla de inmediato.
"""
import logging

from factura_pe.core.config import UMBRAL_DNI_BOLETA, Moneda, settings
from factura_pe.schemas.models import (
    OPERACION_EXPORTACION, Documento, ResultadoDocumento, TipoAfectacionIGV, TipoDocumento,
)
from factura_pe.services.bancarizacion_service import BancarizacionService
from factura_pe.services.detraccion_service import DetraccionService
from factura_pe.services.medios_pago_service import MediosPagoService
from factura_pe.sunat.legends import generar_leyendas
from factura_pe.sunat.totals import calculate_totals
from factura_pe.utils.money import ZERO, format_amount

logger = logging.getLogger("factura-pe.documento")

TIPO_DOC_DNI = "1"
TIPO_DOC_RUC = "6"

DNIS_GENERICOS = frozenset({
    "99999999", "00000000", "11111111", "22222222", "33333333",
    "44444444", "55555555", "66666666", "77777777", "88888888", "12345678",
})


class DocumentoInvalidoError(Exception):
    def __init__(self, message: str, errores: list[str] | None = None,
                 code: str = "DOCUMENTO_INVALIDO"):
        self.message = message
        self.errores = errores or []
        self.code = code
        super().__init__(message)


class DocumentoService:
    """Cálculo y validación de comprobantes (facturas, boletas, notas)."""

    def __init__(self, bancarizacion: BancarizacionService | None = None,
                 medios_pago: MediosPagoService | None = None,
                 detraccion: DetraccionService | None = None):
        self.bancarizacion = bancarizacion or BancarizacionService()
        self.medios_pago = medios_pago or MediosPagoService()
        self.detraccion = detraccion or DetraccionService()

    # ══════════════════════════════════════════════════════════
    # CÁLCULO
    # ══════════════════════════════════════════════════════════

    def calcular(self, documento: Documento, *,
                 cuenta_detraccion_empresa: str | None = None) -> ResultadoDocumento:
        es_exportacion = documento.tipo_operacion == OPERACION_EXPORTACION
        detalles = documento.detalles
        if es_exportacion:
            detalles = [
                d.model_copy(update={"tip_afe_igv": TipoAfectacionIGV.EXPORTACION, "porcentaje_igv": ZERO})
                for d in detalles
            ]

        lineas, totales = calculate_totals(
            detalles, documento.ajustes(),
            igv_porcentaje=settings.igv_porcentaje, ivap_porcentaje=settings.ivap_porcentaje,
        )
        if es_exportacion:
            totales = totales.model_copy(update={
                "mto_oper_gravadas": ZERO, "mto_oper_exoneradas": ZERO, "mto_oper_inafectas": ZERO,
            })

        total = totales.mto_imp_venta
        errores = []

        bancarizacion = self.bancarizacion.evaluar(total, documento.moneda, documento.bancarizacion)

        medios = documento.medios_pago or self.medios_pago.desde_bancarizacion(
            documento.bancarizacion, total)
        medios_procesados = None
        if medios:
            validacion = self.medios_pago.validar(medios, total)
            errores.extend(validacion.errores)
            medios_procesados = self.medios_pago.preparar(medios)

        detraccion = None
        if documento.detraccion is not None and documento.detraccion.codigo_bien_servicio:
            detraccion = self.detraccion.procesar(documento.detraccion, total, cuenta_detraccion_empresa)

        errores.extend(self._validar_cliente_boleta(documento, total))

        leyendas = generar_leyendas(
            total, documento.moneda, lineas,
            detraccion=detraccion is not None,
            percepcion=documento.percepcion is not None,
            bancarizacion=bancarizacion.aplica or bool(medios),
        )

        self.bancarizacion.log_operacion(
            documento.tipo_documento.value, documento.serie or "-", total, documento.moneda,
            tiene_bancarizacion=bool(medios) or bancarizacion.validado,
        )

        return ResultadoDocumento(
            valido=not errores,
            errores=errores,
            detalles=lineas,
            totales=totales,
            bancarizacion=bancarizacion,
            medios_pago=medios_procesados,
            detraccion=detraccion,
            leyendas=leyendas,
        )

    def validar(self, documento: Documento, *,
                cuenta_detraccion_empresa: str | None = None) -> ResultadoDocumento:
        """Same as calcular() but rejects the document when any error was collected."""
        resultado = self.calcular(documento, cuenta_detraccion_empresa=cuenta_detraccion_empresa)
        if not resultado.valido:
            raise DocumentoInvalidoError(
                f"El documento tiene {len(resultado.errores)} error(es) de validación.",
                errores=resultado.errores,
            )
        return resultado

    # ══════════════════════════════════════════════════════════
    # REGLAS DEL CLIENTE
    # ══════════════════════════════════════════════════════════

    def _validar_cliente_boleta(self, documento: Documento, total) -> list[str]:
        if documento.tipo_documento.value != TipoDocumento.BOLETA.value:
            return []
        if documento.moneda != Moneda.PEN.value or total <= UMBRAL_DNI_BOLETA:
            return []

        cliente = documento.cliente
        tipo = cliente.tipo_documento if cliente else None
        numero = cliente.numero_documento if cliente else None
        monto = format_amount(total)

        errores = []
        if tipo == TIPO_DOC_DNI and numero in DNIS_GENERICOS:
            errores.append(
                f"⚠️ DNI OBLIGATORIO: Para boletas con monto superior a S/ 700.00 es OBLIGATORIO "
                f"registrar el DNI REAL del cliente (Monto: S/ {monto}). No se permite el uso de DNI "
                f"genérico (99999999) según la Resolución de Superintendencia N° 0120-2017/SUNAT. "
                f"El DNI debe ser válido y corresponder al cliente."
            )
        if tipo not in (TIPO_DOC_DNI, TIPO_DOC_RUC):
            errores.append(
                f"⚠️ ADVERTENCIA: Para boletas con monto superior a S/ 700.00, se recomienda usar "
                f"DNI (tipo 1) o RUC (tipo 6) del cliente real. Tipo actual: {tipo}. Monto: S/ {monto}."
            )
        return errores


documento_service = DocumentoService()
