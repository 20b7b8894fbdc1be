"""
FACTURA-PE: Cálculo de comprobantes
Previsualiza importes, totales y leyendas antes de emitir un documento.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from factura_pe.core.config import settings
from factura_pe.dependencies import get_documento_service
from factura_pe.schemas.models import (
    AjustesGlobales, Documento, MontoLetrasRequest, ResultadoDocumento, TotalesRequest, TotalesResponse,
)
from factura_pe.services.documento_service import DocumentoService
from factura_pe.sunat.totals import calculate_totals
from factura_pe.utils.numero_letras import to_words

router = APIRouter(prefix="/api/v1", tags=["documentos"])


@router.post("/documentos/calcular", response_model=ResultadoDocumento)
async def calcular_documento(
    documento: Documento,
    estricto: bool = Query(False, description="Rechazar el documento si hay errores de validación"),
    cuenta_detraccion: Optional[str] = Query(None, description="Cuenta de detracción de la empresa"),
    service: DocumentoService = Depends(get_documento_service),
):
    """Calcula líneas, totales, bancarización, medios de pago, detracción y leyendas."""
    if estricto:
        return service.validar(documento, cuenta_detraccion_empresa=cuenta_detraccion)
    return service.calcular(documento, cuenta_detraccion_empresa=cuenta_detraccion)


@router.post("/documentos/totales", response_model=TotalesResponse)
async def calcular_totales(body: TotalesRequest):
    """Solo líneas anotadas y totales, sin reglas de negocio."""
    ajustes = AjustesGlobales(descuentos=body.descuentos, anticipos=body.anticipos, redondeo=body.redondeo)
    lineas, totales = calculate_totals(
        body.detalles, ajustes,
        igv_porcentaje=settings.igv_porcentaje, ivap_porcentaje=settings.ivap_porcentaje,
    )
    return TotalesResponse(detalles=lineas, totales=totales)


@router.post("/utilidades/monto-letras")
async def monto_en_letras(body: MontoLetrasRequest):
    return {"success": True, "data": {"monto": body.monto, "moneda": body.moneda,
                                      "letras": to_words(body.monto, body.moneda)}}
