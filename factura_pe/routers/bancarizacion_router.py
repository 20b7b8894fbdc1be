"""
FACTURA-PE: Bancarización (Ley N° 28194)
Catálogo de medios de pago y validación de datos de pago.
"""

from fastapi import APIRouter, Depends

from factura_pe.core.config import UMBRALES_BANCARIZACION
from factura_pe.dependencies import get_bancarizacion_service, get_medios_pago_service
from factura_pe.schemas.models import (
    BancarizacionResult, BancarizacionValidarRequest, MediosPagoValidarRequest, ValidacionMediosPago,
)
from factura_pe.services.bancarizacion_service import BancarizacionService
from factura_pe.services.medios_pago_service import MediosPagoService

router = APIRouter(prefix="/api/v1/bancarizacion", tags=["bancarizacion"])


@router.get("/medios-pago")
async def listar_medios_pago(service: BancarizacionService = Depends(get_bancarizacion_service)):
    """Medios de pago aceptados y los datos que exige cada uno."""
    medios = service.medios_pago()
    return {"success": True, "data": medios, "total": len(medios), "umbrales": UMBRALES_BANCARIZACION}


@router.post("/validar", response_model=BancarizacionResult)
async def validar_bancarizacion(
    body: BancarizacionValidarRequest,
    service: BancarizacionService = Depends(get_bancarizacion_service),
):
    return service.evaluar(body.monto_total, body.moneda, body.bancarizacion)


@router.post("/medios-pago/validar", response_model=ValidacionMediosPago)
async def validar_medios_pago(
    body: MediosPagoValidarRequest,
    service: MediosPagoService = Depends(get_medios_pago_service),
):
    return service.validar(body.medios_pago, body.monto_total)
