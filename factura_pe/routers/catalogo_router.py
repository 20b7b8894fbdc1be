"""
FACTURA-PE: Catálogo 54 de detracciones
"""

from fastapi import APIRouter, Depends, Query

from factura_pe.dependencies import get_detraccion_service
from factura_pe.schemas.models import CalculoDetraccion, DetraccionCalcularRequest
from factura_pe.services.detraccion_service import DetraccionError, DetraccionService

router = APIRouter(prefix="/api/v1/catalogos/detracciones", tags=["catalogos"])


@router.get("")
async def listar_detracciones(service: DetraccionService = Depends(get_detraccion_service)):
    catalogo = service.catalogo()
    return {"success": True, "data": catalogo, "total": len(catalogo)}


@router.get("/buscar")
async def buscar_detracciones(
    q: str = Query(..., min_length=1),
    service: DetraccionService = Depends(get_detraccion_service),
):
    """Búsqueda por descripción, sin distinguir mayúsculas."""
    resultados = service.buscar(q)
    return {"success": True, "data": resultados, "total": len(resultados)}


@router.get("/por-porcentaje")
async def detracciones_por_porcentaje(service: DetraccionService = Depends(get_detraccion_service)):
    return {"success": True, "data": service.agrupado_por_porcentaje()}


@router.get("/medios-pago")
async def medios_pago_detraccion(service: DetraccionService = Depends(get_detraccion_service)):
    medios = service.medios_pago()
    return {"success": True, "data": medios, "total": len(medios)}


@router.post("/calcular", response_model=CalculoDetraccion)
async def calcular_detraccion(
    body: DetraccionCalcularRequest,
    service: DetraccionService = Depends(get_detraccion_service),
):
    return service.calcular(body.monto_total, body.codigo_bien_servicio, body.porcentaje_personalizado)


@router.get("/{codigo}")
async def obtener_detraccion(codigo: str, service: DetraccionService = Depends(get_detraccion_service)):
    try:
        item = service.resolver(codigo)
    except DetraccionError as exc:
        raise DetraccionError(exc.message, code=exc.code, status_code=404) from exc
    return {"success": True, "data": item}
