"""
FACTURA-PE: Dependencias FastAPI
================================
Los servicios no guardan estado, así que se comparten como singletons.
"""
from functools import lru_cache

from fastapi import Depends

from factura_pe.services.bancarizacion_service import BancarizacionService
from factura_pe.services.detraccion_service import DetraccionService
from factura_pe.services.documento_service import DocumentoService
from factura_pe.services.medios_pago_service import MediosPagoService


# ── Singletons ──

@lru_cache()
def get_bancarizacion_service() -> BancarizacionService:
    return BancarizacionService()


@lru_cache()
def get_medios_pago_service() -> MediosPagoService:
    return MediosPagoService()


@lru_cache()
def get_detraccion_service() -> DetraccionService:
    """Catálogo 54 de detracciones."""
    return DetraccionService()


def get_documento_service(
    bancarizacion: BancarizacionService = Depends(get_bancarizacion_service),
    medios_pago: MediosPagoService = Depends(get_medios_pago_service),
    detraccion: DetraccionService = Depends(get_detraccion_service),
) -> DocumentoService:
    """Document service with the shared engine services injected."""
    return DocumentoService(bancarizacion=bancarizacion, medios_pago=medios_pago, detraccion=detraccion)
