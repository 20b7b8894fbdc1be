"""
FACTURA-PE — Main API Application
FastAPI backend for the SUNAT tax engine of Peruvian electronic invoices.

Endpoints:
  1. POST /api/v1/documentos/calcular   → Lines, totals, bancarización, detracción, leyendas
  2. POST /api/v1/documentos/totales    → Lines and totals only
  3. /api/v1/bancarizacion/*            → Ley N° 28194 payment checks
  4. /api/v1/catalogos/detracciones/*   → Catálogo 54 lookups and calculation

Architecture:
  - Pure computation: nothing is stored, persistence belongs to the caller
  - Catalogs are read-only and loaded at import
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from factura_pe.core.config import settings
from factura_pe.schemas.models import ErrorResponse, HealthResponse
from factura_pe.services.detraccion_service import DetraccionError
from factura_pe.services.documento_service import DocumentoInvalidoError

# ─────────────────────────────────────────────────────────────
# LOGGING
# ─────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("factura-pe")


# ─────────────────────────────────────────────────────────────
# APP LIFECYCLE
# ─────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 {settings.app_name} v{settings.app_version} starting...")
    logger.info(f"   IGV: {settings.igv_porcentaje}% | IVAP: {settings.ivap_porcentaje}%")
    logger.info(f"   Rate limit: {settings.rate_limit}")
    yield
    logger.info(f"{settings.app_name} shutdown complete.")


# ─────────────────────────────────────────────────────────────
# FASTAPI APP
# ─────────────────────────────────────────────────────────────

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(
    title="FACTURA-PE API",
    description=(
        "Motor tributario para comprobantes electrónicos SUNAT: IGV, IVAP, ISC, "
        "ICBPER, descuentos, anticipos, bancarización y detracciones."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

_cors_origins = ["*"] if settings.debug else []

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# ─────────────────────────────────────────────────────────────
# GLOBAL EXCEPTION HANDLERS
# ─────────────────────────────────────────────────────────────

@app.exception_handler(DetraccionError)
async def detraccion_error_handler(request: Request, exc: DetraccionError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error="DETRACCION_ERROR", detail=exc.message, code=exc.code,
        ).model_dump(),
    )


@app.exception_handler(DocumentoInvalidoError)
async def documento_error_handler(request: Request, exc: DocumentoInvalidoError):
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="DOCUMENTO_INVALIDO", detail=exc.message, code=exc.code, errores=exc.errores,
        ).model_dump(),
    )


# ═════════════════════════════════════════════════════════════
# ROUTES
# ═════════════════════════════════════════════════════════════

@app.get("/health", response_model=HealthResponse, tags=["Sistema"])
async def health_check():
    """Verificar estado del servicio."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "igv_porcentaje": settings.igv_porcentaje,
    }


from factura_pe.routers.documentos_router import router as documentos_router
app.include_router(documentos_router)

from factura_pe.routers.bancarizacion_router import router as bancarizacion_router
app.include_router(bancarizacion_router)

from factura_pe.routers.catalogo_router import router as catalogo_router
app.include_router(catalogo_router)


# ENTRYPOINT

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "factura_pe.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
