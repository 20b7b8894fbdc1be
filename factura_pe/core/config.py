"""
FACTURA-PE Core Configuration
Application settings and SUNAT tax constants.
"""

from decimal import Decimal
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Moneda(str, Enum):
    PEN = "PEN"
    USD = "USD"


class Settings(BaseSettings):
    app_name: str = "FACTURA-PE"
    app_version: str = "1.0.0"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # Tasas por defecto cuando la línea no trae su propio porcentaje
    igv_porcentaje: Decimal = Decimal("18")
    ivap_porcentaje: Decimal = Decimal("2")

    # Cuenta del Banco de la Nación usada si ni el documento ni la empresa la informan
    cuenta_detraccion_default: str = ""

    rate_limit: str = "60/minute"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()


# ─────────────────────────────────────────────────────────────
# SUNAT CONSTANTS
# Ley N° 28194 (bancarización), Catálogo 07 (afectación IGV),
# Catálogo 53 (cargos y descuentos)
# ─────────────────────────────────────────────────────────────

# Tasa fija con la que SUNAT recalcula el IGV cuando hay descuento por anticipo
IGV_TASA_ANTICIPO = Decimal("0.18")

UMBRALES_BANCARIZACION: dict[str, Decimal] = {
    Moneda.PEN.value: Decimal("2000.00"),
    Moneda.USD.value: Decimal("500.00"),
}

SIMBOLOS_MONEDA: dict[str, str] = {
    Moneda.PEN.value: "S/",
    Moneda.USD.value: "US$",
}

# RS 0120-2017/SUNAT: boletas por encima de este monto requieren identificar al cliente
UMBRAL_DNI_BOLETA = Decimal("700.00")


def get_umbral_bancarizacion(moneda: str) -> Decimal | None:
    """Threshold above which a payment must go through the banking system."""
    return UMBRALES_BANCARIZACION.get(moneda)
