"""
FACTURA-PE Pydantic Schemas
Document input, engine results and request/response models for the API.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from factura_pe.utils.money import ZERO


# ─────────────────────────────────────────────────────────────
# ENUMS / CATÁLOGOS SUNAT
# ─────────────────────────────────────────────────────────────

class TipoDocumento(str, Enum):
    FACTURA = "01"
    BOLETA = "03"
    NOTA_CREDITO = "07"
    NOTA_DEBITO = "08"


class TipoAfectacionIGV(str, Enum):
    """Catálogo 07: Tipo de afectación del IGV"""
    GRAVADO = "10"
    GRAVADO_RETIRO_PREMIO = "11"
    GRAVADO_RETIRO_DONACION = "12"
    GRAVADO_RETIRO = "13"
    GRAVADO_RETIRO_PUBLICIDAD = "14"
    GRAVADO_BONIFICACIONES = "15"
    GRAVADO_RETIRO_TRABAJADORES = "16"
    IVAP = "17"
    EXONERADO = "20"
    INAFECTO = "30"
    INAFECTO_RETIRO_BONIFICACION = "31"
    INAFECTO_RETIRO = "32"
    INAFECTO_RETIRO_MUESTRAS_MEDICAS = "33"
    INAFECTO_RETIRO_CONVENIO_COLECTIVO = "34"
    INAFECTO_RETIRO_PREMIO = "35"
    INAFECTO_RETIRO_PUBLICIDAD = "36"
    EXPORTACION = "40"


# Transferencias gratuitas: 11-16 llevan IGV referencial, 31-36 no
CODIGOS_GRATUITOS_GRAVADOS = frozenset({"11", "12", "13", "14", "15", "16"})
CODIGOS_GRATUITOS_INAFECTOS = frozenset({"31", "32", "33", "34", "35", "36"})
CODIGOS_GRATUITOS = CODIGOS_GRATUITOS_GRAVADOS | CODIGOS_GRATUITOS_INAFECTOS

# Catálogo 53: cargos y descuentos
DESCUENTO_LINEA_AFECTA_BASE = "00"
DESCUENTOS_GLOBALES_AFECTAN_BASE = frozenset({"00", "02"})
DESCUENTO_GLOBAL_ANTICIPO = "04"

OPERACION_VENTA_INTERNA = "0101"
OPERACION_EXPORTACION = "0200"

# Tope de montos y cantidades: el producto debe caber en la precisión decimal por defecto (28 dígitos)
MONTO_MAXIMO = Decimal("999999999999")


# ─────────────────────────────────────────────────────────────
# LÍNEAS DEL DOCUMENTO
# ─────────────────────────────────────────────────────────────

class PrecioConIGV(BaseModel):
    """Precio unitario con impuestos incluidos (venta minorista)."""
    modo: Literal["con_igv"] = "con_igv"
    monto: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)


class ValorSinIGV(BaseModel):
    """Valor unitario sin impuestos (venta mayorista)."""
    modo: Literal["sin_igv"] = "sin_igv"
    monto: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)


PrecioLinea = Annotated[Union[PrecioConIGV, ValorSinIGV], Field(discriminator="modo")]


class Descuento(BaseModel):
    """Descuento de línea. cod_tipo '00' afecta la base imponible."""
    cod_tipo: str = Field(default=DESCUENTO_LINEA_AFECTA_BASE, max_length=2)
    monto: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)


class Detalle(BaseModel):
    codigo: Optional[str] = None
    descripcion: str = ""
    unidad: str = Field(default="NIU", description="Catálogo 03: unidad de medida")
    cantidad: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)
    precio: PrecioLinea
    tip_afe_igv: TipoAfectacionIGV = TipoAfectacionIGV.GRAVADO
    porcentaje_igv: Optional[Decimal] = Field(None, ge=0)
    porcentaje_ivap: Optional[Decimal] = Field(None, ge=0)
    tip_sis_isc: Optional[str] = Field(None, description="Catálogo 08: sistema de cálculo del ISC")
    porcentaje_isc: Optional[Decimal] = Field(None, ge=0)
    factor_icbper: Optional[Decimal] = Field(None, ge=0, le=MONTO_MAXIMO)
    mto_valor_gratuito: Optional[Decimal] = Field(None, ge=0, le=MONTO_MAXIMO)
    descuentos: list[Descuento] = Field(default_factory=list)

    model_config = {"json_schema_extra": {
        "examples": [{
            "codigo": "P001", "descripcion": "Producto gravado", "cantidad": "2",
            "precio": {"modo": "con_igv", "monto": "118.00"}, "tip_afe_igv": "10",
        }]
    }}


class ImportesLinea(BaseModel):
    """Unrounded line amounts, the only values the aggregator sums."""
    valor_venta: Decimal = ZERO
    base_igv: Decimal = ZERO
    igv: Decimal = ZERO
    isc: Decimal = ZERO
    icbper: Decimal = ZERO
    descuentos_afectan_base: Decimal = ZERO
    descuentos_no_afectan_base: Decimal = ZERO


class LineaCalculada(BaseModel):
    """Detalle anotado con los importes que exige SUNAT (redondeados a 2 decimales)."""
    codigo: Optional[str] = None
    descripcion: str = ""
    unidad: str = "NIU"
    cantidad: Decimal
    tip_afe_igv: TipoAfectacionIGV
    porcentaje_igv: Decimal = Field(..., description="Porcentaje aplicado: IGV, o IVAP en código 17")
    mto_valor_unitario: Decimal
    mto_precio_unitario: Decimal
    mto_valor_venta: Decimal
    mto_base_igv: Decimal
    igv: Decimal = ZERO
    mto_base_isc: Optional[Decimal] = None
    isc: Decimal = ZERO
    icbper: Decimal = ZERO
    total_impuestos: Decimal = ZERO
    descuento: Optional[Decimal] = None
    mto_valor_gratuito: Optional[Decimal] = None
    importes: ImportesLinea = Field(default_factory=ImportesLinea, exclude=True, repr=False)

    @property
    def es_gratuita(self) -> bool:
        return self.tip_afe_igv.value in CODIGOS_GRATUITOS


# ─────────────────────────────────────────────────────────────
# AJUSTES GLOBALES
# ─────────────────────────────────────────────────────────────

class DescuentoGlobal(BaseModel):
    """Descuento global. '00'/'02' afectan la base, '04' es anticipo, el resto no afecta."""
    cod_tipo: str = Field(default="02", max_length=2)
    monto: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)


class Anticipo(BaseModel):
    tipo_doc_rel: Optional[str] = None
    nro_doc_rel: Optional[str] = None
    total: Decimal = Field(..., ge=0, le=MONTO_MAXIMO)


class AjustesGlobales(BaseModel):
    descuentos: list[DescuentoGlobal] = Field(default_factory=list)
    anticipos: list[Anticipo] = Field(default_factory=list)
    redondeo: Optional[Decimal] = None


class TotalesDocumento(BaseModel):
    valor_venta: Decimal = ZERO
    mto_oper_gravadas: Decimal = ZERO
    mto_oper_exoneradas: Decimal = ZERO
    mto_oper_inafectas: Decimal = ZERO
    mto_oper_exportacion: Decimal = ZERO
    mto_oper_gratuitas: Decimal = ZERO
    mto_igv_gratuitas: Decimal = ZERO
    mto_igv: Decimal = ZERO
    mto_base_ivap: Decimal = ZERO
    mto_ivap: Decimal = ZERO
    mto_isc: Decimal = ZERO
    mto_icbper: Decimal = ZERO
    mto_otros_tributos: Decimal = ZERO
    total_impuestos: Decimal = ZERO
    sub_total: Decimal = ZERO
    mto_imp_venta: Decimal = ZERO
    redondeo: Decimal = ZERO
    mto_descuentos: Decimal = ZERO
    descuento_global: Decimal = ZERO
    total_anticipos: Decimal = ZERO


# ─────────────────────────────────────────────────────────────
# BANCARIZACIÓN Y MEDIOS DE PAGO
# ─────────────────────────────────────────────────────────────

class MedioPagoBancarizacion(BaseModel):
    """Entrada del catálogo de medios de pago válidos (Ley N° 28194)."""
    codigo: str
    descripcion: str
    requiere_numero_operacion: bool = True
    requiere_banco: bool = True
    requiere_fecha: bool = True
    observaciones: Optional[str] = None

    model_config = {"frozen": True}


class DatosBancarizacion(BaseModel):
    medio_pago: Optional[str] = Field(None, max_length=50)
    numero_operacion: Optional[str] = Field(None, max_length=100)
    fecha_pago: Optional[str] = None
    banco: Optional[str] = Field(None, max_length=100)
    observaciones: Optional[str] = Field(None, max_length=500)


class ValidacionBancarizacion(BaseModel):
    valido: bool
    errores: list[str] = Field(default_factory=list)
    medio_pago: Optional[MedioPagoBancarizacion] = None


class BancarizacionResult(BaseModel):
    aplica: bool
    umbral: Optional[Decimal] = None
    validado: bool = False
    medio_pago: Optional[str] = None
    numero_operacion: Optional[str] = None
    fecha_pago: Optional[str] = None
    banco: Optional[str] = None
    observaciones: Optional[str] = None
    advertencia: Optional[str] = None
    errores: list[str] = Field(default_factory=list)


class MedioPagoEntrada(BaseModel):
    tipo: Optional[str] = Field(None, max_length=50)
    monto: Optional[Decimal] = None
    referencia: Optional[str] = Field(None, max_length=100)


class MedioPagoProcesado(BaseModel):
    tipo: str
    descripcion: str
    monto: Decimal
    referencia: Optional[str] = None


class ValidacionMediosPago(BaseModel):
    valido: bool
    errores: list[str] = Field(default_factory=list)
    total_pagos: Decimal = ZERO


# ─────────────────────────────────────────────────────────────
# DETRACCIÓN
# ─────────────────────────────────────────────────────────────

class CatalogoDetraccion(BaseModel):
    """Catálogo 54: bien o servicio sujeto a detracción."""
    codigo: str
    descripcion: str
    porcentaje: Decimal
    codigo_factpro: str

    model_config = {"frozen": True}


class MedioPagoDetraccion(BaseModel):
    codigo: str
    descripcion: str

    model_config = {"frozen": True}


class DetraccionEntrada(BaseModel):
    codigo_bien_servicio: Optional[str] = Field(None, max_length=3)
    porcentaje: Optional[Decimal] = Field(None, ge=0, le=100)
    monto: Optional[Decimal] = Field(None, ge=0)
    cuenta_banco: Optional[str] = None
    codigo_medio_pago: Optional[str] = None


class CalculoDetraccion(BaseModel):
    codigo: str
    porcentaje: Decimal
    monto: Decimal


class DetraccionResult(BaseModel):
    codigo_bien_servicio: str
    descripcion_bien_servicio: str
    codigo_medio_pago: str
    descripcion_medio_pago: str
    cuenta_banco: str
    porcentaje: Decimal
    monto: Decimal


# ─────────────────────────────────────────────────────────────
# DOCUMENTO
# ─────────────────────────────────────────────────────────────

class Leyenda(BaseModel):
    code: str
    value: str


class Cliente(BaseModel):
    tipo_documento: Optional[str] = Field(None, description="Catálogo 06: 1=DNI, 6=RUC")
    numero_documento: Optional[str] = None
    razon_social: Optional[str] = None


class Percepcion(BaseModel):
    cod_regimen: Optional[str] = None
    monto: Decimal = Field(default=ZERO, ge=0)


class Documento(BaseModel):
    """Datos de un comprobante tal como llegan antes de crearlo o actualizarlo."""
    tipo_documento: TipoDocumento = TipoDocumento.FACTURA
    serie: Optional[str] = None
    tipo_operacion: str = OPERACION_VENTA_INTERNA
    moneda: str = Field(default="PEN", min_length=3, max_length=3)
    cliente: Optional[Cliente] = None
    detalles: list[Detalle]
    descuentos: list[DescuentoGlobal] = Field(default_factory=list)
    anticipos: list[Anticipo] = Field(default_factory=list)
    redondeo: Optional[Decimal] = None
    bancarizacion: Optional[DatosBancarizacion] = None
    medios_pago: list[MedioPagoEntrada] = Field(default_factory=list)
    detraccion: Optional[DetraccionEntrada] = None
    percepcion: Optional[Percepcion] = None

    def ajustes(self) -> AjustesGlobales:
        return AjustesGlobales(
            descuentos=self.descuentos, anticipos=self.anticipos, redondeo=self.redondeo,
        )


class ResultadoDocumento(BaseModel):
    valido: bool
    errores: list[str] = Field(default_factory=list)
    detalles: list[LineaCalculada]
    totales: TotalesDocumento
    bancarizacion: BancarizacionResult
    medios_pago: Optional[list[MedioPagoProcesado]] = None
    detraccion: Optional[DetraccionResult] = None
    leyendas: list[Leyenda] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────
# API REQUESTS
# ─────────────────────────────────────────────────────────────

class TotalesRequest(BaseModel):
    detalles: list[Detalle]
    descuentos: list[DescuentoGlobal] = Field(default_factory=list)
    anticipos: list[Anticipo] = Field(default_factory=list)
    redondeo: Optional[Decimal] = None


class TotalesResponse(BaseModel):
    detalles: list[LineaCalculada]
    totales: TotalesDocumento


class MontoLetrasRequest(BaseModel):
    monto: Decimal = Field(..., ge=0)
    moneda: str = "PEN"


class BancarizacionValidarRequest(BaseModel):
    monto_total: Decimal = Field(..., ge=0)
    moneda: Literal["PEN", "USD"]
    bancarizacion: Optional[DatosBancarizacion] = None


class MediosPagoValidarRequest(BaseModel):
    monto_total: Decimal = Field(..., ge=0)
    medios_pago: list[MedioPagoEntrada] = Field(default_factory=list)


class DetraccionCalcularRequest(BaseModel):
    codigo_bien_servicio: str = Field(..., max_length=3)
    monto_total: Decimal = Field(..., ge=0)
    porcentaje_personalizado: Optional[Decimal] = Field(None, ge=0, le=100)


# ─────────────────────────────────────────────────────────────
# GENERIC
# ─────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str
    code: Optional[str] = None
    errores: Optional[list[str]] = None


class HealthResponse(BaseModel):
    """Health check."""
    status: str = "ok"
    version: str
    igv_porcentaje: Decimal
