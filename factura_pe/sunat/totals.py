"""
FACTURA-PE: Totales del comprobante
===================================
Suma las líneas anotadas por categoría de afectación y aplica los
ajustes globales (descuentos, anticipos, redondeo).

REGLAS:
- 10 -> gravadas + IGV; 17 -> base IVAP + IVAP (nunca se mezcla con IGV)
- 20/30/40 -> exoneradas/inafectas/exportación; todas suman a valor_venta
- Descuento global '00'/'02': reduce gravadas y valor_venta
- Descuento global '04' (anticipo): reduce SOLO gravadas y recalcula IGV al 18%;
  total_impuestos y el importe de venta usan ese IGV, sub_total usa el de las líneas
- Otros descuentos globales: solo se restan del importe de venta
- Comprobante 100% gratuito: total_impuestos = sub_total = importe = 0
- Redondeo: solo al importe de venta
- Todo se redondea a 2 decimales una sola vez, al final
"""
import logging
from decimal import Decimal

from factura_pe.core.config import IGV_TASA_ANTICIPO
from factura_pe.schemas.models import (
    DESCUENTO_GLOBAL_ANTICIPO, DESCUENTOS_GLOBALES_AFECTAN_BASE,
    AjustesGlobales, Detalle, LineaCalculada, TipoAfectacionIGV, TotalesDocumento,
)
from factura_pe.sunat.line_resolver import resolve_lines
from factura_pe.utils.money import ZERO, money

logger = logging.getLogger("factura-pe.totals")

_CATEGORIAS = {
    TipoAfectacionIGV.GRAVADO.value: "mto_oper_gravadas",
    TipoAfectacionIGV.EXONERADO.value: "mto_oper_exoneradas",
    TipoAfectacionIGV.INAFECTO.value: "mto_oper_inafectas",
    TipoAfectacionIGV.EXPORTACION.value: "mto_oper_exportacion",
}


def _separar_descuentos_globales(ajustes: AjustesGlobales) -> tuple[Decimal, Decimal, Decimal]:
    """(afectan base, no afectan base, anticipo)"""
    afecta, no_afecta, anticipo = ZERO, ZERO, ZERO
    for d in ajustes.descuentos:
        if d.cod_tipo == DESCUENTO_GLOBAL_ANTICIPO:
            anticipo += d.monto
        elif d.cod_tipo in DESCUENTOS_GLOBALES_AFECTAN_BASE:
            afecta += d.monto
        else:
            no_afecta += d.monto
    return afecta, no_afecta, anticipo


def aggregate(lineas: list[LineaCalculada], ajustes: AjustesGlobales | None = None) -> TotalesDocumento:
    ajustes = ajustes or AjustesGlobales()
    t = {field: ZERO for field in TotalesDocumento.model_fields}

    for linea in lineas:
        imp = linea.importes
        if linea.es_gratuita:
            t["mto_oper_gratuitas"] += imp.valor_venta
            t["mto_igv_gratuitas"] += imp.igv
            t["mto_icbper"] += imp.icbper
            continue

        t["mto_descuentos"] += imp.descuentos_afectan_base + imp.descuentos_no_afectan_base
        t["mto_isc"] += imp.isc
        t["mto_icbper"] += imp.icbper

        tip = linea.tip_afe_igv.value
        if tip == TipoAfectacionIGV.IVAP.value:
            t["mto_base_ivap"] += imp.valor_venta
            t["mto_ivap"] += imp.igv
            t["valor_venta"] += imp.valor_venta
        elif tip in _CATEGORIAS:
            t[_CATEGORIAS[tip]] += imp.valor_venta
            t["valor_venta"] += imp.valor_venta
            if tip == TipoAfectacionIGV.GRAVADO.value:
                t["mto_igv"] += imp.igv

    afecta, no_afecta, anticipo = _separar_descuentos_globales(ajustes)
    igv_lineas = t["mto_igv"]

    if afecta > 0:
        t["mto_oper_gravadas"] -= afecta
        t["valor_venta"] -= afecta

    if anticipo > 0:
        logger.info(f"Descuento por anticipo {anticipo}: gravadas {t['mto_oper_gravadas']}, "
                    f"IGV {t['mto_igv']}")
        t["mto_oper_gravadas"] -= anticipo
        t["mto_igv"] = t["mto_oper_gravadas"] * IGV_TASA_ANTICIPO
        logger.info(f"Anticipo aplicado: gravadas {t['mto_oper_gravadas']}, IGV {t['mto_igv']}")

    t["descuento_global"] = afecta + no_afecta
    t["mto_descuentos"] += t["descuento_global"]
    t["total_anticipos"] = sum((a.total for a in ajustes.anticipos), ZERO)

    if t["valor_venta"] == 0 and t["mto_oper_gratuitas"] > 0:
        t["total_impuestos"] = ZERO
        t["sub_total"] = ZERO
        t["mto_imp_venta"] = ZERO
    else:
        otros = t["mto_ivap"] + t["mto_isc"] + t["mto_icbper"]
        t["total_impuestos"] = t["mto_igv"] + otros
        t["sub_total"] = t["valor_venta"] + igv_lineas + otros
        t["mto_imp_venta"] = (t["valor_venta"] + t["total_impuestos"]
                              - t["total_anticipos"] - no_afecta)

    if ajustes.redondeo is not None:
        t["redondeo"] = ajustes.redondeo
        t["mto_imp_venta"] += ajustes.redondeo

    return TotalesDocumento(**{k: money(v) for k, v in t.items()})


def calculate_totals(detalles: list[Detalle], ajustes: AjustesGlobales | None = None, *,
                     igv_porcentaje=None, ivap_porcentaje=None
                     ) -> tuple[list[LineaCalculada], TotalesDocumento]:
    """Resolve every line and aggregate them into the document totals."""
    lineas = resolve_lines(detalles, igv_porcentaje=igv_porcentaje, ivap_porcentaje=ivap_porcentaje)
    return lineas, aggregate(lineas, ajustes)
