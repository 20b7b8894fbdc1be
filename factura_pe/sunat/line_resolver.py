"""
FACTURA-PE: Cálculo de impuestos por línea
==========================================
Anota cada detalle con los importes que SUNAT valida en el XML.

REGLAS:
- Precio CON IGV (minorista): valor = precio / (1 + tasa); solo 10 e IVAP (17)
- Valor SIN IGV (mayorista): se usa tal cual
- Descuento '00' reduce la base; el resto solo reduce el valor de venta
- ISC antes del IGV y forma parte de su base; ICBPER nunca entra en la base
- Precio unitario mostrado: (valor neto + ISC) * (1 + tasa), HALF_DOWN a 2 decimales
- Gratuitas (11-16, 31-36): sin descuentos ni ISC, IGV referencial solo en 11-16
- Redondeo a 2 decimales solo al anotar; los cálculos internos no se redondean
"""
from decimal import Decimal

from factura_pe.core.config import settings
from factura_pe.schemas.models import (
    CODIGOS_GRATUITOS, CODIGOS_GRATUITOS_GRAVADOS, DESCUENTO_LINEA_AFECTA_BASE,
    Detalle, ImportesLinea, LineaCalculada, PrecioConIGV, TipoAfectacionIGV,
)
from factura_pe.utils.money import ONE, ZERO, money, money_half_down, precise, rate

_GRAVADO = TipoAfectacionIGV.GRAVADO.value
_IVAP = TipoAfectacionIGV.IVAP.value


def _tasas(detalle: Detalle, igv_porcentaje, ivap_porcentaje) -> tuple[Decimal, Decimal]:
    igv = detalle.porcentaje_igv
    if igv is None:
        igv = igv_porcentaje if igv_porcentaje is not None else settings.igv_porcentaje
    ivap = detalle.porcentaje_ivap
    if ivap is None:
        ivap = ivap_porcentaje if ivap_porcentaje is not None else settings.ivap_porcentaje
    return igv, ivap


def valor_unitario(detalle: Detalle, porcentaje_igv: Decimal, porcentaje_ivap: Decimal) -> Decimal:
    """Tax-exclusive unit value, back-calculated in retail mode."""
    if not isinstance(detalle.precio, PrecioConIGV):
        return detalle.precio.monto
    tip = detalle.tip_afe_igv.value
    if tip == _GRAVADO:
        return detalle.precio.monto / (ONE + rate(porcentaje_igv))
    if tip == _IVAP:
        return detalle.precio.monto / (ONE + rate(porcentaje_ivap))
    return detalle.precio.monto


def separar_descuentos(detalle: Detalle) -> tuple[Decimal, Decimal]:
    """(afectan base, no afectan base)"""
    afectan, no_afectan = ZERO, ZERO
    for d in detalle.descuentos:
        if d.cod_tipo == DESCUENTO_LINEA_AFECTA_BASE:
            afectan += d.monto
        else:
            no_afectan += d.monto
    return afectan, no_afectan


def _resolve_gratuita(detalle: Detalle, vu: Decimal, porcentaje_igv: Decimal) -> LineaCalculada:
    cant = detalle.cantidad
    valor_gratuito = detalle.mto_valor_gratuito if detalle.mto_valor_gratuito is not None else vu
    valor_venta = cant * valor_gratuito
    icbper = cant * detalle.factor_icbper if detalle.factor_icbper is not None else ZERO
    igv = ZERO
    if detalle.tip_afe_igv.value in CODIGOS_GRATUITOS_GRAVADOS:
        igv = valor_venta * rate(porcentaje_igv)

    return LineaCalculada(
        codigo=detalle.codigo, descripcion=detalle.descripcion, unidad=detalle.unidad,
        cantidad=cant, tip_afe_igv=detalle.tip_afe_igv, porcentaje_igv=porcentaje_igv,
        mto_valor_unitario=precise(vu),
        mto_precio_unitario=ZERO,
        mto_valor_venta=money(valor_venta),
        mto_base_igv=money(valor_venta),
        igv=money(igv),
        icbper=money(icbper),
        total_impuestos=money(igv + icbper),
        mto_valor_gratuito=valor_gratuito,
        importes=ImportesLinea(valor_venta=valor_venta, base_igv=valor_venta,
                               igv=igv, icbper=icbper),
    )


def resolve_line(detalle: Detalle, *, igv_porcentaje=None, ivap_porcentaje=None) -> LineaCalculada:
    porcentaje_igv, porcentaje_ivap = _tasas(detalle, igv_porcentaje, ivap_porcentaje)
    tip = detalle.tip_afe_igv.value
    cant = detalle.cantidad
    vu = valor_unitario(detalle, porcentaje_igv, porcentaje_ivap)

    if tip in CODIGOS_GRATUITOS:
        return _resolve_gratuita(detalle, vu, porcentaje_igv)

    valor_sin_descuento = cant * vu
    afectan, no_afectan = separar_descuentos(detalle)
    valor_venta = valor_sin_descuento - afectan - no_afectan

    isc = ZERO
    base_isc = None
    if detalle.tip_sis_isc and detalle.porcentaje_isc is not None:
        base_isc = valor_sin_descuento - afectan
        isc = base_isc * rate(detalle.porcentaje_isc)

    icbper = cant * detalle.factor_icbper if detalle.factor_icbper is not None else ZERO

    # El descuento que no afecta la base nunca reduce la base del IGV
    base_igv = valor_sin_descuento - afectan + isc

    tasa = ZERO
    if tip == _GRAVADO:
        tasa = rate(porcentaje_igv)
    elif tip == _IVAP:
        tasa = rate(porcentaje_ivap)
    igv = base_igv * tasa
    # Porcentaje informado: el que realmente se aplicó (IVAP en código 17)
    porcentaje_aplicado = porcentaje_ivap if tip == _IVAP else porcentaje_igv

    if tip in (_GRAVADO, _IVAP):
        if cant > 0:
            precio = (valor_venta / cant + isc / cant) * (ONE + tasa)
        else:
            precio = vu * (ONE + tasa)
        precio_unitario = money_half_down(precio)
    else:
        precio_unitario = money(vu)

    descuento = None
    if afectan + no_afectan > 0:
        descuento = money(afectan + no_afectan)

    return LineaCalculada(
        codigo=detalle.codigo, descripcion=detalle.descripcion, unidad=detalle.unidad,
        cantidad=cant, tip_afe_igv=detalle.tip_afe_igv, porcentaje_igv=porcentaje_aplicado,
        mto_valor_unitario=precise(vu),
        mto_precio_unitario=precio_unitario,
        mto_valor_venta=money(valor_venta),
        mto_base_igv=money(base_igv),
        igv=money(igv),
        mto_base_isc=money(base_isc) if base_isc is not None else None,
        isc=money(isc),
        icbper=money(icbper),
        total_impuestos=money(igv + isc + icbper),
        descuento=descuento,
        importes=ImportesLinea(
            valor_venta=valor_venta, base_igv=base_igv, igv=igv, isc=isc, icbper=icbper,
            descuentos_afectan_base=afectan, descuentos_no_afectan_base=no_afectan,
        ),
    )


def resolve_lines(detalles: list[Detalle], *, igv_porcentaje=None, ivap_porcentaje=None) -> list[LineaCalculada]:
    return [resolve_line(d, igv_porcentaje=igv_porcentaje, ivap_porcentaje=ivap_porcentaje)
            for d in detalles]
