"""
FACTURA-PE — Totales del comprobante

Run: pytest tests/ -v
"""

import logging
from decimal import Decimal

from factura_pe.schemas.models import (
    AjustesGlobales, Anticipo, Descuento, DescuentoGlobal, Detalle, PrecioConIGV, TipoAfectacionIGV,
    ValorSinIGV,
)
from factura_pe.sunat.totals import calculate_totals


def linea(monto, cantidad=1, tip=TipoAfectacionIGV.GRAVADO, con_igv=False, **kw):
    precio = PrecioConIGV(monto=Decimal(monto)) if con_igv else ValorSinIGV(monto=Decimal(monto))
    return Detalle(cantidad=Decimal(cantidad), precio=precio, tip_afe_igv=tip, **kw)


def totales(detalles, ajustes=None):
    return calculate_totals(detalles, ajustes)[1]


class TestCategorias:
    def setup_method(self):
        self.t = totales([
            linea("100"),
            linea("50", tip=TipoAfectacionIGV.EXONERADO),
            linea("30", tip=TipoAfectacionIGV.INAFECTO),
        ])

    def test_category_bases(self):
        assert self.t.mto_oper_gravadas == Decimal("100.00")
        assert self.t.mto_oper_exoneradas == Decimal("50.00")
        assert self.t.mto_oper_inafectas == Decimal("30.00")
        assert self.t.valor_venta == Decimal("180.00")

    def test_taxes_and_payable(self):
        assert self.t.mto_igv == Decimal("18.00")
        assert self.t.total_impuestos == Decimal("18.00")
        assert self.t.sub_total == Decimal("198.00")
        assert self.t.mto_imp_venta == Decimal("198.00")

    def test_sub_total_matches_bases_plus_taxes(self):
        bases = (self.t.mto_oper_gravadas + self.t.mto_oper_exoneradas + self.t.mto_oper_inafectas
                 + self.t.mto_oper_exportacion + self.t.mto_base_ivap)
        assert self.t.sub_total == bases + self.t.total_impuestos

    def test_payable_formula(self):
        assert self.t.mto_imp_venta == self.t.valor_venta + self.t.total_impuestos - self.t.total_anticipos


class TestRedondeoUnico:
    def test_sums_unrounded_line_amounts(self):
        t = totales([linea("10.00", con_igv=True) for _ in range(3)])
        assert t.valor_venta == Decimal("25.42")
        assert t.mto_igv == Decimal("4.58")
        assert t.mto_imp_venta == Decimal("30.00")


class TestOtrosTributos:
    def test_ivap_kept_apart_from_igv(self):
        t = totales([linea("100", tip=TipoAfectacionIGV.IVAP)])
        assert t.mto_base_ivap == Decimal("100.00")
        assert t.mto_ivap == Decimal("2.00")
        assert t.mto_igv == Decimal("0.00")
        assert t.mto_oper_gravadas == Decimal("0.00")
        assert t.total_impuestos == Decimal("2.00")
        assert t.mto_imp_venta == Decimal("102.00")

    def test_icbper_added_to_taxes(self):
        t = totales([linea("100", factor_icbper=Decimal("0.50"))])
        assert t.mto_icbper == Decimal("0.50")
        assert t.total_impuestos == Decimal("18.50")
        assert t.mto_imp_venta == Decimal("118.50")

    def test_isc_added_to_taxes(self):
        t = totales([linea("100", tip_sis_isc="01", porcentaje_isc=Decimal("10"))])
        assert t.mto_isc == Decimal("10.00")
        assert t.mto_igv == Decimal("19.80")
        assert t.total_impuestos == Decimal("29.80")


# ─────────────────────────────────────────────────────────────
# AJUSTES GLOBALES
# ─────────────────────────────────────────────────────────────

class TestAjustesGlobales:
    def test_advance_discount_recomputes_igv(self):
        ajustes = AjustesGlobales(descuentos=[DescuentoGlobal(cod_tipo="04", monto=Decimal("200"))])
        t = totales([linea("1000")], ajustes)
        assert t.mto_oper_gravadas == Decimal("800.00")
        assert t.mto_igv == Decimal("144.00")
        assert t.valor_venta == Decimal("1000.00")
        assert t.total_impuestos == Decimal("144.00")
        assert t.sub_total == Decimal("1180.00")
        assert t.mto_imp_venta == Decimal("1144.00")

    def test_advance_discount_logged(self, caplog):
        ajustes = AjustesGlobales(descuentos=[DescuentoGlobal(cod_tipo="04", monto=Decimal("200"))])
        with caplog.at_level(logging.INFO, logger="factura-pe.totals"):
            totales([linea("1000")], ajustes)
        assert "Anticipo aplicado" in caplog.text

    def test_base_affecting_global_discount(self):
        ajustes = AjustesGlobales(descuentos=[DescuentoGlobal(cod_tipo="02", monto=Decimal("100"))])
        t = totales([linea("1000")], ajustes)
        assert t.mto_oper_gravadas == Decimal("900.00")
        assert t.valor_venta == Decimal("900.00")
        assert t.descuento_global == Decimal("100.00")
        assert t.mto_descuentos == Decimal("100.00")

    def test_non_base_global_discount_only_reduces_payable(self):
        ajustes = AjustesGlobales(descuentos=[DescuentoGlobal(cod_tipo="03", monto=Decimal("50"))])
        t = totales([linea("1000")], ajustes)
        assert t.mto_oper_gravadas == Decimal("1000.00")
        assert t.mto_igv == Decimal("180.00")
        assert t.mto_imp_venta == Decimal("1130.00")

    def test_prepayments_subtracted_from_payable(self):
        ajustes = AjustesGlobales(anticipos=[Anticipo(tipo_doc_rel="02", nro_doc_rel="F001-1",
                                                      total=Decimal("118"))])
        t = totales([linea("1000")], ajustes)
        assert t.total_anticipos == Decimal("118.00")
        assert t.mto_imp_venta == Decimal("1062.00")

    def test_rounding_adjustment(self):
        t = totales([linea("100")], AjustesGlobales(redondeo=Decimal("-0.02")))
        assert t.redondeo == Decimal("-0.02")
        assert t.mto_imp_venta == Decimal("117.98")
        assert t.sub_total == Decimal("118.00")

    def test_line_discounts_accumulated(self):
        t = totales([linea("100", descuentos=[Descuento(monto=Decimal("10"))])])
        assert t.mto_descuentos == Decimal("10.00")
        assert t.mto_oper_gravadas == Decimal("90.00")


# ─────────────────────────────────────────────────────────────
# GRATUITAS
# ─────────────────────────────────────────────────────────────

class TestGratuitas:
    def test_fully_free_document(self):
        t = totales([linea("50", cantidad=2, tip=TipoAfectacionIGV.GRAVADO_RETIRO_PREMIO)])
        assert t.mto_oper_gratuitas == Decimal("100.00")
        assert t.mto_igv_gratuitas == Decimal("18.00")
        assert t.total_impuestos == Decimal("0.00")
        assert t.sub_total == Decimal("0.00")
        assert t.mto_imp_venta == Decimal("0.00")

    def test_free_lines_excluded_from_paid_totals(self):
        t = totales([linea("100"), linea("50", tip=TipoAfectacionIGV.INAFECTO_RETIRO)])
        assert t.mto_oper_gratuitas == Decimal("50.00")
        assert t.mto_igv_gratuitas == Decimal("0.00")
        assert t.valor_venta == Decimal("100.00")
        assert t.mto_imp_venta == Decimal("118.00")

    def test_empty_document(self):
        t = totales([])
        assert t.mto_imp_venta == Decimal("0.00")
        assert t.total_impuestos == Decimal("0.00")
