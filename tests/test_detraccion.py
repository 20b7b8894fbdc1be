"""
FACTURA-PE — Detracciones (catálogo 54)

Run: pytest tests/ -v
"""

import logging
from decimal import Decimal
from unittest.mock import patch

import pytest

from factura_pe.schemas.models import DetraccionEntrada
from factura_pe.services.detraccion_service import (
    CATALOGO_DETRACCIONES, MEDIOS_PAGO_DETRACCION, DetraccionError, DetraccionService,
)


class TestCatalogo:
    def setup_method(self):
        self.service = DetraccionService()

    def test_resolver(self):
        item = self.service.resolver("001")
        assert item.porcentaje == Decimal("10")
        assert item.descripcion == "Azúcar y melaza de caña"
        assert item.codigo_factpro == "8"

    def test_code_normalized(self):
        assert self.service.normalizar_codigo("1") == "001"
        assert self.service.normalizar_codigo(37) == "037"
        assert self.service.resolver("37").codigo == "037"

    def test_unknown_code_fails(self):
        with pytest.raises(DetraccionError) as exc:
            self.service.resolver("999")
        assert exc.value.code == "DETRACCION_NO_ENCONTRADA"
        assert "999" in exc.value.message

    def test_catalogs_are_read_only(self):
        with pytest.raises(TypeError):
            CATALOGO_DETRACCIONES["998"] = CATALOGO_DETRACCIONES["001"]
        with pytest.raises(TypeError):
            del MEDIOS_PAGO_DETRACCION["001"]

    def test_es_codigo_valido(self):
        assert self.service.es_codigo_valido("022") is True
        assert self.service.es_codigo_valido("2") is False
        assert self.service.es_codigo_valido("999") is False

    def test_buscar_case_insensitive(self):
        assert [i.codigo for i in self.service.buscar("MADERA")] == ["008"]
        assert self.service.buscar("no existe") == []

    def test_agrupado_por_porcentaje(self):
        grupos = self.service.agrupado_por_porcentaje()
        assert "001" in [i.codigo for i in grupos["10%"]]
        assert [i.codigo for i in grupos["1.50%"]] == ["035", "036"]
        assert sum(len(v) for v in grupos.values()) == len(self.service.catalogo())

    def test_medios_pago(self):
        medios = self.service.medios_pago()
        assert medios[0].codigo == "001"
        assert len(medios) == 20


class TestCalcular:
    def setup_method(self):
        self.service = DetraccionService()

    def test_catalog_percentage(self):
        calculo = self.service.calcular(Decimal("1000.00"), "001")
        assert calculo.porcentaje == Decimal("10")
        assert calculo.monto == Decimal("100.00")

    def test_fractional_percentage(self):
        assert self.service.calcular(Decimal("1000"), "035").monto == Decimal("15.00")

    def test_custom_percentage(self):
        calculo = self.service.calcular(Decimal("1000"), "001", Decimal("12"))
        assert calculo.porcentaje == Decimal("12")
        assert calculo.monto == Decimal("120.00")

    def test_custom_percentage_still_checks_code(self):
        with pytest.raises(DetraccionError):
            self.service.calcular(Decimal("1000"), "999", Decimal("12"))

    def test_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="factura-pe.detraccion"):
            self.service.calcular(Decimal("1000"), "022")
        assert "Detracción calculada" in caplog.text


class TestProcesar:
    def setup_method(self):
        self.service = DetraccionService()

    def test_defaults_from_catalog(self):
        result = self.service.procesar(DetraccionEntrada(codigo_bien_servicio="037"), Decimal("1180"))
        assert result.porcentaje == Decimal("12")
        assert result.monto == Decimal("141.60")
        assert result.codigo_medio_pago == "001"
        assert result.descripcion_medio_pago == "Depósito en cuenta"

    def test_input_amount_and_percentage_win(self):
        entrada = DetraccionEntrada(codigo_bien_servicio="037", porcentaje=Decimal("10"), monto=Decimal("99"))
        result = self.service.procesar(entrada, Decimal("1180"))
        assert result.porcentaje == Decimal("10")
        assert result.monto == Decimal("99.00")

    def test_account_priority(self):
        entrada = DetraccionEntrada(codigo_bien_servicio="037", cuenta_banco="00-111")
        assert self.service.procesar(entrada, Decimal("1000"), "00-222").cuenta_banco == "00-111"

        entrada = DetraccionEntrada(codigo_bien_servicio="037")
        assert self.service.procesar(entrada, Decimal("1000"), "00-222").cuenta_banco == "00-222"

        with patch("factura_pe.services.detraccion_service.settings") as mock_settings:
            mock_settings.cuenta_detraccion_default = "00-333"
            assert self.service.procesar(entrada, Decimal("1000")).cuenta_banco == "00-333"

    def test_account_empty_by_default(self):
        entrada = DetraccionEntrada(codigo_bien_servicio="037")
        assert self.service.procesar(entrada, Decimal("1000")).cuenta_banco == ""

    def test_unknown_payment_medium_falls_back(self, caplog):
        entrada = DetraccionEntrada(codigo_bien_servicio="037", codigo_medio_pago="777")
        with caplog.at_level(logging.WARNING, logger="factura-pe.detraccion"):
            result = self.service.procesar(entrada, Decimal("1000"))
        assert result.codigo_medio_pago == "001"
        assert "777" in caplog.text

    def test_known_payment_medium(self):
        entrada = DetraccionEntrada(codigo_bien_servicio="037", codigo_medio_pago="003")
        assert self.service.procesar(entrada, Decimal("1000")).descripcion_medio_pago == "Transferencia de fondos"

    def test_code_required(self):
        with pytest.raises(DetraccionError) as exc:
            self.service.procesar(DetraccionEntrada(), Decimal("1000"))
        assert exc.value.code == "DETRACCION_REQUERIDA"
