"""
FACTURA-PE — Múltiples medios de pago

Run: pytest tests/ -v
"""

from decimal import Decimal

from factura_pe.schemas.models import DatosBancarizacion, MedioPagoEntrada
from factura_pe.services.medios_pago_service import MediosPagoService


def pago(tipo, monto, referencia=None):
    return MedioPagoEntrada(tipo=tipo, monto=Decimal(monto), referencia=referencia)


class TestValidar:
    def setup_method(self):
        self.service = MediosPagoService()

    def test_empty_list_is_valid(self):
        result = self.service.validar([], Decimal("150"))
        assert result.valido is True
        assert result.total_pagos == Decimal("0")

    def test_exact_payment(self):
        result = self.service.validar([pago("EFEC", "150")], Decimal("150"))
        assert result.valido is True
        assert result.total_pagos == Decimal("150.00")

    def test_shortfall(self):
        result = self.service.validar([pago("EFEC", "100"), pago("YAPE", "40", "123")], Decimal("150"))
        assert result.valido is False
        assert result.total_pagos == Decimal("140.00")
        assert result.errores == [
            "La suma de los medios de pago (140.00) es menor al monto total del documento (150.00). "
            "Falta: 10.00"
        ]

    def test_overpayment_allowed(self):
        result = self.service.validar([pago("EFEC", "160")], Decimal("150"))
        assert result.valido is True
        assert result.total_pagos == Decimal("160.00")

    def test_missing_type_skipped(self):
        result = self.service.validar([MedioPagoEntrada(monto=Decimal("50")), pago("EFEC", "150")],
                                      Decimal("150"))
        assert result.errores == ["Medio de pago #1: El tipo es requerido."]
        assert result.total_pagos == Decimal("150.00")

    def test_unknown_type_skipped(self):
        result = self.service.validar([pago("EFEC", "150"), pago("XYZ", "10")], Decimal("150"))
        assert result.errores == ["Medio de pago #2: El tipo 'XYZ' no es válido o no está activo."]

    def test_non_positive_amount_skipped(self):
        result = self.service.validar([pago("EFEC", "0")], Decimal("150"))
        assert result.errores == ["Medio de pago #1 (Efectivo): El monto debe ser mayor a 0."]
        assert result.total_pagos == Decimal("0")

    def test_missing_reference_still_summed(self):
        result = self.service.validar([pago("TRAN", "150")], Decimal("150"))
        assert result.valido is False
        assert result.errores == [
            "Medio de pago #1 (Transferencia bancaria): Requiere número de referencia/operación."
        ]
        assert result.total_pagos == Decimal("150.00")


class TestPreparar:
    def setup_method(self):
        self.service = MediosPagoService()

    def test_described_from_catalog(self):
        procesados = self.service.preparar([pago("YAPE", "40", "999"), pago("XYZ", "10"), pago("EFEC", "0")])
        assert len(procesados) == 1
        assert procesados[0].descripcion == "Yape (BCP)"
        assert procesados[0].monto == Decimal("40.00")
        assert procesados[0].referencia == "999"

    def test_total(self):
        assert self.service.total([pago("EFEC", "10.50"), pago("POS", "5.25")]) == Decimal("15.75")

    def test_from_legacy_bancarizacion(self):
        datos = DatosBancarizacion(medio_pago="TRAN", numero_operacion="OP-9", banco="BBVA")
        medios = self.service.desde_bancarizacion(datos, Decimal("2360"))
        assert len(medios) == 1
        assert medios[0].tipo == "TRAN"
        assert medios[0].monto == Decimal("2360.00")
        assert medios[0].referencia == "OP-9"

    def test_from_legacy_without_medium(self):
        assert self.service.desde_bancarizacion(DatosBancarizacion(), Decimal("100")) == []
        assert self.service.desde_bancarizacion(None, Decimal("100")) == []
