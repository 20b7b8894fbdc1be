"""
FACTURA-PE — Monto en letras (leyenda 1000)

Run: pytest tests/ -v
"""

from decimal import Decimal

from factura_pe.utils.numero_letras import entero_a_letras, to_words


class TestEnteroALetras:
    def test_units_and_teens(self):
        assert entero_a_letras(1) == "uno"
        assert entero_a_letras(15) == "quince"
        assert entero_a_letras(16) == "dieciséis"
        assert entero_a_letras(20) == "veinte"

    def test_tens(self):
        assert entero_a_letras(21) == "veinte y uno"
        assert entero_a_letras(45) == "cuarenta y cinco"
        assert entero_a_letras(90) == "noventa"

    def test_hundreds(self):
        assert entero_a_letras(100) == "cien"
        assert entero_a_letras(101) == "ciento uno"
        assert entero_a_letras(118) == "ciento dieciocho"
        assert entero_a_letras(500) == "quinientos"

    def test_thousands(self):
        assert entero_a_letras(1000) == "mil"
        assert entero_a_letras(1500) == "mil quinientos"
        assert entero_a_letras(2000) == "dos mil"
        assert entero_a_letras(999_999) == (
            "novecientos noventa y nueve mil novecientos noventa y nueve"
        )

    def test_million_is_out_of_range(self):
        assert entero_a_letras(1_000_000) == "número muy grande"


class TestToWords:
    def test_soles(self):
        assert to_words(Decimal("118.00"), "PEN") == "CIENTO DIECIOCHO CON 00/100 SOLES"

    def test_zero_dollars(self):
        assert to_words(Decimal("0.00"), "USD") == "CERO CON 00/100 DÓLARES AMERICANOS"

    def test_cents(self):
        assert to_words(Decimal("2500.75")) == "DOS MIL QUINIENTOS CON 75/100 SOLES"

    def test_cents_rounded_half_up(self):
        assert to_words("10.005") == "DIEZ CON 01/100 SOLES"

    def test_unknown_currency_falls_back_to_soles(self):
        assert to_words(Decimal("1"), "EUR") == "UNO CON 00/100 SOLES"

    def test_accented_words_uppercased(self):
        assert to_words(Decimal("16")) == "DIECISÉIS CON 00/100 SOLES"

    def test_negative_amount_keeps_sign(self):
        assert to_words(Decimal("-38.20")) == "MENOS TREINTA Y OCHO CON 20/100 SOLES"

    def test_negative_cents_only(self):
        assert to_words(Decimal("-0.50"), "USD") == "MENOS CERO CON 50/100 DÓLARES AMERICANOS"

    def test_one_million_placeholder(self):
        assert to_words(Decimal("1000000.50")) == "NÚMERO MUY GRANDE CON 50/100 SOLES"
