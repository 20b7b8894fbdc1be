"""
FACTURA-PE — Monto en letras
Leyenda 1000 de SUNAT: "<entero en letras> CON <cc>/100 <MONEDA>".

Soporta montos menores a un millón; desde 1 000 000 la parte entera
se reemplaza por un texto fijo.
"""

from factura_pe.utils.money import money

UNIDADES = [
    "", "uno", "dos", "tres", "cuatro", "cinco", "seis", "siete", "ocho", "nueve",
    "diez", "once", "doce", "trece", "catorce", "quince", "dieciséis",
    "diecisiete", "dieciocho", "diecinueve", "veinte",
]

DECENAS = [
    "", "", "veinte", "treinta", "cuarenta", "cincuenta",
    "sesenta", "setenta", "ochenta", "noventa",
]

CENTENAS = [
    "", "ciento", "doscientos", "trescientos", "cuatrocientos", "quinientos",
    "seiscientos", "setecientos", "ochocientos", "novecientos",
]

NOMBRES_MONEDA = {
    "PEN": "SOLES",
    "USD": "DÓLARES AMERICANOS",
}

FUERA_DE_RANGO = "número muy grande"


def entero_a_letras(n: int) -> str:
    if n < 21:
        return UNIDADES[n]
    if n < 100:
        d, u = divmod(n, 10)
        return f"{DECENAS[d]} y {UNIDADES[u]}" if u else DECENAS[d]
    if n < 1000:
        c, r = divmod(n, 100)
        p = "cien" if n == 100 else CENTENAS[c]
        return f"{p} {entero_a_letras(r)}" if r else p
    if n < 1_000_000:
        m, r = divmod(n, 1000)
        p = "mil" if m == 1 else f"{entero_a_letras(m)} mil"
        return f"{p} {entero_a_letras(r)}" if r else p
    return FUERA_DE_RANGO


def to_words(amount, currency: str = "PEN") -> str:
    """
    118.00, "PEN" -> "CIENTO DIECIOCHO CON 00/100 SOLES"
    -38.20, "PEN" -> "MENOS TREINTA Y OCHO CON 20/100 SOLES"
    Unknown currencies are written as SOLES.
    """
    monto = money(amount)
    entero_str, centavos = f"{abs(monto):.2f}".split(".")
    entero = int(entero_str)
    letras = "cero" if entero == 0 else entero_a_letras(entero).strip()
    if monto < 0:
        letras = f"menos {letras}"
    moneda = NOMBRES_MONEDA.get(currency, NOMBRES_MONEDA["PEN"])
    return f"{letras} con {centavos}/100 {moneda}".upper()
