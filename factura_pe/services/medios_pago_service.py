"""
FACTURA-PE: Múltiples medios de pago por comprobante.
Cada entrada se valida contra el catálogo de bancarización; la suma de
los pagos no puede quedar por debajo del total (el exceso es vuelto).
"""
import logging

from factura_pe.schemas.models import (
    DatosBancarizacion, MedioPagoEntrada, MedioPagoProcesado, ValidacionMediosPago,
)
from factura_pe.services.bancarizacion_service import get_medio_pago
from factura_pe.utils.money import ZERO, format_amount, money, to_decimal

logger = logging.getLogger("factura-pe.medios_pago")


class MediosPagoService:

    def validar(self, medios: list[MedioPagoEntrada], monto_total) -> ValidacionMediosPago:
        if not medios:
            return ValidacionMediosPago(valido=True)

        errores = []
        total_pagos = ZERO

        for n, medio in enumerate(medios, start=1):
            if not medio.tipo:
                errores.append(f"Medio de pago #{n}: El tipo es requerido.")
                continue

            catalogo = get_medio_pago(medio.tipo)
            if catalogo is None:
                errores.append(f"Medio de pago #{n}: El tipo '{medio.tipo}' no es válido o no está activo.")
                continue

            monto = to_decimal(medio.monto)
            if monto <= 0:
                errores.append(f"Medio de pago #{n} ({catalogo.descripcion}): El monto debe ser mayor a 0.")
                continue

            if catalogo.requiere_numero_operacion and not medio.referencia:
                errores.append(
                    f"Medio de pago #{n} ({catalogo.descripcion}): Requiere número de referencia/operación."
                )

            total_pagos += monto

        monto_total = to_decimal(monto_total)
        if 0 < total_pagos < monto_total:
            errores.append(
                f"La suma de los medios de pago ({format_amount(total_pagos)}) es menor al monto total "
                f"del documento ({format_amount(monto_total)}). "
                f"Falta: {format_amount(monto_total - total_pagos)}"
            )

        return ValidacionMediosPago(valido=not errores, errores=errores, total_pagos=money(total_pagos))

    def preparar(self, medios: list[MedioPagoEntrada]) -> list[MedioPagoProcesado]:
        """Entries with a known type and positive amount, described from the catalog."""
        procesados = []
        for medio in medios:
            catalogo = get_medio_pago(medio.tipo)
            monto = to_decimal(medio.monto)
            if catalogo is None or monto <= 0:
                continue
            procesados.append(MedioPagoProcesado(
                tipo=catalogo.codigo, descripcion=catalogo.descripcion,
                monto=money(monto), referencia=medio.referencia,
            ))
        return procesados

    def total(self, medios: list[MedioPagoEntrada]):
        return money(sum((to_decimal(m.monto) for m in medios), ZERO))

    def desde_bancarizacion(self, datos: DatosBancarizacion | None, monto_total) -> list[MedioPagoEntrada]:
        """Legacy single-payment block converted into one payment entry."""
        if datos is None or not datos.medio_pago:
            return []
        logger.debug(f"Convirtiendo bancarización {datos.medio_pago} en medio de pago")
        return [MedioPagoEntrada(
            tipo=datos.medio_pago, monto=money(monto_total), referencia=datos.numero_operacion,
        )]


medios_pago_service = MediosPagoService()
