# tiendapos/shared/services/balance_service.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from tiendapos.shared.rules import SaleState


@dataclass(frozen=True)
class Balance:
    paid: Decimal
    pending: Decimal
    percent_paid: int
    state: SaleState


def calculate_balance(total, amounts: Iterable, cancelled: bool = False) -> Balance:
    """
    Calcular pagado, saldo pendiente, porcentaje y estado de una venta.

    Función pura: se invoca en cada lectura y en cada cambio del libro de
    abonos, nunca se guarda un resultado para reutilizarlo.

    - pending = max(0, total - Σ amounts)
    - percent_paid = round(paid / total * 100), 0 si total == 0
    - state: CANCELADA si la venta fue anulada, PAGADA si pending == 0,
      PENDIENTE en otro caso
    """
    total = Decimal(str(total or 0))
    paid = sum((Decimal(str(a)) for a in amounts), Decimal("0"))
    pending = max(Decimal("0"), total - paid)

    if total == 0:
        percent = 0
    else:
        percent = int((paid / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    if cancelled:
        state = SaleState.CANCELLED
    elif pending == 0:
        state = SaleState.PAID
    else:
        state = SaleState.PENDING

    return Balance(paid=paid, pending=pending, percent_paid=percent, state=state)
