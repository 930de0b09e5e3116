from decimal import Decimal

from tiendapos.shared.rules import SaleState
from tiendapos.shared.services.balance_service import calculate_balance


def test_pago_completo_queda_pagada():
    balance = calculate_balance(2000, [2000])
    assert balance.paid == Decimal("2000")
    assert balance.pending == Decimal("0")
    assert balance.percent_paid == 100
    assert balance.state == SaleState.PAID


def test_pago_parcial_queda_pendiente():
    balance = calculate_balance(Decimal("2000"), [Decimal("500")])
    assert balance.pending == Decimal("1500")
    assert balance.percent_paid == 25
    assert balance.state == SaleState.PENDING


def test_saldo_nunca_es_negativo():
    balance = calculate_balance(1000, [600, 600])
    assert balance.pending == Decimal("0")
    assert balance.state == SaleState.PAID


def test_total_cero_no_divide():
    balance = calculate_balance(0, [])
    assert balance.percent_paid == 0
    assert balance.pending == Decimal("0")


def test_porcentaje_redondea_hacia_arriba_en_la_mitad():
    # 1 / 8 = 12.5 %
    assert calculate_balance(8, [1]).percent_paid == 13
    # 1 / 3 = 33.33 %
    assert calculate_balance(3, [1]).percent_paid == 33


def test_venta_anulada_queda_cancelada():
    balance = calculate_balance(2000, [500], cancelled=True)
    assert balance.state == SaleState.CANCELLED
    assert balance.pending == Decimal("1500")


def test_sin_pagos():
    balance = calculate_balance(1500, [])
    assert balance.paid == Decimal("0")
    assert balance.pending == Decimal("1500")
    assert balance.state == SaleState.PENDING
