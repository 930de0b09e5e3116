# tiendapos/shared/rules.py
"""
Reglas de negocio centralizadas.

Límites y validaciones que comparten los schemas de request y los
servicios. Ningún otro módulo define sus propios topes: si una cota cambia,
cambia aquí.

Las funciones lanzan `BusinessRuleViolation` (subclase de ValueError), de
modo que pydantic la convierte en error de validación dentro de un schema
y los servicios la traducen a `ValidationError` HTTP.
"""
import re
import unicodedata
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

# ==================== LÍMITES ====================

MAX_ITEMS = 200
QUANTITY_MIN = 1
QUANTITY_MAX = 999_999
SALE_UNIT_PRICE_MIN = 1
PURCHASE_UNIT_PRICE_MIN = 0
UNIT_PRICE_MAX = 99_999_999
TOTAL_MIN = 1
TOTAL_MAX = 99_999_999
AMOUNT_MIN = 1
AMOUNT_MAX = 99_999_999

CLIENT_DESCRIPTION_MAX = 200
NOTES_MAX = 500
DELETION_REASON_MAX = 255

PAYMENT_METHOD_NAME_MAX = 100
DESCRIPTION_MAX = 200
ROLE_NAME_MAX = 50
IDENTIFICATION_TYPE_NAME_MAX = 50
IDENTIFICATION_TYPE_ABBR_MAX = 10
PRODUCT_NAME_MAX = 150

PROTECTED_ROLE = "administrador"

# Letras (con tildes), espacios, guiones y puntos
NAME_PATTERN = re.compile(r"^[A-Za-zÁÉÍÓÚáéíóúÑñ\s\-.]+$")


class SaleState(str, Enum):
    PENDING = "PENDIENTE"
    PAID = "PAGADA"
    CANCELLED = "CANCELADA"


class BusinessRuleViolation(ValueError):
    """Una regla de negocio no se cumple"""


# (id_producto, cantidad, precio_unitario)
Line = Tuple[int, int, Decimal]


def _fmt(value) -> str:
    """Formato es-CO: 99999999 -> 99.999.999, 1234.5 -> 1.234,50"""
    amount = Decimal(value)
    text = f"{int(amount):,}" if amount == amount.to_integral_value() else f"{amount:,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


# ==================== DINERO ====================

def validate_money_precision(value: Optional[Decimal], label: str = "El valor") -> Optional[Decimal]:
    """Los montos se guardan con 2 decimales; más precisión se rechaza en lugar de redondear"""
    if value is None:
        return None
    exponent = value.normalize().as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise BusinessRuleViolation(f"{label} admite máximo 2 decimales.")
    return value


# ==================== TEXTO ====================

def normalize_text(value: Optional[str]) -> str:
    """Recorta y colapsa espacios internos"""
    return re.sub(r"\s+", " ", (value or "").strip())


def canonical(value: Optional[str]) -> str:
    """Forma canónica para comparar duplicados: sin tildes, minúsculas"""
    decomposed = unicodedata.normalize("NFD", normalize_text(value))
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn").lower()


def validate_name(value: Optional[str], max_length: int, label: str = "El nombre", pattern: bool = True) -> str:
    name = normalize_text(value)
    if not name:
        raise BusinessRuleViolation(f"{label} es obligatorio.")
    if pattern and not NAME_PATTERN.match(name):
        raise BusinessRuleViolation(f"{label} solo puede contener letras, espacios, guiones y puntos.")
    if len(name) > max_length:
        raise BusinessRuleViolation(f"{label} admite máximo {max_length} caracteres.")
    return name


def validate_optional_text(value: Optional[str], max_length: int, label: str) -> Optional[str]:
    text = normalize_text(value)
    if len(text) > max_length:
        raise BusinessRuleViolation(f"{label} admite máximo {max_length} caracteres.")
    return text or None


# ==================== LÍNEAS Y TOTALES ====================

def compute_total(lines: Iterable[Line]) -> Decimal:
    """Σ cantidad * precio_unitario"""
    return sum((Decimal(qty) * Decimal(price) for _, qty, price in lines), Decimal("0"))


def validate_lines(lines: Sequence[Line], min_unit_price: int = SALE_UNIT_PRICE_MIN) -> Decimal:
    """
    Validar las líneas de una venta o compra y devolver el total.

    Reglas:
        - Entre 1 y MAX_ITEMS líneas.
        - Un producto no puede repetirse.
        - cantidad ∈ [QUANTITY_MIN, QUANTITY_MAX].
        - precio_unitario ∈ [min_unit_price, UNIT_PRICE_MAX].
    """
    if not lines:
        raise BusinessRuleViolation("Debes agregar al menos un producto.")
    if len(lines) > MAX_ITEMS:
        raise BusinessRuleViolation(f"No se pueden registrar más de {MAX_ITEMS} ítems.")

    seen = set()
    for row, (product_id, quantity, unit_price) in enumerate(lines, start=1):
        if not product_id:
            raise BusinessRuleViolation(f"Debes seleccionar el producto en la fila #{row}.")
        if product_id in seen:
            raise BusinessRuleViolation(f"El producto de la fila #{row} ya fue seleccionado en otra fila.")
        seen.add(product_id)

        if not (QUANTITY_MIN <= quantity <= QUANTITY_MAX):
            raise BusinessRuleViolation(
                f"La cantidad de la fila #{row} debe estar entre {_fmt(QUANTITY_MIN)} y {_fmt(QUANTITY_MAX)}."
            )
        if not (min_unit_price <= unit_price <= UNIT_PRICE_MAX):
            raise BusinessRuleViolation(
                f"El precio unitario de la fila #{row} debe estar entre {_fmt(min_unit_price)} y {_fmt(UNIT_PRICE_MAX)}."
            )

    return compute_total(lines)


def validate_sale_total(total: Decimal) -> Decimal:
    if not (TOTAL_MIN <= total <= TOTAL_MAX):
        raise BusinessRuleViolation(
            f"El total de la venta debe estar entre $ {_fmt(TOTAL_MIN)} y $ {_fmt(TOTAL_MAX)}."
        )
    return total


def validate_purchase_total(total: Decimal) -> Decimal:
    if total > TOTAL_MAX:
        raise BusinessRuleViolation(f"El total de la compra no puede superar $ {_fmt(TOTAL_MAX)}.")
    return total


# ==================== PAGOS ====================

def validate_amount(amount: Decimal, label: str = "El monto") -> Decimal:
    if not (AMOUNT_MIN <= amount <= AMOUNT_MAX):
        raise BusinessRuleViolation(f"{label} debe estar entre {_fmt(AMOUNT_MIN)} y {_fmt(AMOUNT_MAX)}.")
    return amount


def validate_initial_payments(
    amounts: List[Decimal],
    total: Decimal,
    client_description: Optional[str]
) -> bool:
    """
    Validar los pagos iniciales de una venta.

    Returns:
        bool: True si la venta queda fiada (Σ pagos < total).

    Raises:
        BusinessRuleViolation: monto fuera de rango, pagos que exceden el
            total, o venta fiada sin cliente.
    """
    for row, amount in enumerate(amounts, start=1):
        validate_amount(amount, label=f"El monto del pago #{row}")

    paid = sum(amounts, Decimal("0"))
    if paid > total:
        raise BusinessRuleViolation(
            f"El total de pagos (${_fmt(paid)}) excede el total de la venta "
            f"(${_fmt(total)}) por ${_fmt(paid - total)}."
        )

    is_credit = paid < total
    if is_credit and not normalize_text(client_description):
        raise BusinessRuleViolation("Para ventas fiadas es obligatorio especificar el nombre del cliente.")
    return is_credit


def validate_installment(amount: Decimal, pending_balance: Decimal, state: str) -> Decimal:
    """Validar un abono contra el saldo pendiente actual de la venta"""
    if state == SaleState.PAID.value:
        raise BusinessRuleViolation("La venta ya está pagada.")
    if state == SaleState.CANCELLED.value:
        raise BusinessRuleViolation("La venta está cancelada.")
    if amount <= 0:
        raise BusinessRuleViolation("El monto debe ser mayor a $0.")
    if amount > pending_balance:
        raise BusinessRuleViolation("El monto no puede exceder el saldo pendiente.")
    return validate_amount(amount)
