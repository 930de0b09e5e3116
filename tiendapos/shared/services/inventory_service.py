from typing import List, Dict, Any, Iterable, Tuple
from sqlalchemy.orm import Session
from datetime import datetime
import logging

from tiendapos.core.errors import ValidationError
from tiendapos.shared.database.models import Product, InventoryMovement

logger = logging.getLogger(__name__)

class InventoryService:
    """
    Guardián de stock.

    Las verificaciones no modifican nada: devuelven la lista de productos que
    incumplen (vacía = OK). Quien llama decide si rechaza la operación o la
    reporta como advertencia. `apply_stock_changes` es el único punto que
    mueve el stock y deja rastro en `inventory_movements`.

    `items` siempre es una lista de {product_id, quantity}.
    """

    @staticmethod
    def lock_products(db: Session, product_ids: Iterable[int], allow_inactive: bool = False) -> Dict[int, Product]:
        """
        Obtener y bloquear (SELECT FOR UPDATE) los productos de una operación.

        Raises:
            ValidationError: si algún producto no existe o está inactivo
        """
        ids = sorted(set(product_ids))
        products = db.query(Product).filter(
            Product.id.in_(ids)
        ).order_by(Product.id).with_for_update().all()

        by_id = {p.id: p for p in products}
        missing = [pid for pid in ids if pid not in by_id]
        if missing:
            raise ValidationError(
                "Productos no encontrados: " + ", ".join(f"#{pid}" for pid in missing)
            )

        if not allow_inactive:
            inactive = [p for p in products if not p.is_active]
            if inactive:
                raise ValidationError(
                    "Productos inactivos: " + ", ".join(p.name for p in inactive)
                )

        return by_id

    @staticmethod
    def check_sufficient_stock(products: Dict[int, Product], items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Productos cuyo stock no alcanza para descontar la cantidad pedida"""
        insufficient = []
        for item in items:
            product = products[item['product_id']]
            available = product.stock or 0
            if available < item['quantity']:
                insufficient.append({
                    "producto_id": product.id,
                    "nombre": product.name,
                    "disponible": available,
                    "solicitado": item['quantity'],
                    "deficit": item['quantity'] - available
                })
        return insufficient

    @staticmethod
    def check_min_stock(products: Dict[int, Product], items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Productos que quedarían bajo su stock mínimo tras descontar"""
        violations = []
        for item in items:
            product = products[item['product_id']]
            if product.min_stock is None:
                continue
            current = product.stock or 0
            resulting = current - item['quantity']
            if resulting < product.min_stock:
                violations.append({
                    "producto_id": product.id,
                    "nombre": product.name,
                    "stock_actual": current,
                    "stock_minimo": product.min_stock,
                    "resultante": resulting,
                    "faltante": product.min_stock - resulting
                })
        return violations

    @staticmethod
    def check_max_stock_on_increase(products: Dict[int, Product], items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Productos que superarían su stock máximo tras sumar"""
        violations = []
        for item in items:
            product = products[item['product_id']]
            if product.max_stock is None:
                continue
            current = product.stock or 0
            resulting = current + item['quantity']
            if resulting > product.max_stock:
                violations.append({
                    "producto_id": product.id,
                    "nombre": product.name,
                    "stock_actual": current,
                    "stock_maximo": product.max_stock,
                    "resultante": resulting,
                    "exceso": resulting - product.max_stock
                })
        return violations

    @staticmethod
    def check_max_stock_on_revert(products: Dict[int, Product], items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Productos que superarían su máximo al devolver las unidades de una venta"""
        return InventoryService.check_max_stock_on_increase(products, items)

    @staticmethod
    def apply_stock_changes(
        db: Session,
        products: Dict[int, Product],
        items: List[Dict[str, Any]],
        sign: int,
        change_type: str,
        user_id: int,
        reference_id: int,
        notes: str
    ) -> None:
        """
        Sumar (sign=+1) o restar (sign=-1) las cantidades de los items.

        Debe llamarse con los productos ya bloqueados y las verificaciones
        hechas; no hace commit.
        """
        movements = []

        for item in items:
            product = products[item['product_id']]
            quantity_before = product.stock or 0
            product.stock = quantity_before + sign * item['quantity']

            if product.stock < 0:
                raise ValidationError(
                    f"Stock insuficiente para '{product.name}'. Disponible: {quantity_before}, "
                    f"requerido: {item['quantity']}."
                )

            movements.append(InventoryMovement(
                product_id=product.id,
                change_type=change_type,
                quantity_before=quantity_before,
                quantity_after=product.stock,
                user_id=user_id,
                reference_id=reference_id,
                notes=notes,
                created_at=datetime.now()
            ))

        db.add_all(movements)
        logger.info(f"{change_type}: {len(movements)} productos ajustados (ref #{reference_id})")

    @staticmethod
    def diff_items(
        previous: List[Dict[str, Any]],
        current: List[Dict[str, Any]]
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Reconciliar dos versiones de las líneas de una compra.

        Returns:
            (aumentos, disminuciones): cantidades netas por producto que hay
            que sumar y restar al stock para pasar de `previous` a `current`.
        """
        delta: Dict[int, int] = {}
        for item in previous:
            delta[item['product_id']] = delta.get(item['product_id'], 0) - item['quantity']
        for item in current:
            delta[item['product_id']] = delta.get(item['product_id'], 0) + item['quantity']

        increases = [{"product_id": pid, "quantity": q} for pid, q in delta.items() if q > 0]
        decreases = [{"product_id": pid, "quantity": -q} for pid, q in delta.items() if q < 0]
        return increases, decreases
