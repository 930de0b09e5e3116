# tiendapos/modules/purchases/repository.py
from sqlalchemy.orm import Session, selectinload
from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from fastapi import HTTPException
import logging

from tiendapos.core.errors import (
    ValidationError, NotFoundError, ServerError, StockInsufficientError
)
from tiendapos.shared.database.models import Purchase, PurchaseItem
from tiendapos.shared.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

class PurchasesRepository:
    def __init__(self, db: Session):
        self.db = db
        self.inventory_service = InventoryService()

    def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        return self.db.query(Purchase).options(
            selectinload(Purchase.items).selectinload(PurchaseItem.product),
            selectinload(Purchase.user)
        ).filter(Purchase.id == purchase_id).first()

    def list_purchases(self, include_deleted: bool = False) -> List[Purchase]:
        query = self.db.query(Purchase).options(
            selectinload(Purchase.items),
            selectinload(Purchase.user)
        )
        if not include_deleted:
            query = query.filter(Purchase.is_active == True)
        return query.order_by(Purchase.purchase_date.desc(), Purchase.id.desc()).all()

    def _max_stock_warnings(self, products, items) -> List[Dict[str, Any]]:
        over_max = self.inventory_service.check_max_stock_on_increase(products, items)
        return [
            {**v, "tipo": "MAX_STOCK", "mensaje": f"'{v['nombre']}' supera el máximo ({v['resultante']}/{v['stock_maximo']})"}
            for v in over_max
        ]

    def _lock_for_update(self, previous: List[Dict[str, Any]], current: List[Dict[str, Any]]):
        """Los productos nuevos deben estar activos; los anteriores se aceptan aunque ya no lo estén"""
        previous_ids = {i['product_id'] for i in previous}
        products = self.inventory_service.lock_products(self.db, previous_ids, allow_inactive=True)
        products.update(self.inventory_service.lock_products(
            self.db, [i['product_id'] for i in current if i['product_id'] not in previous_ids]
        ))
        return products

    @staticmethod
    def _build_items(items: List[Dict[str, Any]]) -> List[PurchaseItem]:
        return [
            PurchaseItem(
                product_id=item['product_id'],
                quantity=item['quantity'],
                unit_price=item['unit_price'],
                subtotal=Decimal(item['quantity']) * item['unit_price']
            )
            for item in items
        ]

    def create_purchase_atomic(
        self,
        purchase_data: Dict[str, Any],
        user_id: int
    ) -> Tuple[Purchase, List[Dict[str, Any]]]:
        """
        Registrar compra y sumar su inventario en una sola transacción.

        Una compra que deja un producto sobre su máximo se acepta; el exceso
        se devuelve como advertencia.
        """
        try:
            items = purchase_data['items']
            products = self.inventory_service.lock_products(
                self.db, [i['product_id'] for i in items]
            )
            warnings = self._max_stock_warnings(products, items)

            purchase = Purchase(
                user_id=user_id,
                purchase_date=purchase_data.get('purchase_date') or datetime.now(),
                total=purchase_data['total'],
                notes=purchase_data.get('notes'),
                is_active=True,
                created_at=datetime.now()
            )
            purchase.items = self._build_items(items)
            self.db.add(purchase)
            self.db.flush()

            self.inventory_service.apply_stock_changes(
                self.db, products, items,
                sign=+1,
                change_type='compra',
                user_id=user_id,
                reference_id=purchase.id,
                notes=f"Compra #{purchase.id}"
            )

            self.db.commit()
            logger.info(f"Compra #{purchase.id} registrada - {len(items)} productos")
            self.db.refresh(purchase)
            return purchase, warnings

        except HTTPException as e:
            logger.warning(f"Compra rechazada: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception("Error en transacción de compra")
            self.db.rollback()
            raise ServerError("Error creando compra")

    def update_purchase_atomic(
        self,
        purchase_id: int,
        purchase_data: Dict[str, Any],
        user_id: int
    ) -> Tuple[Purchase, List[Dict[str, Any]]]:
        """
        Reemplazar las líneas de una compra reconciliando el inventario.

        Solo se mueve la diferencia neta por producto entre la versión
        anterior y la nueva. Si alguna disminución dejaría stock negativo
        (las unidades ya se vendieron) la edición se rechaza completa.
        """
        try:
            purchase = self.db.query(Purchase).filter(
                Purchase.id == purchase_id
            ).with_for_update().first()
            if not purchase:
                raise NotFoundError(f"Compra {purchase_id} no encontrada")
            if not purchase.is_active:
                raise ValidationError("No se puede editar una compra eliminada.")

            previous = [{"product_id": i.product_id, "quantity": i.quantity} for i in purchase.items]
            current = purchase_data['items']
            products = self._lock_for_update(previous, current)

            increases, decreases = self.inventory_service.diff_items(previous, current)

            insufficient = self.inventory_service.check_sufficient_stock(products, decreases)
            if insufficient:
                raise StockInsufficientError(
                    insufficient,
                    message="No se puede editar la compra: el stock actual no permite descontar las unidades retiradas."
                )
            warnings = self._max_stock_warnings(products, increases)

            reference = dict(user_id=user_id, reference_id=purchase.id, notes=f"Edición compra #{purchase.id}")
            if decreases:
                self.inventory_service.apply_stock_changes(
                    self.db, products, decreases, sign=-1, change_type='ajuste_compra', **reference
                )
            if increases:
                self.inventory_service.apply_stock_changes(
                    self.db, products, increases, sign=+1, change_type='ajuste_compra', **reference
                )

            # Vaciar primero: (purchase_id, product_id) es único
            purchase.items.clear()
            self.db.flush()
            purchase.items.extend(self._build_items(current))

            purchase.total = purchase_data['total']
            purchase.notes = purchase_data.get('notes')
            if purchase_data.get('purchase_date'):
                purchase.purchase_date = purchase_data['purchase_date']

            self.db.commit()
            logger.info(
                f"Compra #{purchase.id} actualizada - {len(increases)} aumentos, {len(decreases)} disminuciones"
            )
            self.db.refresh(purchase)
            return purchase, warnings

        except HTTPException as e:
            logger.warning(f"Edición de compra {purchase_id} rechazada: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception(f"Error actualizando compra {purchase_id}")
            self.db.rollback()
            raise ServerError("Error actualizando compra")

    def soft_delete_purchase_atomic(self, purchase_id: int, reason: Optional[str], user_id: int) -> Purchase:
        """Anular compra descontando el stock que había sumado"""
        try:
            purchase = self.db.query(Purchase).filter(
                Purchase.id == purchase_id
            ).with_for_update().first()
            if not purchase:
                raise NotFoundError(f"Compra {purchase_id} no encontrada")
            if not purchase.is_active:
                raise ValidationError("La compra ya fue eliminada.")

            items = [{"product_id": i.product_id, "quantity": i.quantity} for i in purchase.items]
            products = self.inventory_service.lock_products(
                self.db, [i['product_id'] for i in items], allow_inactive=True
            )

            insufficient = self.inventory_service.check_sufficient_stock(products, items)
            if insufficient:
                raise StockInsufficientError(
                    insufficient,
                    message="No se puede eliminar la compra: el stock quedaría negativo."
                )

            self.inventory_service.apply_stock_changes(
                self.db, products, items,
                sign=-1,
                change_type='anulacion_compra',
                user_id=user_id,
                reference_id=purchase.id,
                notes=f"Anulación compra #{purchase.id}"
            )

            purchase.is_active = False
            purchase.deleted_at = datetime.now()
            purchase.deleted_by = user_id
            purchase.deletion_reason = reason

            self.db.commit()
            logger.info(f"Compra #{purchase.id} anulada por usuario {user_id}")
            self.db.refresh(purchase)
            return purchase

        except HTTPException as e:
            logger.warning(f"Anulación de compra {purchase_id} rechazada: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception(f"Error anulando compra {purchase_id}")
            self.db.rollback()
            raise ServerError("Error eliminando compra")
