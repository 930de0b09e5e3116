# tiendapos/modules/purchases/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
import logging

from .repository import PurchasesRepository
from .schemas import PurchaseCreateRequest
from tiendapos.core.errors import ValidationError, NotFoundError
from tiendapos.shared.database.models import Purchase
from tiendapos.shared.rules import (
    BusinessRuleViolation, PURCHASE_UNIT_PRICE_MIN, DELETION_REASON_MAX,
    validate_lines, validate_purchase_total, validate_optional_text
)

logger = logging.getLogger(__name__)

class PurchasesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = PurchasesRepository(db)

    def _to_purchase_data(self, data: PurchaseCreateRequest) -> Dict[str, Any]:
        """Validar líneas y total con las reglas de compra"""
        try:
            lines = [(d.id_producto, d.cantidad, d.precio_unitario) for d in data.detalles]
            total = validate_purchase_total(validate_lines(lines, min_unit_price=PURCHASE_UNIT_PRICE_MIN))
        except BusinessRuleViolation as e:
            raise ValidationError(str(e))

        return {
            "items": [
                {"product_id": pid, "quantity": qty, "unit_price": price}
                for pid, qty, price in lines
            ],
            "total": total,
            "purchase_date": data.fecha_compra,
            "notes": data.observaciones
        }

    async def create_purchase(self, data: PurchaseCreateRequest, user_id: int) -> Dict[str, Any]:
        logger.info(f"Iniciando compra - Usuario: {user_id}, líneas: {len(data.detalles)}")
        purchase, warnings = self.repository.create_purchase_atomic(self._to_purchase_data(data), user_id)
        return {
            "ok": True,
            "message": "Compra registrada" + (" con advertencias de stock máximo" if warnings else ""),
            "compra": self._purchase_summary(purchase),
            "warnings": warnings
        }

    async def update_purchase(self, purchase_id: int, data: PurchaseCreateRequest, user_id: int) -> Dict[str, Any]:
        logger.info(f"Editando compra #{purchase_id} - Usuario: {user_id}")
        purchase, warnings = self.repository.update_purchase_atomic(
            purchase_id, self._to_purchase_data(data), user_id
        )
        return {
            "ok": True,
            "message": "Compra actualizada",
            "compra": self._purchase_summary(purchase),
            "warnings": warnings
        }

    async def delete_purchase(self, purchase_id: int, reason: Optional[str], user_id: int) -> Dict[str, Any]:
        try:
            reason = validate_optional_text(reason, DELETION_REASON_MAX, "El motivo")
        except BusinessRuleViolation as e:
            raise ValidationError(str(e))

        purchase = self.repository.soft_delete_purchase_atomic(purchase_id, reason, user_id)
        return {
            "ok": True,
            "message": "Compra eliminada y stock revertido",
            "compra": self._purchase_summary(purchase),
            "warnings": []
        }

    async def list_purchases(self, include_deleted: bool = False) -> List[Dict[str, Any]]:
        return [self._purchase_summary(p) for p in self.repository.list_purchases(include_deleted)]

    async def get_purchase(self, purchase_id: int) -> Dict[str, Any]:
        purchase = self.repository.get_purchase(purchase_id)
        if not purchase:
            raise NotFoundError(f"Compra {purchase_id} no encontrada")
        return {
            "compra": self._purchase_summary(purchase),
            "productos": [
                {
                    "id_producto": item.product_id,
                    "nombre": item.product.name if item.product else None,
                    "cantidad": item.quantity,
                    "precio_unitario": float(item.unit_price),
                    "subtotal": float(item.subtotal)
                }
                for item in purchase.items
            ]
        }

    @staticmethod
    def _purchase_summary(purchase: Purchase) -> Dict[str, Any]:
        return {
            "id_compra": purchase.id,
            "fecha_compra": purchase.purchase_date.isoformat() if purchase.purchase_date else None,
            "total": float(purchase.total),
            "observaciones": purchase.notes,
            "id_usuario": purchase.user_id,
            "usuario": purchase.user.full_name if purchase.user else None,
            "cantidad_productos": len(purchase.items),
            "activo": purchase.is_active,
            "eliminado_en": purchase.deleted_at.isoformat() if purchase.deleted_at else None,
            "eliminado_por": purchase.deleted_by,
            "motivo_eliminacion": purchase.deletion_reason
        }
