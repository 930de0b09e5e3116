# tiendapos/modules/sales/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
import logging

from .repository import SalesRepository
from .schemas import SaleCreateRequest, PaymentCreateRequest
from tiendapos.config.settings import settings
from tiendapos.core.errors import ValidationError, NotFoundError
from tiendapos.shared.database.models import Sale, SalePayment
from tiendapos.shared.rules import (
    BusinessRuleViolation, SaleState, validate_lines, validate_sale_total,
    validate_initial_payments, validate_optional_text, DELETION_REASON_MAX
)
from tiendapos.shared.services.balance_service import calculate_balance

logger = logging.getLogger(__name__)

class SalesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)

    # ===== VENTAS =====

    async def create_sale(self, sale_data: SaleCreateRequest, user_id: int) -> Dict[str, Any]:
        """
        Crear venta (contado o fiada).

        Responsabilidades:
        - Validar líneas, total y pagos iniciales con las reglas centralizadas
        - Delegar la transacción (stock + venta + pagos) al repository
        - Construir respuesta con el balance recalculado
        """
        logger.info(f"Iniciando venta - Usuario: {user_id}, líneas: {len(sale_data.detalles)}")

        try:
            lines = [(d.id_producto, d.cantidad, d.precio_unitario) for d in sale_data.detalles]
            total = validate_sale_total(validate_lines(lines))
            amounts = [p.monto for p in sale_data.pagos]
            is_credit = validate_initial_payments(amounts, total, sale_data.cliente_desc)
        except BusinessRuleViolation as e:
            raise ValidationError(str(e))

        sale, warnings = self.repository.create_sale_atomic(
            sale_data={
                "items": [
                    {"product_id": pid, "quantity": qty, "unit_price": price}
                    for pid, qty, price in lines
                ],
                "payments": [
                    {"payment_method_id": p.id_metodo_pago, "amount": p.monto, "notes": p.observaciones}
                    for p in sale_data.pagos
                ],
                "total": total,
                "is_credit": is_credit,
                "client_description": sale_data.cliente_desc,
                "sale_date": sale_data.fecha_venta,
                "notes": sale_data.observaciones,
            },
            user_id=user_id,
            block_on_min_stock=settings.block_on_min_stock_breach
        )

        message = "Venta fiada registrada" if sale.is_credit else "Venta registrada"
        if warnings:
            message += " con advertencias de stock mínimo"

        return {
            "ok": True,
            "message": message,
            "venta": self._sale_summary(sale),
            "warnings": warnings
        }

    async def list_sales(self, include_deleted: bool = False) -> List[Dict[str, Any]]:
        return [self._sale_summary(s) for s in self.repository.list_sales(include_deleted)]

    async def get_sale(self, sale_id: int) -> Dict[str, Any]:
        sale = self._get_or_404(sale_id)
        return {
            "venta": self._sale_summary(sale),
            "productos": [
                {
                    "id_producto": item.product_id,
                    "nombre": item.product.name if item.product else None,
                    "cantidad": item.quantity,
                    "precio_unitario": float(item.unit_price),
                    "subtotal": float(item.subtotal)
                }
                for item in sale.items
            ],
            "pagos": [self._payment_to_dict(p) for p in sale.payments]
        }

    async def delete_sale(self, sale_id: int, reason: Optional[str], user_id: int) -> Dict[str, Any]:
        """Anular venta y devolver su stock"""
        try:
            reason = validate_optional_text(reason, DELETION_REASON_MAX, "El motivo")
        except BusinessRuleViolation as e:
            raise ValidationError(str(e))

        logger.info(f"Anulando venta #{sale_id} - Usuario: {user_id}")
        sale = self.repository.soft_delete_sale_atomic(sale_id, reason, user_id)

        return {
            "ok": True,
            "message": "Venta eliminada y stock revertido",
            "venta": self._sale_summary(sale),
            "warnings": []
        }

    # ===== ABONOS =====

    async def list_payments(self, sale_id: int) -> Dict[str, Any]:
        sale = self._get_or_404(sale_id)
        payments = self.repository.get_payments(sale_id)
        return {
            "ok": True,
            "total": len(payments),
            "abonos": [self._payment_to_dict(p) for p in payments],
            "venta": self._balance_snapshot(sale, payments)
        }

    async def register_payment(
        self,
        sale_id: int,
        payment_data: PaymentCreateRequest,
        user_id: int
    ) -> Dict[str, Any]:
        logger.info(f"Registrando abono a venta #{sale_id}: {payment_data.monto}")

        sale, payment, previous_balance = self.repository.add_payment_atomic(
            sale_id=sale_id,
            payment_method_id=payment_data.id_metodo_pago,
            amount=payment_data.monto,
            notes=payment_data.observaciones,
            user_id=user_id
        )

        return {
            "ok": True,
            "message": "Abono registrado. Venta pagada" if sale.state == SaleState.PAID.value else "Abono registrado",
            "abono": self._payment_to_dict(payment),
            "venta": {
                "id_venta": sale.id,
                "saldo_anterior": float(previous_balance),
                "saldo_nuevo": float(sale.pending_balance),
                "estado": sale.state
            }
        }

    # ===== HELPERS =====

    def _get_or_404(self, sale_id: int) -> Sale:
        sale = self.repository.get_sale(sale_id)
        if not sale:
            raise NotFoundError(f"Venta {sale_id} no encontrada")
        return sale

    def _balance_snapshot(self, sale: Sale, payments: List[SalePayment]) -> Dict[str, Any]:
        """Balance recalculado desde el libro de abonos (nunca desde la columna persistida)"""
        balance = calculate_balance(sale.total, [p.amount for p in payments], cancelled=not sale.is_active)
        return {
            "id_venta": sale.id,
            "es_fiado": sale.is_credit,
            "total": float(sale.total),
            "saldo_pendiente": float(balance.pending),
            "estado": balance.state.value,
            "pagado": float(balance.paid),
            "porcentaje_pagado": balance.percent_paid
        }

    def _sale_summary(self, sale: Sale) -> Dict[str, Any]:
        summary = self._balance_snapshot(sale, sale.payments)
        summary.update({
            "fecha_venta": sale.sale_date.isoformat() if sale.sale_date else None,
            "cliente_desc": sale.client_description,
            "observaciones": sale.notes,
            "id_usuario": sale.user_id,
            "vendedor": sale.seller.full_name if sale.seller else None,
            "cantidad_productos": len(sale.items),
            "activo": sale.is_active,
            "eliminado_en": sale.deleted_at.isoformat() if sale.deleted_at else None,
            "eliminado_por": sale.deleted_by,
            "motivo_eliminacion": sale.deletion_reason
        })
        return summary

    @staticmethod
    def _payment_to_dict(payment: SalePayment) -> Dict[str, Any]:
        return {
            "id_venta_pago": payment.id,
            "id_metodo_pago": payment.payment_method_id,
            "metodo_pago": payment.payment_method.name if payment.payment_method else None,
            "monto": float(payment.amount),
            "fecha_pago": payment.paid_at.isoformat() if payment.paid_at else None,
            "observaciones": payment.notes
        }
