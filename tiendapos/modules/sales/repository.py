from sqlalchemy.orm import Session, selectinload
from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from fastapi import HTTPException
import logging

from tiendapos.core.errors import (
    ValidationError, NotFoundError, ServerError,
    StockInsufficientError, MinStockBreachError, MaxStockBreachError
)
from tiendapos.shared.database.models import Sale, SaleItem, SalePayment, PaymentMethod
from tiendapos.shared.rules import SaleState, BusinessRuleViolation, validate_installment
from tiendapos.shared.services.balance_service import calculate_balance
from tiendapos.shared.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

class SalesRepository:
    def __init__(self, db: Session):
        self.db = db
        self.inventory_service = InventoryService()

    # ===== CONSULTAS =====

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).options(
            selectinload(Sale.items).selectinload(SaleItem.product),
            selectinload(Sale.payments).selectinload(SalePayment.payment_method)
        ).filter(Sale.id == sale_id).first()

    def list_sales(self, include_deleted: bool = False) -> List[Sale]:
        query = self.db.query(Sale).options(
            selectinload(Sale.items).selectinload(SaleItem.product),
            selectinload(Sale.payments),
            selectinload(Sale.seller)
        )
        if not include_deleted:
            query = query.filter(Sale.is_active == True)
        return query.order_by(Sale.sale_date.desc(), Sale.id.desc()).all()

    def get_payments(self, sale_id: int) -> List[SalePayment]:
        """Abonos de la venta en orden cronológico"""
        return self.db.query(SalePayment).options(
            selectinload(SalePayment.payment_method)
        ).filter(
            SalePayment.sale_id == sale_id
        ).order_by(SalePayment.paid_at.asc(), SalePayment.id.asc()).all()

    def get_active_payment_methods(self, method_ids: List[int]) -> Dict[int, PaymentMethod]:
        """
        Métodos de pago activos por id.

        Raises:
            ValidationError: si alguno no existe o está inactivo
        """
        ids = set(method_ids)
        if not ids:
            return {}
        methods = self.db.query(PaymentMethod).filter(PaymentMethod.id.in_(ids)).all()
        by_id = {m.id: m for m in methods if m.is_active}
        invalid = sorted(ids - set(by_id))
        if invalid:
            raise ValidationError(
                "Métodos de pago inexistentes o inactivos: " + ", ".join(f"#{i}" for i in invalid)
            )
        return by_id

    # ===== VENTA (TRANSACCIÓN ATÓMICA) =====

    def create_sale_atomic(
        self,
        sale_data: Dict[str, Any],
        user_id: int,
        block_on_min_stock: bool = True
    ) -> Tuple[Sale, List[Dict[str, Any]]]:
        """
        Crear venta con descuento de inventario en una sola transacción.

        Proceso:
        1. Bloquear productos (SELECT FOR UPDATE)
        2. Verificar stock suficiente y mínimo
        3. Crear Sale, SaleItems y SalePayments iniciales
        4. Descontar inventario
        5. Commit único

        `sale_data` ya viene validado por las reglas de negocio:
        items [{product_id, quantity, unit_price}], payments
        [{payment_method_id, amount, notes}], total, is_credit,
        client_description, sale_date, notes.

        Returns:
            (Sale, warnings)

        Raises:
            StockInsufficientError, MinStockBreachError, ValidationError
        """
        try:
            items = sale_data['items']

            # PASO 1: bloquear productos y métodos de pago
            products = self.inventory_service.lock_products(
                self.db, [i['product_id'] for i in items]
            )
            self.get_active_payment_methods([p['payment_method_id'] for p in sale_data['payments']])

            # PASO 2: guardián de stock
            insufficient = self.inventory_service.check_sufficient_stock(products, items)
            if insufficient:
                raise StockInsufficientError(
                    insufficient,
                    message="No se puede registrar la venta: stock insuficiente."
                )

            warnings = []
            below_min = self.inventory_service.check_min_stock(products, items)
            if below_min:
                if block_on_min_stock:
                    raise MinStockBreachError(
                        below_min,
                        message="No se puede registrar la venta: hay productos que quedarían bajo el mínimo."
                    )
                warnings = [
                    {**v, "tipo": "MIN_STOCK", "mensaje": f"'{v['nombre']}' queda bajo el mínimo ({v['resultante']}/{v['stock_minimo']})"}
                    for v in below_min
                ]

            # PASO 3: venta + líneas + pagos
            balance = calculate_balance(
                sale_data['total'], [p['amount'] for p in sale_data['payments']]
            )
            sale = Sale(
                user_id=user_id,
                sale_date=sale_data.get('sale_date') or datetime.now(),
                total=sale_data['total'],
                client_description=sale_data.get('client_description'),
                is_credit=sale_data['is_credit'],
                pending_balance=balance.pending,
                state=balance.state.value,
                notes=sale_data.get('notes'),
                is_active=True,
                created_at=datetime.now()
            )
            self.db.add(sale)
            self.db.flush()

            for item in items:
                sale.items.append(SaleItem(
                    product_id=item['product_id'],
                    quantity=item['quantity'],
                    unit_price=item['unit_price'],
                    subtotal=Decimal(item['quantity']) * item['unit_price']
                ))

            paid_at = datetime.now()
            for payment in sale_data['payments']:
                sale.payments.append(SalePayment(
                    payment_method_id=payment['payment_method_id'],
                    user_id=user_id,
                    amount=payment['amount'],
                    notes=payment.get('notes'),
                    paid_at=paid_at
                ))

            # PASO 4: inventario
            self.inventory_service.apply_stock_changes(
                self.db, products, items,
                sign=-1,
                change_type='venta',
                user_id=user_id,
                reference_id=sale.id,
                notes=f"Venta #{sale.id}"
            )

            # PASO 5: commit único
            self.db.commit()
            logger.info(f"Transacción completada - Venta #{sale.id} ({balance.state.value})")

            self.db.refresh(sale)
            return sale, warnings

        except HTTPException as e:
            logger.warning(f"Venta rechazada: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception("Error en transacción de venta")
            self.db.rollback()
            raise ServerError("Error creando venta")

    def soft_delete_sale_atomic(self, sale_id: int, reason: Optional[str], user_id: int) -> Sale:
        """
        Anular venta (borrado lógico) devolviendo el stock de todas sus líneas.

        Si alguna devolución supera el stock máximo del producto se rechaza
        todo: ni la venta ni el inventario cambian.
        """
        try:
            sale = self.db.query(Sale).filter(Sale.id == sale_id).with_for_update().first()
            if not sale:
                raise NotFoundError(f"Venta {sale_id} no encontrada")
            if not sale.is_active:
                raise ValidationError("La venta ya fue eliminada.")

            items = [{"product_id": i.product_id, "quantity": i.quantity} for i in sale.items]
            products = self.inventory_service.lock_products(
                self.db, [i['product_id'] for i in items], allow_inactive=True
            )

            over_max = self.inventory_service.check_max_stock_on_revert(products, items)
            if over_max:
                raise MaxStockBreachError(
                    over_max,
                    message="No se puede eliminar la venta: los productos listados superarían el stock máximo."
                )

            self.inventory_service.apply_stock_changes(
                self.db, products, items,
                sign=+1,
                change_type='anulacion_venta',
                user_id=user_id,
                reference_id=sale.id,
                notes=f"Anulación venta #{sale.id}"
            )

            sale.is_active = False
            sale.deleted_at = datetime.now()
            sale.deleted_by = user_id
            sale.deletion_reason = reason
            sale.state = SaleState.CANCELLED.value

            self.db.commit()
            logger.info(f"Venta #{sale.id} anulada por usuario {user_id}")
            self.db.refresh(sale)
            return sale

        except HTTPException as e:
            logger.warning(f"Anulación de venta {sale_id} rechazada: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception(f"Error anulando venta {sale_id}")
            self.db.rollback()
            raise ServerError("Error eliminando venta")

    # ===== ABONOS =====

    def add_payment_atomic(
        self,
        sale_id: int,
        payment_method_id: int,
        amount: Decimal,
        notes: Optional[str],
        user_id: int
    ) -> Tuple[Sale, SalePayment, Decimal]:
        """
        Registrar un abono con la venta bloqueada.

        El saldo se lee con SELECT FOR UPDATE, de modo que dos abonos
        simultáneos no pueden partir del mismo saldo.

        Returns:
            (Sale, SalePayment, saldo_anterior)
        """
        try:
            sale = self.db.query(Sale).filter(Sale.id == sale_id).with_for_update().first()
            if not sale:
                raise NotFoundError(f"Venta {sale_id} no encontrada")

            before = calculate_balance(
                sale.total, [p.amount for p in sale.payments], cancelled=not sale.is_active
            )
            try:
                validate_installment(amount, before.pending, before.state.value)
            except BusinessRuleViolation as e:
                raise ValidationError(str(e))

            self.get_active_payment_methods([payment_method_id])

            payment = SalePayment(
                payment_method_id=payment_method_id,
                user_id=user_id,
                amount=amount,
                notes=notes,
                paid_at=datetime.now()
            )
            sale.payments.append(payment)

            after = calculate_balance(sale.total, [p.amount for p in sale.payments])
            sale.pending_balance = after.pending
            sale.state = after.state.value

            self.db.commit()
            logger.info(
                f"Abono #{payment.id} a venta #{sale.id}: {amount} "
                f"(saldo {before.pending} -> {after.pending}, {after.state.value})"
            )
            self.db.refresh(sale)
            self.db.refresh(payment)
            return sale, payment, before.pending

        except HTTPException as e:
            logger.warning(f"Abono a venta {sale_id} rechazado: {e.detail}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception(f"Error registrando abono a venta {sale_id}")
            self.db.rollback()
            raise ServerError("Error registrando el abono")
