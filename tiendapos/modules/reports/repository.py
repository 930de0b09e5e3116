# tiendapos/modules/reports/repository.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func
from typing import List, Tuple
from datetime import datetime
from decimal import Decimal

from tiendapos.shared.database.models import Sale, SaleItem, Purchase, PurchaseItem, Product
from tiendapos.shared.rules import SaleState


class ReportsRepository:
    """Consultas de solo lectura; las ventas y compras anuladas nunca cuentan"""

    def __init__(self, db: Session):
        self.db = db

    def get_sales(self, start: datetime, end: datetime) -> List[Sale]:
        return self.db.query(Sale).options(
            selectinload(Sale.items).selectinload(SaleItem.product),
            selectinload(Sale.seller)
        ).filter(
            Sale.is_active == True,
            Sale.sale_date >= start,
            Sale.sale_date < end
        ).order_by(Sale.sale_date).all()

    def get_purchases(self, start: datetime, end: datetime) -> List[Purchase]:
        return self.db.query(Purchase).options(
            selectinload(Purchase.items).selectinload(PurchaseItem.product),
            selectinload(Purchase.user)
        ).filter(
            Purchase.is_active == True,
            Purchase.purchase_date >= start,
            Purchase.purchase_date < end
        ).order_by(Purchase.purchase_date).all()

    def sales_totals(self, start: datetime, end: datetime) -> Tuple[int, Decimal]:
        count, total = self.db.query(
            func.count(Sale.id), func.coalesce(func.sum(Sale.total), 0)
        ).filter(
            Sale.is_active == True,
            Sale.sale_date >= start,
            Sale.sale_date < end
        ).one()
        return count, Decimal(str(total))

    def purchases_totals(self, start: datetime, end: datetime) -> Tuple[int, Decimal]:
        count, total = self.db.query(
            func.count(Purchase.id), func.coalesce(func.sum(Purchase.total), 0)
        ).filter(
            Purchase.is_active == True,
            Purchase.purchase_date >= start,
            Purchase.purchase_date < end
        ).one()
        return count, Decimal(str(total))

    def receivables(self) -> Tuple[int, Decimal]:
        """Ventas fiadas con saldo pendiente"""
        count, total = self.db.query(
            func.count(Sale.id), func.coalesce(func.sum(Sale.pending_balance), 0)
        ).filter(
            Sale.is_active == True,
            Sale.state == SaleState.PENDING.value
        ).one()
        return count, Decimal(str(total))

    def get_active_products(self) -> List[Product]:
        return self.db.query(Product).filter(Product.is_active == True).order_by(Product.name).all()
