# tiendapos/modules/payment_methods/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from tiendapos.shared.database.models import PaymentMethod, SalePayment
from tiendapos.shared.rules import canonical

logger = logging.getLogger(__name__)

class PaymentMethodsRepository:
    """Repository de métodos de pago"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[PaymentMethod]:
        return self.db.query(PaymentMethod).order_by(PaymentMethod.name).all()

    def get_by_id(self, method_id: int) -> Optional[PaymentMethod]:
        return self.db.query(PaymentMethod).filter(PaymentMethod.id == method_id).first()

    def find_by_name(self, name: str, exclude_id: Optional[int] = None) -> Optional[PaymentMethod]:
        """Búsqueda sin distinguir mayúsculas ni tildes"""
        target = canonical(name)
        for method in self.db.query(PaymentMethod).all():
            if method.id != exclude_id and canonical(method.name) == target:
                return method
        return None

    def count_payments(self, method_id: int) -> int:
        return self.db.query(SalePayment).filter(SalePayment.payment_method_id == method_id).count()

    def save(self, method: PaymentMethod) -> PaymentMethod:
        try:
            self.db.add(method)
            self.db.commit()
            self.db.refresh(method)
            return method
        except Exception:
            self.db.rollback()
            raise

    def delete(self, method: PaymentMethod) -> None:
        try:
            self.db.delete(method)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
