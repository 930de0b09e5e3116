# tiendapos/modules/identification_types/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional

from tiendapos.shared.database.models import IdentificationType, User, Sale
from tiendapos.shared.rules import canonical


class IdentificationTypesRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[IdentificationType]:
        return self.db.query(IdentificationType).order_by(IdentificationType.name).all()

    def get_by_id(self, type_id: int) -> Optional[IdentificationType]:
        return self.db.query(IdentificationType).filter(IdentificationType.id == type_id).first()

    def find_by_name(self, name: str, exclude_id: Optional[int] = None) -> Optional[IdentificationType]:
        target = canonical(name)
        for id_type in self.db.query(IdentificationType).all():
            if id_type.id != exclude_id and canonical(id_type.name) == target:
                return id_type
        return None

    def count_users(self, type_id: int) -> int:
        return self.db.query(User).filter(User.identification_type_id == type_id).count()

    def count_sales(self, type_id: int) -> int:
        """Ventas registradas por usuarios con este tipo de identificación"""
        return self.db.query(Sale).join(User, Sale.user_id == User.id).filter(
            User.identification_type_id == type_id
        ).count()

    def save(self, id_type: IdentificationType) -> IdentificationType:
        try:
            self.db.add(id_type)
            self.db.commit()
            self.db.refresh(id_type)
            return id_type
        except Exception:
            self.db.rollback()
            raise

    def delete(self, id_type: IdentificationType) -> None:
        try:
            self.db.delete(id_type)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
