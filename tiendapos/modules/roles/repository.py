# tiendapos/modules/roles/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional

from tiendapos.shared.database.models import Role, User
from tiendapos.shared.rules import canonical


class RolesRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.id).all()

    def get_by_id(self, role_id: int) -> Optional[Role]:
        return self.db.query(Role).filter(Role.id == role_id).first()

    def find_by_name(self, name: str, exclude_id: Optional[int] = None) -> Optional[Role]:
        target = canonical(name)
        for role in self.db.query(Role).all():
            if role.id != exclude_id and canonical(role.name) == target:
                return role
        return None

    def count_users(self, role_id: int) -> int:
        return self.db.query(User).filter(User.role_id == role_id).count()

    def save(self, role: Role) -> Role:
        try:
            self.db.add(role)
            self.db.commit()
            self.db.refresh(role)
            return role
        except Exception:
            self.db.rollback()
            raise

    def delete(self, role: Role) -> None:
        """Elimina el rol y sus permisos (cascade)"""
        try:
            self.db.delete(role)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
