# tiendapos/modules/permissions/repository.py
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Set

from tiendapos.shared.database.models import Permission, Form, Role


class PermissionsRepository:
    def __init__(self, db: Session):
        self.db = db

    # ===== FORMULARIOS =====

    def get_forms(self) -> List[Form]:
        return self.db.query(Form).order_by(Form.order, Form.id).all()

    def get_form(self, form_id: int) -> Optional[Form]:
        return self.db.query(Form).filter(Form.id == form_id).first()

    def get_forms_by_ids(self, form_ids: List[int]) -> List[Form]:
        return self.db.query(Form).filter(Form.id.in_(form_ids)).all()

    def create_form(self, form: Form) -> Form:
        try:
            self.db.add(form)
            self.db.commit()
            self.db.refresh(form)
            return form
        except Exception:
            self.db.rollback()
            raise

    # ===== PERMISOS =====

    def get_role(self, role_id: int) -> Optional[Role]:
        return self.db.query(Role).filter(Role.id == role_id).first()

    def get_all(self) -> List[Permission]:
        return self.db.query(Permission).options(
            joinedload(Permission.role), joinedload(Permission.form)
        ).order_by(Permission.role_id, Permission.form_id).all()

    def get_by_role(self, role_id: int) -> List[Permission]:
        return self.db.query(Permission).join(Form).options(
            joinedload(Permission.form)
        ).filter(Permission.role_id == role_id).order_by(Form.order, Form.id).all()

    def get_one(self, role_id: int, form_id: int) -> Optional[Permission]:
        return self.db.query(Permission).filter(
            Permission.role_id == role_id,
            Permission.form_id == form_id
        ).first()

    def assigned_form_ids(self, role_id: int) -> Set[int]:
        rows = self.db.query(Permission.form_id).filter(Permission.role_id == role_id).all()
        return {row[0] for row in rows}

    def add_many(self, permissions: List[Permission]) -> None:
        try:
            self.db.add_all(permissions)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def delete_for_forms(self, role_id: int, form_ids: List[int]) -> int:
        try:
            deleted = self.db.query(Permission).filter(
                Permission.role_id == role_id,
                Permission.form_id.in_(form_ids)
            ).delete(synchronize_session=False)
            self.db.commit()
            return deleted
        except Exception:
            self.db.rollback()
            raise

    def delete_all_for_role(self, role_id: int) -> int:
        try:
            deleted = self.db.query(Permission).filter(
                Permission.role_id == role_id
            ).delete(synchronize_session=False)
            self.db.commit()
            return deleted
        except Exception:
            self.db.rollback()
            raise
