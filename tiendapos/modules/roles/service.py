# tiendapos/modules/roles/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List
import logging

from .repository import RolesRepository
from .schemas import RoleCreate, RoleUpdate
from tiendapos.core.errors import NotFoundError, ConflictError, ValidationError
from tiendapos.shared.database.models import Role
from tiendapos.shared.rules import PROTECTED_ROLE, canonical

logger = logging.getLogger(__name__)

class RolesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = RolesRepository(db)

    async def list_roles(self) -> List[Dict[str, Any]]:
        return [self._to_dict(r) for r in self.repository.get_all()]

    async def get_role(self, role_id: int) -> Dict[str, Any]:
        return self._to_dict(self._get_or_404(role_id))

    async def create_role(self, data: RoleCreate) -> Dict[str, Any]:
        if self.repository.find_by_name(data.nombre_rol):
            raise ConflictError(f"Ya existe un rol llamado '{data.nombre_rol}'.")

        role = self.repository.save(Role(
            name=data.nombre_rol,
            description=data.descripcion_rol,
            status=data.estado
        ))
        logger.info(f"Rol creado: #{role.id} '{role.name}'")
        return {"message": "Rol creado correctamente.", "rol": self._to_dict(role)}

    async def update_role(self, role_id: int, data: RoleUpdate) -> Dict[str, Any]:
        role = self._get_or_404(role_id)
        self._ensure_not_protected(role, "modificar")
        if self.repository.find_by_name(data.nombre_rol, exclude_id=role_id):
            raise ConflictError(f"Ya existe un rol llamado '{data.nombre_rol}'.")
        if canonical(data.nombre_rol) == PROTECTED_ROLE:
            raise ValidationError(f"El nombre '{PROTECTED_ROLE}' está reservado.")

        role.name = data.nombre_rol
        role.description = data.descripcion_rol
        role.status = data.estado
        role = self.repository.save(role)
        logger.info(f"Rol actualizado: #{role.id}")
        return {"message": "Rol actualizado correctamente.", "rol": self._to_dict(role)}

    async def delete_role(self, role_id: int) -> Dict[str, Any]:
        role = self._get_or_404(role_id)
        self._ensure_not_protected(role, "eliminar")

        users = self.repository.count_users(role_id)
        if users:
            raise ConflictError(
                f"No se puede eliminar el rol porque está siendo usado por {users} usuario(s).",
                usuarios=users,
                requiresDeactivation=True
            )

        self.repository.delete(role)
        logger.info(f"Rol eliminado: #{role_id}")
        return {"message": "Rol eliminado correctamente."}

    @staticmethod
    def _ensure_not_protected(role: Role, action: str):
        if canonical(role.name) == PROTECTED_ROLE:
            raise ValidationError(f"El rol '{role.name}' es del sistema y no se puede {action}.")

    def _get_or_404(self, role_id: int) -> Role:
        role = self.repository.get_by_id(role_id)
        if not role:
            raise NotFoundError(f"Rol {role_id} no encontrado")
        return role

    def _to_dict(self, role: Role) -> Dict[str, Any]:
        return {
            "id_rol": role.id,
            "nombre_rol": role.name,
            "descripcion_rol": role.description,
            "estado": role.status,
            "usuarios": self.repository.count_users(role.id)
        }
