# tiendapos/modules/permissions/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List
import logging

from .repository import PermissionsRepository
from .schemas import PermissionAssign, PermissionBulkAssign, FormCreate
from tiendapos.core.errors import NotFoundError, ConflictError, ValidationError
from tiendapos.core.session import FormCapability
from tiendapos.shared.database.models import Permission, Form, Role

logger = logging.getLogger(__name__)

class PermissionsService:
    """
    Permisos rol x formulario.

    Un formulario hijo nunca queda asignado sin su padre: asignar un hijo
    agrega el padre y quitar un padre quita sus hijos.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = PermissionsRepository(db)

    # ===== FORMULARIOS =====

    async def list_forms(self) -> List[Dict[str, Any]]:
        return [self._form_to_dict(f) for f in self.repository.get_forms()]

    async def create_form(self, data: FormCreate) -> Dict[str, Any]:
        if data.padre_id is not None:
            parent = self.repository.get_form(data.padre_id)
            if not parent:
                raise ValidationError(f"Formulario padre {data.padre_id} no encontrado")
            if not parent.is_parent:
                raise ValidationError(f"'{parent.title}' no es un formulario padre.")

        form = self.repository.create_form(Form(
            title=data.titulo_formulario,
            url=data.url_formulario,
            is_parent=data.is_padre,
            parent_id=data.padre_id,
            order=data.orden_formulario
        ))
        logger.info(f"Formulario creado: #{form.id} '{form.title}'")
        return {"message": "Formulario creado.", "formulario": self._form_to_dict(form)}

    # ===== CONSULTAS =====

    async def list_permissions(self) -> List[Dict[str, Any]]:
        return [
            {
                "id_rol": p.role_id,
                "nombre_rol": p.role.name,
                "id_formulario": p.form_id,
                "titulo_formulario": p.form.title,
                "is_padre": p.form.is_parent,
                "padre_id": p.form.parent_id
            }
            for p in self.repository.get_all()
        ]

    async def list_role_forms(self, role_id: int) -> List[Dict[str, Any]]:
        self._get_role_or_404(role_id)
        return [self._form_to_dict(p.form) for p in self.repository.get_by_role(role_id)]

    def get_capabilities(self, role_id: int) -> List[FormCapability]:
        """Lista exacta de formularios del rol que viaja en el token"""
        return [
            FormCapability(
                form_id=p.form.id,
                title=p.form.title,
                route=p.form.url,
                parent_id=p.form.parent_id,
                is_parent=p.form.is_parent,
                order=p.form.order,
                can_create=p.can_create,
                can_read=p.can_read,
                can_update=p.can_update,
                can_delete=p.can_delete
            )
            for p in self.repository.get_by_role(role_id)
        ]

    # ===== ASIGNACIÓN =====

    async def assign(self, data: PermissionAssign) -> Dict[str, Any]:
        role = self._get_role_or_404(data.id_rol)
        form = self.repository.get_form(data.id_formulario)
        if not form:
            raise NotFoundError(f"Formulario {data.id_formulario} no encontrado")

        assigned = self.repository.assigned_form_ids(role.id)
        if form.id in assigned:
            raise ConflictError(f"El rol '{role.name}' ya tiene asignado '{form.title}'.")

        new_permissions = [Permission(role_id=role.id, form_id=form.id)]
        also_assigned = None
        if form.parent_id is not None and form.parent_id not in assigned:
            new_permissions.append(Permission(role_id=role.id, form_id=form.parent_id))
            also_assigned = form.parent.title

        self.repository.add_many(new_permissions)
        logger.info(f"Permiso asignado: rol #{role.id} -> formulario #{form.id} (padre: {also_assigned})")
        return {
            "message": f"Formulario '{form.title}' asignado al rol '{role.name}'.",
            "asignadoTambien": also_assigned
        }

    async def assign_bulk(self, data: PermissionBulkAssign) -> Dict[str, Any]:
        role = self._get_role_or_404(data.id_rol)
        requested = list(dict.fromkeys(data.id_formularios))
        forms = {f.id: f for f in self.repository.get_forms_by_ids(requested)}
        missing = [fid for fid in requested if fid not in forms]
        if missing:
            raise NotFoundError("Formularios no encontrados: " + ", ".join(f"#{fid}" for fid in missing))

        assigned = self.repository.assigned_form_ids(role.id)
        new_ids: List[int] = []
        already = 0
        for fid in requested:
            if fid in assigned:
                already += 1
            else:
                new_ids.append(fid)

        parents_added = 0
        targets = set(assigned) | set(new_ids)
        for fid in list(new_ids):
            parent_id = forms[fid].parent_id
            if parent_id is not None and parent_id not in targets:
                new_ids.append(parent_id)
                targets.add(parent_id)
                parents_added += 1

        self.repository.add_many([Permission(role_id=role.id, form_id=fid) for fid in new_ids])
        assigned_count = len(new_ids) - parents_added
        logger.info(
            f"Asignación masiva rol #{role.id}: {assigned_count} nuevos, {already} existentes, {parents_added} padres"
        )
        return {
            "message": f"Se asignaron {assigned_count} formulario(s) al rol '{role.name}'.",
            "asignados": assigned_count,
            "yaExistian": already,
            "padresAsignados": parents_added
        }

    # ===== REMOCIÓN =====

    async def remove(self, role_id: int, form_id: int) -> Dict[str, Any]:
        role = self._get_role_or_404(role_id)
        permission = self.repository.get_one(role_id, form_id)
        if not permission:
            raise NotFoundError("El rol no tiene asignado ese formulario.")

        form = permission.form
        child_ids = [c.id for c in form.children] if form.is_parent else []
        assigned = self.repository.assigned_form_ids(role_id)
        children_to_remove = [cid for cid in child_ids if cid in assigned]

        self.repository.delete_for_forms(role_id, [form_id] + children_to_remove)
        logger.info(f"Permiso removido: rol #{role_id} -> formulario #{form_id} (+{len(children_to_remove)} hijos)")
        return {
            "message": f"Formulario '{form.title}' removido del rol '{role.name}'.",
            "hijosEliminados": len(children_to_remove) if form.is_parent else None
        }

    async def remove_all(self, role_id: int) -> Dict[str, Any]:
        role = self._get_role_or_404(role_id)
        total = self.repository.delete_all_for_role(role_id)
        logger.info(f"Permisos del rol #{role_id} eliminados: {total}")
        return {"message": f"Se eliminaron {total} permiso(s) del rol '{role.name}'.", "total": total}

    # ===== HELPERS =====

    def _get_role_or_404(self, role_id: int) -> Role:
        role = self.repository.get_role(role_id)
        if not role:
            raise NotFoundError(f"Rol {role_id} no encontrado")
        return role

    @staticmethod
    def _form_to_dict(form: Form) -> Dict[str, Any]:
        return {
            "id_formulario": form.id,
            "titulo_formulario": form.title,
            "url_formulario": form.url,
            "padre_id": form.parent_id,
            "is_padre": form.is_parent,
            "orden_formulario": form.order
        }
