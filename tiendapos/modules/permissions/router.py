# tiendapos/modules/permissions/router.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import get_admin_session
from tiendapos.core.session import SessionContext
from .service import PermissionsService
from .schemas import (
    PermissionAssign, PermissionBulkAssign, PermissionResponse, FormCreate, FormResponse
)

router = APIRouter()
forms_router = APIRouter()

# ==================== PERMISOS ====================

@router.get("", response_model=List[PermissionResponse])
async def list_permissions(
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Todos los roles con sus formularios asignados"""
    service = PermissionsService(db)
    return await service.list_permissions()

@router.get("/rol/{role_id}", response_model=List[FormResponse])
async def list_role_forms(
    role_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PermissionsService(db)
    return await service.list_role_forms(role_id)

@router.post("", status_code=201)
async def assign_permission(
    data: PermissionAssign,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Asignar formulario a un rol (el padre se asigna si falta)"""
    service = PermissionsService(db)
    return await service.assign(data)

@router.post("/bulk", status_code=201)
async def assign_permissions_bulk(
    data: PermissionBulkAssign,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PermissionsService(db)
    return await service.assign_bulk(data)

@router.delete("/rol/{role_id}/formulario/{form_id}")
async def remove_permission(
    role_id: int,
    form_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Quitar formulario de un rol (quitar un padre quita sus hijos)"""
    service = PermissionsService(db)
    return await service.remove(role_id, form_id)

@router.delete("/rol/{role_id}")
async def remove_all_permissions(
    role_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PermissionsService(db)
    return await service.remove_all(role_id)

# ==================== FORMULARIOS ====================

@forms_router.get("", response_model=List[FormResponse])
async def list_forms(
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PermissionsService(db)
    return await service.list_forms()

@forms_router.post("", status_code=201)
async def create_form(
    data: FormCreate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PermissionsService(db)
    return await service.create_form(data)
