# tiendapos/modules/roles/router.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import get_admin_session
from tiendapos.core.session import SessionContext
from .service import RolesService
from .schemas import RoleCreate, RoleUpdate, RoleResponse

router = APIRouter()

@router.get("", response_model=List[RoleResponse])
async def list_roles(
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = RolesService(db)
    return await service.list_roles()

@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = RolesService(db)
    return await service.get_role(role_id)

@router.post("", status_code=201)
async def create_role(
    data: RoleCreate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = RolesService(db)
    return await service.create_role(data)

@router.put("/{role_id}")
async def update_role(
    role_id: int,
    data: RoleUpdate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Actualizar rol (el rol administrador no se modifica)"""
    service = RolesService(db)
    return await service.update_role(role_id, data)

@router.delete("/{role_id}")
async def delete_role(
    role_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Eliminar rol; 409 con `usuarios` si tiene usuarios asignados"""
    service = RolesService(db)
    return await service.delete_role(role_id)
