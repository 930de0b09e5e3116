# tiendapos/modules/identification_types/router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import get_session, get_admin_session
from tiendapos.core.session import SessionContext
from .service import IdentificationTypesService
from .schemas import (
    IdentificationTypeCreate, IdentificationTypeUpdate, IdentificationTypeResponse, ExistsResponse
)

router = APIRouter()

@router.get("", response_model=List[IdentificationTypeResponse])
async def list_identification_types(
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.list_types()

@router.get("/exists", response_model=ExistsResponse)
async def identification_type_exists(
    nombre: str = Query(..., description="Nombre a verificar"),
    exclude_id: Optional[int] = Query(None, alias="excludeId"),
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.exists(nombre, exclude_id)

@router.get("/{type_id}", response_model=IdentificationTypeResponse)
async def get_identification_type(
    type_id: int,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.get_type(type_id)

@router.post("", status_code=201)
async def create_identification_type(
    data: IdentificationTypeCreate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.create_type(data)

@router.put("/{type_id}")
async def update_identification_type(
    type_id: int,
    data: IdentificationTypeUpdate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.update_type(type_id, data)

@router.patch("/{type_id}/activar")
async def activate_identification_type(
    type_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.set_status(type_id, active=True)

@router.patch("/{type_id}/desactivar")
async def deactivate_identification_type(
    type_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = IdentificationTypesService(db)
    return await service.set_status(type_id, active=False)

@router.delete("/{type_id}")
async def delete_identification_type(
    type_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Eliminar; 409 con `usuarios`, `ventas` y `requiresDeactivation` si está en uso"""
    service = IdentificationTypesService(db)
    return await service.delete_type(type_id)
