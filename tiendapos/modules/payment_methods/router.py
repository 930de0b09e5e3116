# tiendapos/modules/payment_methods/router.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import get_session, get_admin_session
from tiendapos.core.session import SessionContext
from .service import PaymentMethodsService
from .schemas import PaymentMethodCreate, PaymentMethodUpdate, PaymentMethodResponse

router = APIRouter()

@router.get("", response_model=List[PaymentMethodResponse])
async def list_payment_methods(
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    """Métodos de pago (los vendedores los necesitan para registrar ventas)"""
    service = PaymentMethodsService(db)
    return await service.list_methods()

@router.get("/{method_id}", response_model=PaymentMethodResponse)
async def get_payment_method(
    method_id: int,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    service = PaymentMethodsService(db)
    return await service.get_method(method_id)

@router.post("", status_code=201)
async def create_payment_method(
    data: PaymentMethodCreate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PaymentMethodsService(db)
    return await service.create_method(data)

@router.put("/{method_id}")
async def update_payment_method(
    method_id: int,
    data: PaymentMethodUpdate,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    service = PaymentMethodsService(db)
    return await service.update_method(method_id, data)

@router.delete("/{method_id}")
async def delete_payment_method(
    method_id: int,
    session: SessionContext = Depends(get_admin_session),
    db: Session = Depends(get_db)
):
    """Eliminar método de pago (409 si ya tiene pagos asociados)"""
    service = PaymentMethodsService(db)
    return await service.delete_method(method_id)
