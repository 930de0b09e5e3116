# tiendapos/modules/purchases/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import require_form
from tiendapos.core.session import SessionContext
from .service import PurchasesService
from .schemas import (
    PurchaseCreateRequest, PurchaseUpdateRequest, PurchaseResponse, PurchaseDetailResponse
)

router = APIRouter()

PURCHASES_FORM = "/dashboard/compras"

@router.get("")
async def list_purchases(
    incluir_eliminadas: bool = Query(False),
    session: SessionContext = Depends(require_form(PURCHASES_FORM)),
    db: Session = Depends(get_db)
):
    service = PurchasesService(db)
    return await service.list_purchases(include_deleted=incluir_eliminadas)

@router.post("", response_model=PurchaseResponse, status_code=201)
async def create_purchase(
    data: PurchaseCreateRequest,
    session: SessionContext = Depends(require_form(PURCHASES_FORM)),
    db: Session = Depends(get_db)
):
    """
    Registrar compra

    Suma el inventario de cada línea. Los productos que queden sobre su
    stock máximo se reportan en `warnings`.
    """
    service = PurchasesService(db)
    return await service.create_purchase(data, user_id=session.user_id)

@router.get("/health")
async def purchases_health():
    return {
        "service": "purchases",
        "status": "healthy",
        "version": "1.0.0"
    }

@router.get("/{purchase_id}", response_model=PurchaseDetailResponse)
async def get_purchase(
    purchase_id: int,
    session: SessionContext = Depends(require_form(PURCHASES_FORM)),
    db: Session = Depends(get_db)
):
    service = PurchasesService(db)
    return await service.get_purchase(purchase_id)

@router.put("/{purchase_id}", response_model=PurchaseResponse)
async def update_purchase(
    purchase_id: int,
    data: PurchaseUpdateRequest,
    session: SessionContext = Depends(require_form(PURCHASES_FORM)),
    db: Session = Depends(get_db)
):
    """Reemplazar las líneas de la compra reconciliando inventario"""
    service = PurchasesService(db)
    return await service.update_purchase(purchase_id, data, user_id=session.user_id)

@router.delete("/{purchase_id}", response_model=PurchaseResponse)
async def delete_purchase(
    purchase_id: int,
    motivo: Optional[str] = Query(None),
    session: SessionContext = Depends(require_form(PURCHASES_FORM)),
    db: Session = Depends(get_db)
):
    """Anular compra (borrado lógico); 409 si el stock quedaría negativo"""
    service = PurchasesService(db)
    return await service.delete_purchase(purchase_id, motivo, user_id=session.user_id)
