# tiendapos/modules/products/router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import get_session, require_form
from tiendapos.core.session import SessionContext
from .service import ProductsService
from .schemas import ProductCreate, ProductUpdate, ProductResponse

router = APIRouter()

PRODUCTS_FORM = "/dashboard/productos"

@router.get("", response_model=List[ProductResponse])
async def list_products(
    incluir_inactivos: bool = Query(False),
    buscar: Optional[str] = Query(None, description="Filtro por nombre"),
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.list_products(include_inactive=incluir_inactivos, search=buscar)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.get_product(product_id)

@router.get("/{product_id}/movimientos")
async def get_product_movements(
    product_id: int,
    session: SessionContext = Depends(require_form(PRODUCTS_FORM)),
    db: Session = Depends(get_db)
):
    """Últimos movimientos de inventario del producto"""
    service = ProductsService(db)
    return await service.get_movements(product_id)

@router.post("", status_code=201)
async def create_product(
    data: ProductCreate,
    session: SessionContext = Depends(require_form(PRODUCTS_FORM)),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.create_product(data, user_id=session.user_id)

@router.put("/{product_id}")
async def update_product(
    product_id: int,
    data: ProductUpdate,
    session: SessionContext = Depends(require_form(PRODUCTS_FORM)),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.update_product(product_id, data)

@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    session: SessionContext = Depends(require_form(PRODUCTS_FORM)),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.deactivate_product(product_id)
