# tiendapos/modules/sales/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import require_form
from tiendapos.core.session import SessionContext
from .service import SalesService
from .schemas import (
    SaleCreateRequest, SaleCreateResponse, SaleDeleteResponse, SaleDetailResponse,
    PaymentCreateRequest, PaymentCreateResponse, PaymentsResponse
)

router = APIRouter()

SALES_FORM = "/dashboard/ventas"

@router.get("")
async def list_sales(
    incluir_eliminadas: bool = Query(False, description="Incluir ventas anuladas"),
    session: SessionContext = Depends(require_form(SALES_FORM)),
    db: Session = Depends(get_db)
):
    """Listado de ventas con su balance recalculado"""
    service = SalesService(db)
    return await service.list_sales(include_deleted=incluir_eliminadas)

@router.post("", response_model=SaleCreateResponse, status_code=201)
async def create_sale(
    sale_data: SaleCreateRequest,
    session: SessionContext = Depends(require_form(SALES_FORM)),
    db: Session = Depends(get_db)
):
    """
    Registrar venta

    **Incluye:**
    - Validación de líneas, total y pagos iniciales
    - Venta fiada cuando los pagos no cubren el total (requiere cliente)
    - Descuento de inventario con verificación de stock y stock mínimo
    """
    service = SalesService(db)
    return await service.create_sale(sale_data, user_id=session.user_id)

@router.get("/health")
async def sales_health():
    """Health check del módulo de ventas"""
    return {
        "service": "sales",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Ventas de contado y fiadas",
            "Abonos con bloqueo de la venta",
            "Anulación con reversión de stock"
        ]
    }

@router.get("/{sale_id}", response_model=SaleDetailResponse)
async def get_sale(
    sale_id: int,
    session: SessionContext = Depends(require_form(SALES_FORM)),
    db: Session = Depends(get_db)
):
    service = SalesService(db)
    return await service.get_sale(sale_id)

@router.delete("/{sale_id}", response_model=SaleDeleteResponse)
async def delete_sale(
    sale_id: int,
    motivo: Optional[str] = Query(None, description="Motivo de la anulación"),
    session: SessionContext = Depends(require_form(SALES_FORM)),
    db: Session = Depends(get_db)
):
    """
    Anular venta (borrado lógico)

    Devuelve el stock de todas las líneas. Si algún producto superaría su
    stock máximo la anulación se rechaza con MAX_STOCK_BREACH.
    """
    service = SalesService(db)
    return await service.delete_sale(sale_id, motivo, user_id=session.user_id)

@router.get("/{sale_id}/abonos", response_model=PaymentsResponse)
async def list_payments(
    sale_id: int,
    session: SessionContext = Depends(require_form(SALES_FORM)),
    db: Session = Depends(get_db)
):
    """Abonos de la venta (orden cronológico) y balance actual"""
    service = SalesService(db)
    return await service.list_payments(sale_id)

@router.post("/{sale_id}/abonos", response_model=PaymentCreateResponse, status_code=201)
async def register_payment(
    sale_id: int,
    payment_data: PaymentCreateRequest,
    session: SessionContext = Depends(require_form(SALES_FORM)),
    db: Session = Depends(get_db)
):
    """Registrar abono contra el saldo pendiente de la venta"""
    service = SalesService(db)
    return await service.register_payment(sale_id, payment_data, user_id=session.user_id)
