# tiendapos/modules/reports/router.py
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tiendapos.config.database import get_db
from tiendapos.core.auth.dependencies import require_form
from tiendapos.core.session import SessionContext
from .service import ReportsService
from .schemas import ReportPeriod, SalesReportResponse, PurchasesReportResponse, DashboardResponse

router = APIRouter()

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    session: SessionContext = Depends(require_form("/dashboard")),
    db: Session = Depends(get_db)
):
    """
    Resumen general

    **Incluye:**
    - Ventas y compras de hoy y del mes (ganancia neta = ventas - compras)
    - Inventario: productos sobre el máximo y bajo el mínimo, valor total
    - Cartera: ventas fiadas pendientes y total por cobrar
    """
    service = ReportsService(db)
    return await service.dashboard()

@router.get("/ventas", response_model=SalesReportResponse)
async def get_sales_report(
    periodo: ReportPeriod = Query(ReportPeriod.MONTHLY),
    fecha_inicio: Optional[date] = Query(None, description="YYYY-MM-DD (periodo personalizado)"),
    fecha_fin: Optional[date] = Query(None, description="YYYY-MM-DD (periodo personalizado)"),
    session: SessionContext = Depends(require_form("/dashboard/reporte-ventas")),
    db: Session = Depends(get_db)
):
    service = ReportsService(db)
    return await service.sales_report(periodo, fecha_inicio, fecha_fin)

@router.get("/compras", response_model=PurchasesReportResponse)
async def get_purchases_report(
    periodo: ReportPeriod = Query(ReportPeriod.MONTHLY),
    fecha_inicio: Optional[date] = Query(None),
    fecha_fin: Optional[date] = Query(None),
    session: SessionContext = Depends(require_form("/dashboard/reporte-compras")),
    db: Session = Depends(get_db)
):
    service = ReportsService(db)
    return await service.purchases_report(periodo, fecha_inicio, fecha_fin)
