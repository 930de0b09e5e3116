# tiendapos/modules/reports/schemas.py
from pydantic import BaseModel
from typing import List, Optional, Dict, Any
from enum import Enum


class ReportPeriod(str, Enum):
    TODAY = "hoy"
    WEEKLY = "semanal"
    MONTHLY = "mensual"
    YEARLY = "anual"
    CUSTOM = "personalizado"


class PeriodInfo(BaseModel):
    tipo: str
    fecha_inicio: str
    fecha_fin: str
    dias: int


class SalesReportResponse(BaseModel):
    ok: bool = True
    periodo: PeriodInfo
    resumen: Dict[str, Any]
    por_dia: List[Dict[str, Any]]
    productos_mas_vendidos: List[Dict[str, Any]]
    vendedores: List[Dict[str, Any]]


class PurchasesReportResponse(BaseModel):
    ok: bool = True
    periodo: PeriodInfo
    resumen: Dict[str, Any]
    por_dia: List[Dict[str, Any]]
    productos_mas_comprados: List[Dict[str, Any]]
    usuarios: List[Dict[str, Any]]


class DashboardResponse(BaseModel):
    ok: bool = True
    fecha_generacion: str
    resumen_hoy: Dict[str, Any]
    resumen_mes: Dict[str, Any]
    inventario: Dict[str, Any]
    cartera: Dict[str, Any]
    top_5_productos: List[Dict[str, Any]]
    producto_mas_rentable: Optional[Dict[str, Any]] = None
