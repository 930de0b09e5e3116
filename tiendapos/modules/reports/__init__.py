# tiendapos/modules/reports/__init__.py
"""
Módulo de Reportes (solo lectura)

- /reportes/dashboard: resumen del día, del mes, inventario y cartera
- /reportes/ventas y /reportes/compras: por periodo (hoy, semanal,
  mensual, anual o personalizado)

Las ventas y compras anuladas se excluyen de todos los reportes.
"""

from .router import router
from .service import ReportsService, resolve_period
from .repository import ReportsRepository

__all__ = [
    "router",
    "ReportsService",
    "ReportsRepository",
    "resolve_period"
]
