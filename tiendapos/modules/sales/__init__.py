# tiendapos/modules/sales/__init__.py
"""
Módulo de Ventas - Ventas de contado, ventas fiadas y abonos

Este módulo maneja:
- Registro de ventas con pagos iniciales (contado o fiado)
- Libro de abonos por venta (solo se agregan, nunca se editan)
- Anulación de ventas con reversión de inventario
- Balance (pagado, saldo, porcentaje, estado) recalculado en cada lectura

Arquitectura:
- router.py: Endpoints /ventas y /ventas/{id}/abonos
- service.py: Reglas de negocio y construcción de respuestas
- repository.py: Transacciones atómicas con bloqueo de filas
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "router",
    "SalesService",
    "SalesRepository"
]
