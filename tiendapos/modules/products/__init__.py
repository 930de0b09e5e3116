# tiendapos/modules/products/__init__.py
"""
Módulo de Productos - catálogo con precios y límites de stock

El stock no se edita directamente: lo mueven compras, ventas y sus
anulaciones a través del guardián de inventario.
"""

from .router import router
from .service import ProductsService
from .repository import ProductsRepository

__all__ = [
    "router",
    "ProductsService",
    "ProductsRepository"
]
