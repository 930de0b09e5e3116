# tiendapos/modules/purchases/__init__.py
"""
Módulo de Compras

- Registro de compras multi-línea (siempre pagadas al registrarse)
- Edición con reconciliación de inventario por diferencia neta
- Anulación lógica con reversión de stock

Arquitectura:
- router.py: Endpoints /compras
- service.py: Validación y respuestas
- repository.py: Transacciones con bloqueo de productos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import PurchasesService
from .repository import PurchasesRepository

__all__ = [
    "router",
    "PurchasesService",
    "PurchasesRepository"
]
