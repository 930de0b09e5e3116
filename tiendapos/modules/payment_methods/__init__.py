# tiendapos/modules/payment_methods/__init__.py
"""
Módulo de Métodos de Pago

Arquitectura:
- router.py: Endpoints /metodos-pago
- service.py: Unicidad del nombre y reglas de eliminación
- repository.py: Acceso a datos
- schemas.py: Validación de nombre y descripción
"""

from .router import router
from .service import PaymentMethodsService
from .repository import PaymentMethodsRepository

__all__ = [
    "router",
    "PaymentMethodsService",
    "PaymentMethodsRepository"
]
