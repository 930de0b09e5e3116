# tiendapos/modules/identification_types/__init__.py
"""Módulo de Tipos de Identificación - CRUD con activación/desactivación"""

from .router import router
from .service import IdentificationTypesService
from .repository import IdentificationTypesRepository

__all__ = [
    "router",
    "IdentificationTypesService",
    "IdentificationTypesRepository"
]
