# tiendapos/modules/roles/__init__.py
"""Módulo de Roles - administración de roles (el rol administrador es del sistema)"""

from .router import router
from .service import RolesService
from .repository import RolesRepository

__all__ = [
    "router",
    "RolesService",
    "RolesRepository"
]
