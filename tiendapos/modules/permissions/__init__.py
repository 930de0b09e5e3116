# tiendapos/modules/permissions/__init__.py
"""
Módulo de Permisos y Formularios

- /permisos: asignación rol x formulario (individual y masiva), remoción
- /formularios: catálogo de entradas de navegación
- get_capabilities: lista exacta de formularios que viaja en el token

Arquitectura:
- router.py: `router` (/permisos) y `forms_router` (/formularios)
- service.py: reglas padre/hijo
- repository.py: acceso a datos
"""

from .router import router, forms_router
from .service import PermissionsService
from .repository import PermissionsRepository

__all__ = [
    "router",
    "forms_router",
    "PermissionsService",
    "PermissionsRepository"
]
