# tiendapos/core/session.py
"""
Contexto de sesión.

Se construye una sola vez por request a partir del token (ver
`core.auth.dependencies.get_session`). Los endpoints y servicios consultan
al usuario y sus formularios a través de este objeto; nadie más decodifica
el token.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tiendapos.shared.database.models import User
from tiendapos.shared.rules import PROTECTED_ROLE


@dataclass(frozen=True)
class FormCapability:
    """Formulario accesible por el rol del usuario (clave exacta, sin heurísticas)"""
    form_id: int
    title: str
    route: Optional[str]
    parent_id: Optional[int]
    is_parent: bool
    order: int
    can_create: bool = True
    can_read: bool = True
    can_update: bool = True
    can_delete: bool = True

    def to_claim(self) -> Dict[str, Any]:
        return {
            "id": self.form_id,
            "titulo": self.title,
            "url": self.route,
            "padre": self.parent_id,
            "es_padre": self.is_parent,
            "orden": self.order,
            "permisos": {
                "crear": self.can_create,
                "leer": self.can_read,
                "actualizar": self.can_update,
                "eliminar": self.can_delete,
            },
        }

    @classmethod
    def from_claim(cls, claim: Dict[str, Any]) -> "FormCapability":
        permisos = claim.get("permisos") or {}
        return cls(
            form_id=int(claim["id"]),
            title=claim.get("titulo", ""),
            route=claim.get("url"),
            parent_id=claim.get("padre"),
            is_parent=bool(claim.get("es_padre", False)),
            order=int(claim.get("orden", 0)),
            can_create=bool(permisos.get("crear", True)),
            can_read=bool(permisos.get("leer", True)),
            can_update=bool(permisos.get("actualizar", True)),
            can_delete=bool(permisos.get("eliminar", True)),
        )


@dataclass
class SessionContext:
    user: User
    role_name: str
    forms: List[FormCapability] = field(default_factory=list)

    def current_user(self) -> User:
        return self.user

    def accessible_forms(self) -> List[FormCapability]:
        return list(self.forms)

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role_name == PROTECTED_ROLE

    def can_access(self, route: str) -> bool:
        return self.is_admin or any(f.route == route for f in self.forms)

    def menu(self) -> List[Dict[str, Any]]:
        """Árbol de navegación: padres con sus hijos, ambos ordenados por `orden`"""
        ordered = sorted(self.forms, key=lambda f: (f.order, f.form_id))
        nodes = {
            f.form_id: {
                "id": f.form_id,
                "titulo": f.title,
                "url": f.route,
                "padre": f.parent_id,
                "hijos": [],
            }
            for f in ordered
        }

        tree = []
        for f in ordered:
            node = nodes[f.form_id]
            if f.parent_id is not None and f.parent_id in nodes:
                nodes[f.parent_id]["hijos"].append(node)
            else:
                tree.append(node)
        return tree
