from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List

from tiendapos.config.database import get_db
from tiendapos.shared.database.models import User
from tiendapos.core.auth.service import AuthService
from tiendapos.core.session import SessionContext, FormCapability
from tiendapos.shared.rules import PROTECTED_ROLE

security = HTTPBearer()

class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )

async def get_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> SessionContext:
    """Construir el contexto de sesión a partir del token (una vez por request)"""

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Token inválido o expirado")

    user_id = payload.get("user_id")
    if user_id is None:
        raise AuthenticationError("Payload del token inválido")

    user = db.query(User).filter(User.id == user_id).first()

    if user is None:
        raise AuthenticationError("Usuario no encontrado")

    if not user.is_active:
        raise AuthenticationError("Usuario inactivo")

    forms = [FormCapability.from_claim(c) for c in payload.get("formularios") or []]

    return SessionContext(
        user=user,
        role_name=user.role.name if user.role else payload.get("nombre_rol", ""),
        forms=forms
    )

async def get_current_user(session: SessionContext = Depends(get_session)) -> User:
    """Obtener usuario actual desde el token"""
    return session.current_user()

def require_roles(allowed_roles: List[str]):
    """Factory para crear dependency que requiere roles específicos"""
    def role_checker(session: SessionContext = Depends(get_session)) -> SessionContext:
        if session.role_name not in allowed_roles:
            raise AuthorizationError(
                f"Rol '{session.role_name}' no autorizado. Roles permitidos: {allowed_roles}"
            )
        return session
    return role_checker

def get_admin_session(session: SessionContext = Depends(require_roles([PROTECTED_ROLE]))) -> SessionContext:
    """Dependency para administradores"""
    return session

def require_form(route: str):
    """Factory para exigir acceso a un formulario (clave exacta de ruta)"""
    def form_checker(session: SessionContext = Depends(get_session)) -> SessionContext:
        if not session.can_access(route):
            raise AuthorizationError(f"Sin acceso al formulario '{route}'")
        return session
    return form_checker
