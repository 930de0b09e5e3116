from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
import logging

from tiendapos.config.database import get_db
from tiendapos.core.auth.service import AuthService
from tiendapos.core.auth.schemas import UserLogin, TokenResponse, UserResponse, MenuResponse
from tiendapos.core.auth.dependencies import get_session, get_current_user
from tiendapos.core.session import SessionContext
from tiendapos.modules.permissions.service import PermissionsService
from tiendapos.shared.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter()

def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        nombres=user.first_name,
        apellidos=user.last_name,
        id_rol=user.role_id,
        nombre_rol=user.role.name if user.role else "",
        tipo_identificacion=user.identification_type.abbreviation if user.identification_type else None,
        identificacion=user.identification,
        is_active=user.is_active
    )

def _authenticate(db: Session, email: str, password: str) -> TokenResponse:
    """Validar credenciales y emitir el token con la lista de formularios del rol"""

    user = db.query(User).filter(User.email == email.strip().lower()).first()

    if not user or not AuthService.verify_password(password, user.password_hash):
        logger.info(f"Login fallido para {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña incorrectos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo"
        )

    if user.role is None or user.role.status != 'A':
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="El rol del usuario está inactivo"
        )

    capabilities = PermissionsService(db).get_capabilities(user.role_id)
    formularios = [c.to_claim() for c in capabilities]

    access_token = AuthService.create_access_token(data={
        "user_id": user.id,
        "email": user.email,
        "id_rol": user.role_id,
        "nombre_rol": user.role.name,
        "formularios": formularios
    })
    logger.info(f"Login de {user.email} ({user.role.name}) con {len(formularios)} formularios")

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=_user_response(user),
        formularios=formularios
    )

@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Endpoint de login para obtener token de acceso

    **Parámetros:**
    - **username**: Email del usuario
    - **password**: Contraseña del usuario

    **Returns:**
    - Token de acceso JWT (incluye los formularios del rol)
    - Información del usuario
    """
    return _authenticate(db, form_data.username, form_data.password)

@router.post("/login-json", response_model=TokenResponse)
async def login_json(
    user_login: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Endpoint de login alternativo que acepta JSON

    **Body:**
    ```json
        {
            "email": "user@example.com",
            "password": "password123"
        }
    ```
    """
    return _authenticate(db, user_login.email, user_login.password)

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Obtener información del usuario actual"""
    return _user_response(current_user)

@router.get("/menu", response_model=MenuResponse)
async def get_menu(session: SessionContext = Depends(get_session)):
    """Árbol de navegación construido con la lista exacta de formularios del token"""
    return MenuResponse(
        menu=session.menu(),
        total_formularios=len(session.accessible_forms())
    )

@router.post("/logout")
async def logout():
    """
    Logout (el token se descarta en el cliente)
    """
    return {"message": "Sesión cerrada correctamente"}
