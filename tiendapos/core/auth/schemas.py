from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

class UserLogin(BaseModel):
    """Schema para login de usuario"""
    email: str = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=6, description="Contraseña del usuario")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "admin@tiendapos.com",
                "password": "admin123"
            }
        }

class UserResponse(BaseModel):
    """Schema para respuesta de usuario"""
    id: int
    email: str
    nombres: str
    apellidos: str
    id_rol: int
    nombre_rol: str
    tipo_identificacion: Optional[str] = None
    identificacion: Optional[str] = None
    is_active: bool

class TokenResponse(BaseModel):
    """Schema para respuesta de token"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    formularios: List[Dict[str, Any]] = []

class MenuResponse(BaseModel):
    """Árbol de navegación del usuario"""
    menu: List[Dict[str, Any]]
    total_formularios: int
