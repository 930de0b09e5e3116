# tiendapos/modules/roles/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal

from tiendapos.shared.rules import ROLE_NAME_MAX, DESCRIPTION_MAX, validate_name, validate_optional_text


class RoleCreate(BaseModel):
    nombre_rol: str
    descripcion_rol: Optional[str] = None
    estado: Literal['A', 'I'] = 'A'

    @field_validator('nombre_rol')
    @classmethod
    def validate_nombre(cls, v: str) -> str:
        return validate_name(v, ROLE_NAME_MAX)

    @field_validator('descripcion_rol')
    @classmethod
    def validate_descripcion(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_text(v, DESCRIPTION_MAX, "La descripción")


class RoleUpdate(RoleCreate):
    pass


class RoleResponse(BaseModel):
    id_rol: int
    nombre_rol: str
    descripcion_rol: Optional[str] = None
    estado: str
    usuarios: int = Field(0, description="Usuarios asignados")
