# tiendapos/modules/permissions/schemas.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional

from tiendapos.shared.rules import validate_name, validate_optional_text


class PermissionAssign(BaseModel):
    id_rol: int = Field(..., gt=0)
    id_formulario: int = Field(..., gt=0)


class PermissionBulkAssign(BaseModel):
    id_rol: int = Field(..., gt=0)
    id_formularios: List[int] = Field(..., min_length=1)


class PermissionResponse(BaseModel):
    id_rol: int
    nombre_rol: str
    id_formulario: int
    titulo_formulario: str
    is_padre: bool = False
    padre_id: Optional[int] = None


class FormResponse(BaseModel):
    id_formulario: int
    titulo_formulario: str
    url_formulario: Optional[str] = None
    padre_id: Optional[int] = None
    is_padre: bool = False
    orden_formulario: int = 0


class FormCreate(BaseModel):
    titulo_formulario: str
    url_formulario: Optional[str] = None
    is_padre: bool = False
    padre_id: Optional[int] = None
    orden_formulario: int = Field(0, ge=0)

    @field_validator('titulo_formulario')
    @classmethod
    def validate_titulo(cls, v: str) -> str:
        return validate_name(v, 100, label="El título", pattern=False)

    @field_validator('url_formulario')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_text(v, 255, "La URL")

    @model_validator(mode='after')
    def validate_shape(self):
        if self.is_padre and self.url_formulario:
            raise ValueError("Un formulario padre no tiene URL.")
        if not self.is_padre and not self.url_formulario:
            raise ValueError("La URL es obligatoria para formularios que no son padre.")
        return self
