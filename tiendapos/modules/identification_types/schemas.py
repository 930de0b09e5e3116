# tiendapos/modules/identification_types/schemas.py
from pydantic import BaseModel, field_validator
from typing import Optional, Literal

from tiendapos.shared.rules import (
    IDENTIFICATION_TYPE_NAME_MAX, IDENTIFICATION_TYPE_ABBR_MAX, DESCRIPTION_MAX,
    validate_name, validate_optional_text
)


class IdentificationTypeCreate(BaseModel):
    nombre: str
    abreviatura: Optional[str] = None
    descripcion: Optional[str] = None
    estado: Literal['A', 'I'] = 'A'

    @field_validator('nombre')
    @classmethod
    def validate_nombre(cls, v: str) -> str:
        return validate_name(v, IDENTIFICATION_TYPE_NAME_MAX)

    @field_validator('abreviatura')
    @classmethod
    def validate_abreviatura(cls, v: Optional[str]) -> Optional[str]:
        value = validate_optional_text(v, IDENTIFICATION_TYPE_ABBR_MAX, "La abreviatura")
        return value.upper() if value else None

    @field_validator('descripcion')
    @classmethod
    def validate_descripcion(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_text(v, DESCRIPTION_MAX, "La descripción")

    class Config:
        json_schema_extra = {
            "example": {"nombre": "Cédula de ciudadanía", "abreviatura": "CC", "estado": "A"}
        }


class IdentificationTypeUpdate(IdentificationTypeCreate):
    pass


class IdentificationTypeResponse(BaseModel):
    id: int
    nombre: str
    abreviatura: Optional[str] = None
    descripcion: Optional[str] = None
    estado: str


class ExistsResponse(BaseModel):
    exists: bool
