# tiendapos/modules/payment_methods/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from tiendapos.shared.rules import (
    PAYMENT_METHOD_NAME_MAX, DESCRIPTION_MAX, validate_name, validate_optional_text
)


class PaymentMethodCreate(BaseModel):
    nombre_metodo_pago: str = Field(..., description="Nombre del método de pago")
    descripcion_metodo_pago: Optional[str] = Field(None, description="Descripción")
    activo: bool = Field(True)

    @field_validator('nombre_metodo_pago')
    @classmethod
    def validate_nombre(cls, v: str) -> str:
        return validate_name(v, PAYMENT_METHOD_NAME_MAX)

    @field_validator('descripcion_metodo_pago')
    @classmethod
    def validate_descripcion(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_text(v, DESCRIPTION_MAX, "La descripción")

    class Config:
        json_schema_extra = {
            "example": {
                "nombre_metodo_pago": "Transferencia",
                "descripcion_metodo_pago": "Nequi o Bancolombia",
                "activo": True
            }
        }


class PaymentMethodUpdate(PaymentMethodCreate):
    pass


class PaymentMethodResponse(BaseModel):
    id_metodo_pago: int
    nombre_metodo_pago: str
    descripcion_metodo_pago: Optional[str] = None
    activo: bool
    creado_en: Optional[datetime] = None
