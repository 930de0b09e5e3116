# tiendapos/shared/schemas/common.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal

from tiendapos.shared.rules import validate_money_precision

class BaseResponse(BaseModel):
    ok: bool = True
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class LineItemIn(BaseModel):
    """Línea de detalle enviada por el cliente (venta o compra)"""
    id_producto: int = Field(..., gt=0, description="ID del producto")
    cantidad: int = Field(..., description="Cantidad")
    precio_unitario: Decimal = Field(..., description="Precio unitario")

    @field_validator('precio_unitario')
    @classmethod
    def validate_precio(cls, v: Decimal) -> Decimal:
        return validate_money_precision(v, "El precio unitario")
