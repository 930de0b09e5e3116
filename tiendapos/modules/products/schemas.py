# tiendapos/modules/products/schemas.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from decimal import Decimal

from tiendapos.shared.rules import (
    PRODUCT_NAME_MAX, DESCRIPTION_MAX, QUANTITY_MAX, UNIT_PRICE_MAX,
    validate_name, validate_optional_text, validate_money_precision
)


class ProductBase(BaseModel):
    nombre: str
    descripcion: Optional[str] = None
    precio_venta: Decimal = Field(0, ge=0, le=UNIT_PRICE_MAX)
    precio_compra: Decimal = Field(0, ge=0, le=UNIT_PRICE_MAX)
    stock_minimo: Optional[int] = Field(None, ge=0, le=QUANTITY_MAX)
    stock_maximo: Optional[int] = Field(None, ge=0, le=QUANTITY_MAX)
    activo: bool = True

    @field_validator('nombre')
    @classmethod
    def validate_nombre(cls, v: str) -> str:
        # Los nombres de producto admiten dígitos ("Gaseosa 350 ml")
        return validate_name(v, PRODUCT_NAME_MAX, pattern=False)

    @field_validator('descripcion')
    @classmethod
    def validate_descripcion(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_text(v, DESCRIPTION_MAX, "La descripción")

    @field_validator('precio_venta', 'precio_compra')
    @classmethod
    def validate_precios(cls, v: Decimal) -> Decimal:
        return validate_money_precision(v, "El precio")

    @model_validator(mode='after')
    def validate_limits(self):
        if (
            self.stock_minimo is not None
            and self.stock_maximo is not None
            and self.stock_maximo < self.stock_minimo
        ):
            raise ValueError("El stock máximo no puede ser menor que el stock mínimo.")
        return self


class ProductCreate(ProductBase):
    stock: int = Field(0, ge=0, le=QUANTITY_MAX, description="Stock inicial")

    class Config:
        json_schema_extra = {
            "example": {
                "nombre": "Arroz 500 g",
                "precio_venta": 2800,
                "precio_compra": 2100,
                "stock": 40,
                "stock_minimo": 10,
                "stock_maximo": 120
            }
        }


class ProductUpdate(ProductBase):
    """El stock solo cambia con compras, ventas y sus anulaciones"""


class ProductResponse(BaseModel):
    id_producto: int
    nombre: str
    descripcion: Optional[str] = None
    precio_venta: float
    precio_compra: float
    stock: int
    stock_minimo: Optional[int] = None
    stock_maximo: Optional[int] = None
    activo: bool
