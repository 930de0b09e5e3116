# tiendapos/modules/sales/schemas.py
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any
from decimal import Decimal
from datetime import datetime

from tiendapos.shared.schemas.common import BaseResponse, LineItemIn
from tiendapos.shared.rules import (
    CLIENT_DESCRIPTION_MAX, NOTES_MAX, normalize_text, validate_money_precision
)


def parse_operation_date(v: Optional[str]) -> Optional[datetime]:
    """Acepta YYYY-MM-DD o YYYY-MM-DDTHH:mm:ss"""
    if v is None or not str(v).strip():
        return None
    try:
        return datetime.fromisoformat(str(v).strip())
    except ValueError:
        raise ValueError('La fecha debe tener formato YYYY-MM-DD o YYYY-MM-DDTHH:mm:ss')


class SalePaymentIn(BaseModel):
    id_metodo_pago: int = Field(..., gt=0, description="Método de pago")
    monto: Decimal = Field(..., description="Monto del pago")
    observaciones: Optional[str] = Field(None, max_length=255, description="Notas del pago")

    @field_validator('monto')
    @classmethod
    def validate_monto(cls, v: Decimal) -> Decimal:
        return validate_money_precision(v, "El monto")

    @field_validator('observaciones')
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return normalize_text(v) or None


class SaleCreateRequest(BaseModel):
    detalles: List[LineItemIn] = Field(
        ...,
        validation_alias=AliasChoices("detalles", "productos"),
        description="Líneas de la venta"
    )
    pagos: List[SalePaymentIn] = Field(default_factory=list, description="Pagos iniciales")
    cliente_desc: Optional[str] = Field(None, max_length=CLIENT_DESCRIPTION_MAX, description="Cliente (obligatorio en ventas fiadas)")
    fecha_venta: Optional[datetime] = Field(None, description="YYYY-MM-DD o YYYY-MM-DDTHH:mm:ss")
    observaciones: Optional[str] = Field(None, max_length=NOTES_MAX, description="Observaciones")

    @field_validator('fecha_venta', mode='before')
    @classmethod
    def validate_fecha(cls, v):
        if isinstance(v, datetime):
            return v
        return parse_operation_date(v)

    @field_validator('cliente_desc', 'observaciones')
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return normalize_text(v) or None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "detalles": [{"id_producto": 1, "cantidad": 2, "precio_unitario": 1000}],
                "pagos": [{"id_metodo_pago": 1, "monto": 500}],
                "cliente_desc": "Juan",
                "observaciones": "Paga el resto el viernes"
            }
        }


class PaymentCreateRequest(BaseModel):
    id_metodo_pago: int = Field(..., gt=0, description="Método de pago")
    monto: Decimal = Field(..., description="Monto del abono")
    observaciones: Optional[str] = Field(None, max_length=255, description="Notas del abono")

    @field_validator('monto')
    @classmethod
    def validate_monto(cls, v: Decimal) -> Decimal:
        return validate_money_precision(v, "El monto")

    @field_validator('observaciones')
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return normalize_text(v) or None


class SaleCreateResponse(BaseResponse):
    venta: Dict[str, Any]
    warnings: List[Dict[str, Any]] = []


class SaleDeleteResponse(BaseResponse):
    venta: Dict[str, Any]
    warnings: List[Dict[str, Any]] = []


class SaleDetailResponse(BaseModel):
    venta: Dict[str, Any]
    productos: List[Dict[str, Any]]
    pagos: List[Dict[str, Any]]


class PaymentsResponse(BaseModel):
    ok: bool = True
    total: int
    abonos: List[Dict[str, Any]]
    venta: Dict[str, Any]


class PaymentCreateResponse(BaseResponse):
    abono: Dict[str, Any]
    venta: Dict[str, Any]
