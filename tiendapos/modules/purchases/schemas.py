# tiendapos/modules/purchases/schemas.py
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any
from datetime import datetime

from tiendapos.shared.schemas.common import BaseResponse, LineItemIn
from tiendapos.shared.rules import NOTES_MAX, normalize_text
from tiendapos.modules.sales.schemas import parse_operation_date


class PurchaseCreateRequest(BaseModel):
    detalles: List[LineItemIn] = Field(
        ...,
        validation_alias=AliasChoices("detalles", "productos"),
        description="Líneas de la compra"
    )
    fecha_compra: Optional[datetime] = Field(None, description="YYYY-MM-DD o YYYY-MM-DDTHH:mm:ss")
    observaciones: Optional[str] = Field(None, max_length=NOTES_MAX)

    @field_validator('fecha_compra', mode='before')
    @classmethod
    def validate_fecha(cls, v):
        if isinstance(v, datetime):
            return v
        return parse_operation_date(v)

    @field_validator('observaciones')
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return normalize_text(v) or None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "detalles": [
                    {"id_producto": 1, "cantidad": 24, "precio_unitario": 650},
                    {"id_producto": 2, "cantidad": 12, "precio_unitario": 1800}
                ],
                "fecha_compra": "2024-05-02",
                "observaciones": "Pedido semanal"
            }
        }


class PurchaseUpdateRequest(PurchaseCreateRequest):
    """Reemplaza las líneas completas de la compra"""


class PurchaseResponse(BaseResponse):
    compra: Dict[str, Any]
    warnings: List[Dict[str, Any]] = []


class PurchaseDetailResponse(BaseModel):
    compra: Dict[str, Any]
    productos: List[Dict[str, Any]]
