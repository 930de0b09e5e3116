# tiendapos/modules/payment_methods/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List
import logging

from .repository import PaymentMethodsRepository
from .schemas import PaymentMethodCreate, PaymentMethodUpdate
from tiendapos.core.errors import NotFoundError, ConflictError
from tiendapos.shared.database.models import PaymentMethod

logger = logging.getLogger(__name__)

class PaymentMethodsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = PaymentMethodsRepository(db)

    async def list_methods(self) -> List[Dict[str, Any]]:
        return [self._to_dict(m) for m in self.repository.get_all()]

    async def get_method(self, method_id: int) -> Dict[str, Any]:
        return self._to_dict(self._get_or_404(method_id))

    async def create_method(self, data: PaymentMethodCreate) -> Dict[str, Any]:
        if self.repository.find_by_name(data.nombre_metodo_pago):
            raise ConflictError(f"Ya existe un método de pago llamado '{data.nombre_metodo_pago}'.")

        method = self.repository.save(PaymentMethod(
            name=data.nombre_metodo_pago,
            description=data.descripcion_metodo_pago,
            is_active=data.activo
        ))
        logger.info(f"Método de pago creado: #{method.id} '{method.name}'")
        return {"message": "Método de pago creado.", "metodo_pago": self._to_dict(method)}

    async def update_method(self, method_id: int, data: PaymentMethodUpdate) -> Dict[str, Any]:
        method = self._get_or_404(method_id)
        if self.repository.find_by_name(data.nombre_metodo_pago, exclude_id=method_id):
            raise ConflictError(f"Ya existe un método de pago llamado '{data.nombre_metodo_pago}'.")

        method.name = data.nombre_metodo_pago
        method.description = data.descripcion_metodo_pago
        method.is_active = data.activo
        method = self.repository.save(method)
        logger.info(f"Método de pago actualizado: #{method.id}")
        return {"message": "Método de pago actualizado.", "metodo_pago": self._to_dict(method)}

    async def delete_method(self, method_id: int) -> Dict[str, Any]:
        """Eliminar; si tiene abonos registrados solo puede desactivarse"""
        method = self._get_or_404(method_id)
        used = self.repository.count_payments(method_id)
        if used:
            raise ConflictError(
                f"El método de pago tiene {used} pagos registrados. Desactívalo en lugar de eliminarlo.",
                pagos=used,
                requiresDeactivation=True
            )
        self.repository.delete(method)
        logger.info(f"Método de pago eliminado: #{method_id}")
        return {"message": "Método de pago eliminado correctamente."}

    def _get_or_404(self, method_id: int) -> PaymentMethod:
        method = self.repository.get_by_id(method_id)
        if not method:
            raise NotFoundError(f"Método de pago {method_id} no encontrado")
        return method

    @staticmethod
    def _to_dict(method: PaymentMethod) -> Dict[str, Any]:
        return {
            "id_metodo_pago": method.id,
            "nombre_metodo_pago": method.name,
            "descripcion_metodo_pago": method.description,
            "activo": method.is_active,
            "creado_en": method.created_at
        }
