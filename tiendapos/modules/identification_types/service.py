# tiendapos/modules/identification_types/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
import logging

from .repository import IdentificationTypesRepository
from .schemas import IdentificationTypeCreate, IdentificationTypeUpdate
from tiendapos.core.errors import NotFoundError, ConflictError
from tiendapos.shared.database.models import IdentificationType
from tiendapos.shared.rules import normalize_text

logger = logging.getLogger(__name__)

class IdentificationTypesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = IdentificationTypesRepository(db)

    async def list_types(self) -> List[Dict[str, Any]]:
        return [self._to_dict(t) for t in self.repository.get_all()]

    async def get_type(self, type_id: int) -> Dict[str, Any]:
        return self._to_dict(self._get_or_404(type_id))

    async def exists(self, name: str, exclude_id: Optional[int] = None) -> Dict[str, bool]:
        """Prechequeo de nombre duplicado para el formulario"""
        if not normalize_text(name):
            return {"exists": False}
        return {"exists": self.repository.find_by_name(name, exclude_id) is not None}

    async def create_type(self, data: IdentificationTypeCreate) -> Dict[str, Any]:
        if self.repository.find_by_name(data.nombre):
            raise ConflictError("Ya existe un tipo de identificación con ese nombre.")

        id_type = self.repository.save(IdentificationType(
            name=data.nombre,
            abbreviation=data.abreviatura,
            description=data.descripcion,
            status=data.estado
        ))
        logger.info(f"Tipo de identificación creado: #{id_type.id} '{id_type.name}'")
        return {"message": "Tipo de identificación creado.", "tipo": self._to_dict(id_type)}

    async def update_type(self, type_id: int, data: IdentificationTypeUpdate) -> Dict[str, Any]:
        id_type = self._get_or_404(type_id)
        if self.repository.find_by_name(data.nombre, exclude_id=type_id):
            raise ConflictError("Ya existe un tipo de identificación con ese nombre.")

        id_type.name = data.nombre
        id_type.abbreviation = data.abreviatura
        id_type.description = data.descripcion
        id_type.status = data.estado
        id_type = self.repository.save(id_type)
        return {"message": "Tipo de identificación actualizado.", "tipo": self._to_dict(id_type)}

    async def set_status(self, type_id: int, active: bool) -> Dict[str, Any]:
        id_type = self._get_or_404(type_id)
        id_type.status = 'A' if active else 'I'
        self.repository.save(id_type)
        logger.info(f"Tipo de identificación #{type_id} -> {id_type.status}")
        return {
            "message": "Tipo de identificación activado." if active else "Tipo de identificación desactivado."
        }

    async def delete_type(self, type_id: int) -> Dict[str, Any]:
        """Eliminar; si está en uso se responde 409 y el cliente ofrece desactivarlo"""
        id_type = self._get_or_404(type_id)
        users = self.repository.count_users(type_id)
        sales = self.repository.count_sales(type_id)
        if users or sales:
            raise ConflictError(
                "El tipo de identificación está en uso. Puedes desactivarlo en lugar de eliminarlo.",
                usuarios=users,
                ventas=sales,
                requiresDeactivation=True
            )
        self.repository.delete(id_type)
        logger.info(f"Tipo de identificación eliminado: #{type_id}")
        return {"message": "Tipo de identificación eliminado."}

    def _get_or_404(self, type_id: int) -> IdentificationType:
        id_type = self.repository.get_by_id(type_id)
        if not id_type:
            raise NotFoundError(f"Tipo de identificación {type_id} no encontrado")
        return id_type

    @staticmethod
    def _to_dict(id_type: IdentificationType) -> Dict[str, Any]:
        return {
            "id": id_type.id,
            "nombre": id_type.name,
            "abreviatura": id_type.abbreviation,
            "descripcion": id_type.description,
            "estado": id_type.status
        }
