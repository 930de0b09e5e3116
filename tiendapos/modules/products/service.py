# tiendapos/modules/products/service.py
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
import logging

from .repository import ProductsRepository
from .schemas import ProductCreate, ProductUpdate
from tiendapos.core.errors import NotFoundError, ValidationError
from tiendapos.shared.database.models import Product

logger = logging.getLogger(__name__)

class ProductsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductsRepository(db)

    async def list_products(self, include_inactive: bool = False, search: Optional[str] = None) -> List[Dict[str, Any]]:
        return [self._to_dict(p) for p in self.repository.get_all(include_inactive, search)]

    async def get_product(self, product_id: int) -> Dict[str, Any]:
        return self._to_dict(self._get_or_404(product_id))

    async def create_product(self, data: ProductCreate, user_id: int) -> Dict[str, Any]:
        self._check_initial_stock(data)
        product = self.repository.create(Product(
            name=data.nombre,
            description=data.descripcion,
            sale_price=data.precio_venta,
            purchase_price=data.precio_compra,
            stock=data.stock,
            min_stock=data.stock_minimo,
            max_stock=data.stock_maximo,
            is_active=data.activo
        ), user_id=user_id)
        logger.info(f"Producto creado: #{product.id} '{product.name}' (stock {product.stock})")
        return {"message": "Producto creado.", "producto": self._to_dict(product)}

    async def update_product(self, product_id: int, data: ProductUpdate) -> Dict[str, Any]:
        product = self._get_or_404(product_id)
        product.name = data.nombre
        product.description = data.descripcion
        product.sale_price = data.precio_venta
        product.purchase_price = data.precio_compra
        product.min_stock = data.stock_minimo
        product.max_stock = data.stock_maximo
        product.is_active = data.activo
        product = self.repository.save(product)
        logger.info(f"Producto actualizado: #{product.id}")
        return {"message": "Producto actualizado.", "producto": self._to_dict(product)}

    async def deactivate_product(self, product_id: int) -> Dict[str, Any]:
        """Los productos nunca se borran: tienen ventas y compras asociadas"""
        product = self._get_or_404(product_id)
        product.is_active = False
        self.repository.save(product)
        logger.info(f"Producto desactivado: #{product_id}")
        return {"message": "Producto desactivado."}

    async def get_movements(self, product_id: int) -> List[Dict[str, Any]]:
        self._get_or_404(product_id)
        return [
            {
                "id": m.id,
                "tipo": m.change_type,
                "cantidad_anterior": m.quantity_before,
                "cantidad_nueva": m.quantity_after,
                "referencia": m.reference_id,
                "id_usuario": m.user_id,
                "notas": m.notes,
                "fecha": m.created_at.isoformat() if m.created_at else None
            }
            for m in self.repository.get_movements(product_id)
        ]

    @staticmethod
    def _check_initial_stock(data: ProductCreate):
        if data.stock_maximo is not None and data.stock > data.stock_maximo:
            raise ValidationError("El stock inicial supera el stock máximo del producto.")

    def _get_or_404(self, product_id: int) -> Product:
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Producto {product_id} no encontrado")
        return product

    @staticmethod
    def _to_dict(product: Product) -> Dict[str, Any]:
        return {
            "id_producto": product.id,
            "nombre": product.name,
            "descripcion": product.description,
            "precio_venta": float(product.sale_price or 0),
            "precio_compra": float(product.purchase_price or 0),
            "stock": product.stock,
            "stock_minimo": product.min_stock,
            "stock_maximo": product.max_stock,
            "activo": product.is_active
        }
