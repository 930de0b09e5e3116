# tiendapos/modules/products/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from tiendapos.shared.database.models import Product, InventoryMovement


class ProductsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, include_inactive: bool = False, search: Optional[str] = None) -> List[Product]:
        query = self.db.query(Product)
        if not include_inactive:
            query = query.filter(Product.is_active == True)
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))
        return query.order_by(Product.name).all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_movements(self, product_id: int, limit: int = 50) -> List[InventoryMovement]:
        return self.db.query(InventoryMovement).filter(
            InventoryMovement.product_id == product_id
        ).order_by(InventoryMovement.created_at.desc(), InventoryMovement.id.desc()).limit(limit).all()

    def create(self, product: Product, user_id: int) -> Product:
        """Crear producto registrando el stock inicial en el kardex"""
        try:
            self.db.add(product)
            self.db.flush()
            if product.stock:
                self.db.add(InventoryMovement(
                    product_id=product.id,
                    change_type='stock_inicial',
                    quantity_before=0,
                    quantity_after=product.stock,
                    user_id=user_id,
                    notes="Stock inicial",
                    created_at=datetime.now()
                ))
            self.db.commit()
            self.db.refresh(product)
            return product
        except Exception:
            self.db.rollback()
            raise

    def save(self, product: Product) -> Product:
        try:
            self.db.commit()
            self.db.refresh(product)
            return product
        except Exception:
            self.db.rollback()
            raise
