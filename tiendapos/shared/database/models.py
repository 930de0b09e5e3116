# tiendapos/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text,
    Numeric, ForeignKey, UniqueConstraint, CheckConstraint,
    func
)
from sqlalchemy.orm import relationship
from datetime import datetime

from tiendapos.config.database import Base

# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# SEGURIDAD: ROLES, USUARIOS, FORMULARIOS, PERMISOS
# =====================================================

class Role(Base, TimestampMixin):
    """Modelo de Rol"""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)
    description = Column(String(200))
    # 'A' activo, 'I' inactivo
    status = Column(String(1), nullable=False, default='A')

    # Relationships
    users = relationship("User", back_populates="role")
    permissions = relationship("Permission", back_populates="role", cascade="all, delete-orphan")


class IdentificationType(Base, TimestampMixin):
    """Modelo de Tipo de Identificación"""
    __tablename__ = "identification_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)
    abbreviation = Column(String(10))
    description = Column(String(200))
    status = Column(String(1), nullable=False, default='A')

    users = relationship("User", back_populates="identification_type")


class User(Base):
    """Modelo de Usuario"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    identification_type_id = Column(Integer, ForeignKey("identification_types.id"), index=True)
    identification = Column(String(30))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    role = relationship("Role", back_populates="users")
    identification_type = relationship("IdentificationType", back_populates="users")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"


class Form(Base):
    """Modelo de Formulario (entrada de navegación)"""
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    # None para formularios padre
    url = Column(String(255))
    is_parent = Column(Boolean, nullable=False, default=False)
    parent_id = Column(Integer, ForeignKey("forms.id"), nullable=True, index=True)
    order = Column(Integer, nullable=False, default=0)

    parent = relationship("Form", remote_side=[id], back_populates="children")
    children = relationship("Form", back_populates="parent")


class Permission(Base):
    """Modelo de Permiso (rol x formulario)"""
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    form_id = Column(Integer, ForeignKey("forms.id"), nullable=False, index=True)
    can_create = Column(Boolean, nullable=False, default=True)
    can_read = Column(Boolean, nullable=False, default=True)
    can_update = Column(Boolean, nullable=False, default=True)
    can_delete = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint('role_id', 'form_id', name='permissions_unique_role_form'),
    )

    role = relationship("Role", back_populates="permissions")
    form = relationship("Form")


# =====================================================
# PRODUCTOS E INVENTARIO
# =====================================================

class Product(Base, TimestampMixin):
    """Modelo de Producto"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    description = Column(String(255))
    sale_price = Column(Numeric(12, 2), nullable=False, default=0)
    purchase_price = Column(Numeric(12, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer)
    max_stock = Column(Integer)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint('stock >= 0', name='products_stock_non_negative'),
    )

    inventory_movements = relationship("InventoryMovement", back_populates="product")


class InventoryMovement(Base):
    """Historial de cambios de stock (kardex)"""
    __tablename__ = "inventory_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    change_type = Column(String(50), nullable=False)
    quantity_before = Column(Integer, nullable=False)
    quantity_after = Column(Integer, nullable=False)
    reference_id = Column(Integer)
    user_id = Column(Integer)
    notes = Column(String(255))
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    product = relationship("Product", back_populates="inventory_movements")


# =====================================================
# MÉTODOS DE PAGO
# =====================================================

class PaymentMethod(Base):
    """Modelo de Método de Pago"""
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(200))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())


# =====================================================
# VENTAS
# =====================================================

class Sale(Base):
    """Modelo de Venta"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    sale_date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    total = Column(Numeric(12, 2), nullable=False)
    client_description = Column(String(200))
    is_credit = Column(Boolean, nullable=False, default=False)
    pending_balance = Column(Numeric(12, 2), nullable=False, default=0)
    state = Column(String(20), nullable=False, default='PAGADA', index=True)
    notes = Column(Text)

    # Borrado lógico
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    deleted_at = Column(DateTime)
    deleted_by = Column(Integer, ForeignKey("users.id"))
    deletion_reason = Column(String(255))

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        CheckConstraint('pending_balance >= 0', name='sales_pending_balance_non_negative'),
    )

    # Relationships
    seller = relationship("User", foreign_keys=[user_id])
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan", order_by="SaleItem.id")
    payments = relationship(
        "SalePayment",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by=lambda: [SalePayment.paid_at, SalePayment.id]
    )


class SaleItem(Base):
    """Modelo de Item de Venta"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint('sale_id', 'product_id', name='sale_items_unique_product'),
        CheckConstraint('quantity > 0', name='sale_items_quantity_positive'),
    )

    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")


class SalePayment(Base):
    """Modelo de Pago/Abono de Venta"""
    __tablename__ = "sale_payments"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"))
    amount = Column(Numeric(12, 2), nullable=False)
    paid_at = Column(DateTime, nullable=False, default=datetime.now)
    notes = Column(String(255))

    __table_args__ = (
        CheckConstraint('amount > 0', name='sale_payments_amount_positive'),
    )

    # Relationships
    sale = relationship("Sale", back_populates="payments")
    payment_method = relationship("PaymentMethod")


# =====================================================
# COMPRAS
# =====================================================

class Purchase(Base):
    """Modelo de Compra"""
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    purchase_date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    total = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    deleted_at = Column(DateTime)
    deleted_by = Column(Integer, ForeignKey("users.id"))
    deletion_reason = Column(String(255))

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    user = relationship("User", foreign_keys=[user_id])
    items = relationship("PurchaseItem", back_populates="purchase", cascade="all, delete-orphan", order_by="PurchaseItem.id")


class PurchaseItem(Base):
    """Modelo de Item de Compra"""
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint('purchase_id', 'product_id', name='purchase_items_unique_product'),
        CheckConstraint('quantity > 0', name='purchase_items_quantity_positive'),
    )

    purchase = relationship("Purchase", back_populates="items")
    product = relationship("Product")
