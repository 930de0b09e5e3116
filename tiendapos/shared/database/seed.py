# tiendapos/shared/database/seed.py
"""
Datos iniciales: roles, tipos de identificación, formularios, permisos,
métodos de pago y usuarios de prueba.

Idempotente: lo que ya existe (por nombre, URL o email) no se duplica.
"""
from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
import logging

from tiendapos.core.auth.service import AuthService
from tiendapos.shared.database.models import (
    Role, IdentificationType, Form, Permission, PaymentMethod, User
)
from tiendapos.shared.rules import PROTECTED_ROLE

logger = logging.getLogger(__name__)

SELLER_ROLE = "vendedor"

# (titulo, url, hijos)
FORMS: List[Tuple[str, Optional[str], List[Tuple[str, str]]]] = [
    ("Inicio", "/dashboard", []),
    ("Operación", None, [
        ("Ventas", "/dashboard/ventas"),
        ("Compras", "/dashboard/compras"),
        ("Productos", "/dashboard/productos"),
    ]),
    ("Reportes", None, [
        ("Reporte de ventas", "/dashboard/reporte-ventas"),
        ("Reporte de compras", "/dashboard/reporte-compras"),
    ]),
    ("Administración", None, [
        ("Roles", "/dashboard/roles"),
        ("Permisos", "/dashboard/permisos"),
        ("Métodos de pago", "/dashboard/metodos-pago"),
        ("Tipos de identificación", "/dashboard/tipos-identificacion"),
    ]),
]

SELLER_FORMS = {"/dashboard", "/dashboard/ventas", "/dashboard/productos"}

# (email, password, nombres, apellidos, rol)
USERS = [
    ("admin@tiendapos.com", "admin123", "Ana", "Administradora", PROTECTED_ROLE),
    ("vendedor@tiendapos.com", "vendedor123", "Juan", "Vendedor", SELLER_ROLE),
]


def _get_or_create_role(db: Session, name: str, description: str) -> Role:
    role = db.query(Role).filter(Role.name == name).first()
    if not role:
        role = Role(name=name, description=description, status='A')
        db.add(role)
        db.flush()
        logger.info(f"Rol creado: {name}")
    return role


def _seed_forms(db: Session) -> Dict[str, Form]:
    """Crea padres e hijos; devuelve los formularios indexados por url (o título si es padre)"""
    by_key: Dict[str, Form] = {}
    for order, (title, url, children) in enumerate(FORMS, start=1):
        parent = db.query(Form).filter(Form.title == title, Form.parent_id.is_(None)).first()
        if not parent:
            parent = Form(title=title, url=url, is_parent=bool(children), order=order)
            db.add(parent)
            db.flush()
        by_key[url or title] = parent

        for child_order, (child_title, child_url) in enumerate(children, start=1):
            child = db.query(Form).filter(Form.url == child_url).first()
            if not child:
                child = Form(title=child_title, url=child_url, is_parent=False,
                             parent_id=parent.id, order=child_order)
                db.add(child)
                db.flush()
            by_key[child_url] = child
    return by_key


def _grant(db: Session, role: Role, forms: List[Form]) -> None:
    assigned = {p.form_id for p in db.query(Permission).filter(Permission.role_id == role.id)}
    for form in forms:
        if form.id not in assigned:
            db.add(Permission(role_id=role.id, form_id=form.id))
            assigned.add(form.id)


def seed_reference_data(db: Session) -> None:
    try:
        admin_role = _get_or_create_role(db, PROTECTED_ROLE, "Acceso total al sistema")
        seller_role = _get_or_create_role(db, SELLER_ROLE, "Registra ventas y abonos")

        for name, abbreviation in [("Cédula de ciudadanía", "CC"), ("Cédula de extranjería", "CE")]:
            if not db.query(IdentificationType).filter(IdentificationType.name == name).first():
                db.add(IdentificationType(name=name, abbreviation=abbreviation, status='A'))
        db.flush()
        default_id_type = db.query(IdentificationType).order_by(IdentificationType.id).first()

        forms = _seed_forms(db)
        _grant(db, admin_role, list(forms.values()))
        seller_forms = [forms[url] for url in SELLER_FORMS]
        seller_forms += [f.parent for f in seller_forms if f.parent is not None]
        _grant(db, seller_role, seller_forms)

        for name, description in [("Efectivo", "Pago en efectivo"), ("Transferencia", "Transferencia bancaria")]:
            if not db.query(PaymentMethod).filter(PaymentMethod.name == name).first():
                db.add(PaymentMethod(name=name, description=description, is_active=True))

        roles = {PROTECTED_ROLE: admin_role, SELLER_ROLE: seller_role}
        for email, password, first_name, last_name, role_name in USERS:
            if db.query(User).filter(User.email == email).first():
                continue
            db.add(User(
                email=email,
                password_hash=AuthService.get_password_hash(password),
                first_name=first_name,
                last_name=last_name,
                role_id=roles[role_name].id,
                identification_type_id=default_id_type.id if default_id_type else None,
                is_active=True
            ))
            logger.info(f"Usuario creado: {email} ({role_name})")

        db.commit()
    except Exception:
        db.rollback()
        raise
