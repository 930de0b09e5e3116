#!/usr/bin/env python3
"""
Crear tablas y cargar datos iniciales (roles, formularios, permisos,
métodos de pago y usuarios de prueba).

Uso:
    python scripts/seed_data.py
"""
import logging

from tiendapos.config.database import SessionLocal, init_db
from tiendapos.shared.database.seed import seed_reference_data, USERS


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    init_db()

    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()

    print("Usuarios de prueba:")
    for email, password, _, _, role in USERS:
        print(f"  {role:<15} {email} / {password}")


if __name__ == "__main__":
    main()
