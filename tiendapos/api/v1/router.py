# tiendapos/api/v1/router.py
from fastapi import APIRouter
from tiendapos.api.v1.auth import router as auth_router
from tiendapos.modules.sales.router import router as sales_router
from tiendapos.modules.purchases.router import router as purchases_router
from tiendapos.modules.products.router import router as products_router
from tiendapos.modules.payment_methods.router import router as payment_methods_router
from tiendapos.modules.roles.router import router as roles_router
from tiendapos.modules.identification_types.router import router as identification_types_router
from tiendapos.modules.permissions.router import router as permissions_router, forms_router
from tiendapos.modules.reports.router import router as reports_router

# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])

# ==================== OPERACIÓN ====================

api_router.include_router(
    sales_router,
    prefix="/ventas",
    tags=["Ventas"]
)

api_router.include_router(
    purchases_router,
    prefix="/compras",
    tags=["Compras"]
)

api_router.include_router(
    products_router,
    prefix="/productos",
    tags=["Productos"]
)

# ==================== DATOS DE REFERENCIA ====================

api_router.include_router(
    payment_methods_router,
    prefix="/metodos-pago",
    tags=["Métodos de pago"]
)

api_router.include_router(
    roles_router,
    prefix="/roles",
    tags=["Roles"]
)

api_router.include_router(
    identification_types_router,
    prefix="/tipos-identificacion",
    tags=["Tipos de identificación"]
)

api_router.include_router(
    permissions_router,
    prefix="/permisos",
    tags=["Permisos"]
)

api_router.include_router(
    forms_router,
    prefix="/formularios",
    tags=["Formularios"]
)

# ==================== REPORTES ====================

api_router.include_router(
    reports_router,
    prefix="/reportes",
    tags=["Reportes"]
)
