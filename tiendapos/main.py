# tiendapos/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from tiendapos.config.settings import settings
from tiendapos.config.database import init_db
from tiendapos.core.middleware import setup_middleware
from tiendapos.core.errors import setup_exception_handlers
from tiendapos.api.v1.router import api_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    logger.info(f"{settings.app_name} iniciando - versión {settings.version}")
    logger.info(f"Entorno: {'Development' if settings.debug else 'Production'}")
    logger.info(f"Base de datos: {settings.database_url.split('@')[-1]}")
    logger.info(f"Stock mínimo: {'bloquea' if settings.block_on_min_stock_breach else 'advierte'}")

    init_db()

    yield

    # Shutdown
    logger.info(f"{settings.app_name} detenido")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Ventas de contado y fiadas, abonos, compras e inventario",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware and error handlers
setup_middleware(app)
setup_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": f"{settings.app_name} - Ventas e Inventario",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tiendapos.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
