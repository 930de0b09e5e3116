# tiendapos/config/settings.py
from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "TiendaPOS API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tiendapos.db")

    # Security
    secret_key: str = os.getenv("SECRET_KEY", "change-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480

    # CORS
    cors_origins: List[str] = ["*"]

    # Reglas de negocio
    # True: una venta que deja productos bajo el mínimo se rechaza (MIN_STOCK_BREACH)
    # False: la venta se registra y el incumplimiento se devuelve como advertencia
    block_on_min_stock_breach: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 8000))

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

settings = Settings()
