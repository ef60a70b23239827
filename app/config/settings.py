# app/config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "CelControl PRO API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend de datos: "sql" (SQLAlchemy) o "rest" (Supabase/PostgREST)
    data_backend: str = "sql"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./celcontrol.db")
    auto_create_tables: bool = True

    # Supabase / PostgREST
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    gateway_timeout: float = 15.0

    # Ventas
    sale_channels: List[str] = ["Local", "Facebook", "Referido", "WhatsApp"]

    # Reportes
    report_date_format: str = "%d/%m/%Y"
    report_filename_prefix: str = "ventas_celcontrol_pro"

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 10000))

    # SSL para PostgreSQL en producción
    @property
    def database_url_with_ssl(self) -> str:
        """Driver psycopg 3 y SSL para conexiones PostgreSQL remotas"""
        url = self.database_url
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                url = "postgresql+psycopg://" + url[len(prefix):]
        if url.startswith("postgresql") and "localhost" not in url and "sslmode=" not in url:
            separator = "&" if "?" in url else "?"
            return f"{url}{separator}sslmode=require"
        return url

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

settings = Settings()
