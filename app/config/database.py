# app/config/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from .settings import settings

# Configuración del engine
engine_kwargs = {
    "pool_pre_ping": True,
    "echo": settings.debug
}

if settings.database_url.startswith("sqlite"):
    # SQLite se usa en desarrollo local; FastAPI atiende en varios hilos
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs["pool_recycle"] = 300

# Create engine
engine = create_engine(
    settings.database_url_with_ssl,
    **engine_kwargs
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Crear las tablas equipos/ventas si no existen"""
    from app.shared.database.models import Base

    Base.metadata.create_all(bind=bind or engine)


# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
