# app/shared/database/models.py
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, DateTime, Numeric, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def generate_id() -> str:
    return uuid.uuid4().hex


# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega created_at asignado por la base de datos"""
    created_at = Column(
        DateTime, nullable=False, default=datetime.now,
        server_default=func.current_timestamp(), index=True
    )


# =====================================================
# INVENTARIO
# =====================================================

class Device(Base, TimestampMixin):
    """Modelo de Equipo (celular en stock)"""
    __tablename__ = "equipos"

    id = Column(String(32), primary_key=True, default=generate_id)
    model = Column("modelo", String(255), nullable=False)
    imei = Column(String(32), nullable=False, index=True)
    status = Column("estado", String(20), nullable=False, default="disponible")

    __table_args__ = (
        CheckConstraint("estado IN ('disponible', 'vendido')", name="ck_equipos_estado"),
    )

    # Relationships
    sales = relationship("Sale", back_populates="device")


# =====================================================
# VENTAS
# =====================================================

class Sale(Base, TimestampMixin):
    """Modelo de Venta"""
    __tablename__ = "ventas"

    id = Column(String(32), primary_key=True, default=generate_id)
    # Sin restricción UNIQUE: un equipo con más de una venta es una anomalía detectable
    device_id = Column("equipo_id", String(32), ForeignKey("equipos.id"), nullable=False, index=True)
    client_name = Column("cliente", String(255), nullable=False)
    client_phone = Column("telefono", String(10), nullable=False)
    channel = Column("canal", String(50), nullable=False, default="Local")
    down_payment = Column("enganche", Numeric(10, 2), nullable=False, default=0)

    # Relationships
    device = relationship("Device", back_populates="sales")
