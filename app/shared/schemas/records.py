# app/shared/schemas/records.py
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal


class DeviceStatus(str, Enum):
    AVAILABLE = "disponible"
    SOLD = "vendido"


class DeviceRecord(BaseModel):
    """Equipo tal como lo entrega el gateway"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    model: str
    imei: str
    status: DeviceStatus
    created_at: Optional[datetime] = None

    @property
    def is_available(self) -> bool:
        return self.status == DeviceStatus.AVAILABLE


class SaleRecord(BaseModel):
    """Venta con los datos del equipo (modelo, IMEI) ya unidos"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    device_id: str
    client_name: str
    client_phone: str
    channel: str
    down_payment: Decimal
    created_at: Optional[datetime] = None

    # Join fields
    model: Optional[str] = None
    imei: Optional[str] = None
