# app/modules/inventory/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from app.shared.schemas.common import BaseResponse
from app.shared.schemas.records import DeviceRecord, DeviceStatus


class DeviceCreateRequest(BaseModel):
    # Sin restricciones aquí: la validación de negocio la hace el servicio
    model: str = Field("", description="Modelo del equipo, ej. iPhone 15 Pro Max")
    imei: str = Field("", description="IMEI o serie numérica, mínimo 10 dígitos")

    class Config:
        json_schema_extra = {
            "example": {
                "model": "iPhone 15",
                "imei": "123456789012"
            }
        }


class InventorySearchParams(BaseModel):
    search: Optional[str] = None
    status: Optional[DeviceStatus] = None


class DeviceResponse(BaseResponse):
    device: DeviceRecord
    refresh_required: bool = True


class DeviceListResponse(BaseResponse):
    devices: List[DeviceRecord]
    count: int
    search: Optional[str] = None
