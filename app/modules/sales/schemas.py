# app/modules/sales/schemas.py
from enum import Enum
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from app.shared.schemas.common import BaseResponse
from app.shared.schemas.records import DeviceRecord, SaleRecord


class SaleCreateRequest(BaseModel):
    # Valores crudos del formulario; el servicio valida en orden
    device_id: str = Field("", description="Id del equipo disponible")
    client_name: str = Field("", description="Nombre completo del cliente")
    client_phone: str = Field("", description="Teléfono a 10 dígitos")
    channel: str = Field("Local", description="Local, Facebook, Referido, WhatsApp")
    down_payment: Optional[Union[str, float]] = Field(None, description="Enganche; vacío o inválido cuenta como 0")


class SaleOutcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    PARTIAL = "partial"


class SaleRegistrationResult(BaseModel):
    outcome: SaleOutcome
    message: str
    sale: Optional[SaleRecord] = None
    device_id: Optional[str] = None
    error_code: Optional[str] = None
    field: Optional[str] = None
    refresh_required: bool = False

    @property
    def succeeded(self) -> bool:
        return self.outcome == SaleOutcome.SUCCESS


class SaleResponse(BaseResponse):
    outcome: SaleOutcome
    sale: SaleRecord
    refresh_required: bool = True


class SalesListResponse(BaseResponse):
    sales: List[SaleRecord]
    count: int


class ChannelsResponse(BaseModel):
    channels: List[str]
    default: str


class DeviceTransitionResponse(BaseResponse):
    device_id: str
    status: str
    refresh_required: bool = True


class SaleAnomalies(BaseModel):
    orphan_sales: List[SaleRecord] = []
    duplicate_sales: Dict[str, List[str]] = {}
    unsold_without_sale: List[DeviceRecord] = []

    @property
    def total(self) -> int:
        return len(self.orphan_sales) + len(self.duplicate_sales) + len(self.unsold_without_sale)


class SaleAnomaliesResponse(BaseResponse):
    anomalies: SaleAnomalies
    total: int
