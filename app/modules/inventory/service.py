# app/modules/inventory/service.py
import logging
from typing import List, Optional

from app.core.exceptions import ValidationError
from app.shared.schemas.records import DeviceRecord, DeviceStatus
from app.shared.services.gateway import DataGateway
from .schemas import DeviceCreateRequest, InventorySearchParams

logger = logging.getLogger(__name__)

MIN_IMEI_DIGITS = 10


def validate_device_input(model: str, imei: str) -> None:
    """Validar formulario de alta; se reporta el primer campo inválido"""
    if not (model or "").strip():
        raise ValidationError("model", "El modelo es requerido")
    if not imei or not imei.isascii() or not imei.isdigit():
        raise ValidationError("imei", "El IMEI debe ser numérico")
    if len(imei) < MIN_IMEI_DIGITS:
        raise ValidationError("imei", f"El IMEI debe tener al menos {MIN_IMEI_DIGITS} dígitos")


def filter_devices(
    devices: List[DeviceRecord],
    search: Optional[str] = None,
    status: Optional[DeviceStatus] = None
) -> List[DeviceRecord]:
    """Modelo sin distinguir mayúsculas, IMEI por coincidencia parcial"""
    result = devices
    if status is not None:
        result = [device for device in result if device.status == status]
    if search:
        term = search.lower()
        result = [
            device for device in result
            if term in (device.model or "").lower() or search in (device.imei or "")
        ]
    return result


class InventoryService:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    async def list_devices(self, params: Optional[InventorySearchParams] = None) -> List[DeviceRecord]:
        params = params or InventorySearchParams()
        devices = self.gateway.list_devices()
        return filter_devices(devices, params.search, params.status)

    async def list_available_devices(self) -> List[DeviceRecord]:
        """Equipos que pueden ofrecerse en el formulario de venta"""
        return filter_devices(self.gateway.list_devices(), status=DeviceStatus.AVAILABLE)

    async def add_device(self, device_data: DeviceCreateRequest) -> DeviceRecord:
        """
        Anexar equipo a stock.

        La validación ocurre antes de cualquier llamada al gateway; el equipo
        queda en estado disponible.
        """
        validate_device_input(device_data.model, device_data.imei)

        device = self.gateway.create_device(device_data.model.strip(), device_data.imei)
        logger.info(f"Equipo anexado a stock: {device.model} - {device.imei}")
        return device
