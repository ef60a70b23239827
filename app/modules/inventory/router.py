# app/modules/inventory/router.py
from fastapi import APIRouter, Depends, status as http_status
from typing import Optional

from app.shared.schemas.records import DeviceStatus
from app.shared.services.gateway import DataGateway, get_gateway
from .service import InventoryService
from .schemas import (
    DeviceCreateRequest, DeviceListResponse, DeviceResponse, InventorySearchParams
)

router = APIRouter()

@router.get("/devices", response_model=DeviceListResponse)
async def list_devices(
    search: Optional[str] = None,
    status: Optional[DeviceStatus] = None,
    gateway: DataGateway = Depends(get_gateway)
):
    """Listar equipos (más recientes primero) con búsqueda por modelo o IMEI"""
    service = InventoryService(gateway)
    devices = await service.list_devices(
        InventorySearchParams(search=search, status=status)
    )
    return DeviceListResponse(
        success=True,
        message="No hay resultados para la búsqueda." if search and not devices else "",
        devices=devices,
        count=len(devices),
        search=search
    )

@router.get("/devices/available", response_model=DeviceListResponse)
async def list_available_devices(gateway: DataGateway = Depends(get_gateway)):
    """Equipos disponibles para el formulario de venta"""
    service = InventoryService(gateway)
    devices = await service.list_available_devices()
    return DeviceListResponse(success=True, devices=devices, count=len(devices))

@router.post("/devices", response_model=DeviceResponse, status_code=http_status.HTTP_201_CREATED)
async def add_device(
    device_data: DeviceCreateRequest,
    gateway: DataGateway = Depends(get_gateway)
):
    """
    Anexar equipo a stock

    **Validaciones:**
    - Modelo requerido
    - IMEI numérico de al menos 10 dígitos
    """
    service = InventoryService(gateway)
    device = await service.add_device(device_data)
    return DeviceResponse(
        success=True,
        message="Equipo anexado a stock",
        device=device
    )
