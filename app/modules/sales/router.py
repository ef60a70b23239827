# app/modules/sales/router.py
from fastapi import APIRouter, Depends, status as http_status

from app.config.settings import settings
from app.shared.schemas.records import DeviceStatus
from app.shared.services.gateway import DataGateway, get_gateway
from .service import SalesService
from .schemas import (
    ChannelsResponse, DeviceTransitionResponse, SaleAnomaliesResponse,
    SaleCreateRequest, SaleResponse, SalesListResponse
)

router = APIRouter()

@router.get("", response_model=SalesListResponse)
async def list_sales(gateway: DataGateway = Depends(get_gateway)):
    """Ventas registradas con modelo e IMEI del equipo, más recientes primero"""
    service = SalesService(gateway)
    sales = await service.list_sales()
    return SalesListResponse(
        success=True,
        message="" if sales else "No se han registrado ventas en la base de datos.",
        sales=sales,
        count=len(sales)
    )

@router.get("/channels", response_model=ChannelsResponse)
async def get_sale_channels():
    """Canales de venta que ofrece el formulario"""
    return ChannelsResponse(channels=settings.sale_channels, default=settings.sale_channels[0])

@router.post("", response_model=SaleResponse, status_code=http_status.HTTP_201_CREATED)
async def register_sale(
    sale_data: SaleCreateRequest,
    gateway: DataGateway = Depends(get_gateway)
):
    """
    Registrar venta

    **Proceso:**
    - Validación del formulario (equipo, cliente, teléfono a 10 dígitos, canal, enganche)
    - Alta de la venta
    - Equipo marcado como vendido

    Si la venta se crea pero el equipo no se puede marcar, responde 502 con
    `error_code=PARTIAL_SALE` y el `sale_id` para conciliar.
    """
    service = SalesService(gateway)
    result = await service.register_sale(sale_data)
    return SaleResponse(
        success=True,
        message=result.message,
        outcome=result.outcome,
        sale=result.sale,
        refresh_required=result.refresh_required
    )

@router.post("/devices/{device_id}/complete", response_model=DeviceTransitionResponse)
async def complete_device_transition(
    device_id: str,
    gateway: DataGateway = Depends(get_gateway)
):
    """Reintentar marcar como vendido un equipo cuya venta ya existe"""
    service = SalesService(gateway)
    await service.complete_device_transition(device_id)
    return DeviceTransitionResponse(
        success=True,
        message="Equipo marcado como vendido",
        device_id=device_id,
        status=DeviceStatus.SOLD.value
    )

@router.get("/anomalies", response_model=SaleAnomaliesResponse)
async def get_sale_anomalies(gateway: DataGateway = Depends(get_gateway)):
    """Inconsistencias entre ventas y equipos que requieren conciliación"""
    service = SalesService(gateway)
    anomalies = await service.find_anomalies()
    return SaleAnomaliesResponse(
        success=True,
        message="Sin inconsistencias" if not anomalies.total else "Se requiere conciliación manual",
        anomalies=anomalies,
        total=anomalies.total
    )
