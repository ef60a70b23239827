# app/modules/sales/service.py
import logging
import re
from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from app.core.exceptions import (
    AppError, DeviceUnavailableError, GatewayError, PartialSaleError, ValidationError
)
from app.shared.schemas.records import DeviceStatus, SaleRecord
from app.shared.services.gateway import DataGateway
from .schemas import SaleAnomalies, SaleCreateRequest, SaleOutcome, SaleRegistrationResult

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"[0-9]{10}")
CENTS = Decimal("0.01")
# Tope de la columna enganche Numeric(10, 2)
MAX_DOWN_PAYMENT = Decimal("99999999.99")


def parse_down_payment(value: Optional[Union[str, float, Decimal]]) -> Decimal:
    """Enganche como decimal sin redondear; vacío o no numérico cuenta como 0"""
    if value is None or not str(value).strip():
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        logger.warning(f"Enganche no numérico {value!r}, se registra como 0")
        return Decimal("0")
    if not amount.is_finite():
        logger.warning(f"Enganche no numérico {value!r}, se registra como 0")
        return Decimal("0")
    return amount


def validate_sale_input(sale_data: SaleCreateRequest) -> Decimal:
    """
    Validar formulario de venta en orden y devolver el enganche ya parseado.

    Se reporta sólo el primer campo inválido.
    """
    if not sale_data.device_id.strip():
        raise ValidationError("device_id", "Selecciona un equipo")
    if not sale_data.client_name.strip():
        raise ValidationError("client_name", "Ingresa el nombre del cliente")
    if not PHONE_PATTERN.fullmatch(sale_data.client_phone or ""):
        raise ValidationError("client_phone", "El teléfono debe tener 10 dígitos")
    if not sale_data.channel.strip():
        raise ValidationError("channel", "Selecciona un canal de venta")

    down_payment = parse_down_payment(sale_data.down_payment)
    if down_payment < 0:
        raise ValidationError("down_payment", "El enganche no puede ser negativo")
    if down_payment > MAX_DOWN_PAYMENT:
        raise ValidationError("down_payment", "El enganche excede el máximo permitido")
    return down_payment.quantize(CENTS)


class SalesService:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    async def list_sales(self) -> List[SaleRecord]:
        return self.gateway.list_sales()

    async def register_sale(self, sale_data: SaleCreateRequest) -> SaleRegistrationResult:
        """
        Registrar venta en dos pasos sin transacción común.

        Proceso:
        1. Validar formulario (sin llamadas al gateway si falla)
        2. Verificar que el equipo siga disponible
        3. Crear la venta
        4. Marcar el equipo como vendido

        El orden venta -> equipo es intencional: si el paso 4 falla queda una
        venta visible apuntando a un equipo disponible (conciliable), nunca un
        equipo vendido sin venta.

        Raises:
            ValidationError: datos inválidos o equipo inexistente
            DeviceUnavailableError: el equipo ya fue vendido
            GatewayError: falla antes de crear la venta; nada cambió
            PartialSaleError: la venta existe pero el equipo sigue disponible
        """
        down_payment = validate_sale_input(sale_data)
        device_id = sale_data.device_id.strip()

        # PASO 2: Re-verificar disponibilidad justo antes de escribir
        device = self.gateway.get_device(device_id)
        if device is None:
            raise ValidationError("device_id", "El equipo no existe")
        if not device.is_available:
            raise DeviceUnavailableError("device_id", "El equipo ya fue vendido")

        # PASO 3: Crear venta
        sale = self.gateway.create_sale(
            device_id=device_id,
            client_name=sale_data.client_name.strip(),
            client_phone=sale_data.client_phone,
            channel=sale_data.channel.strip(),
            down_payment=down_payment
        )
        logger.info(f"Venta {sale.id} creada - equipo {device_id}, cliente {sale.client_name}")

        # PASO 4: Equipo -> vendido
        try:
            self.gateway.set_device_status(device_id, DeviceStatus.SOLD)
        except GatewayError as e:
            logger.error(
                f"Venta {sale.id} creada pero el equipo {device_id} sigue disponible: {e.cause or e.message}"
            )
            raise PartialSaleError(sale, device_id, cause=e) from e

        if sale.model is None:
            sale.model = device.model
            sale.imei = device.imei

        logger.info(f"Venta {sale.id} completada - equipo {device_id} vendido")
        return SaleRegistrationResult(
            outcome=SaleOutcome.SUCCESS,
            message="Venta registrada exitosamente",
            sale=sale,
            device_id=device_id,
            refresh_required=True
        )

    async def try_register_sale(self, sale_data: SaleCreateRequest) -> SaleRegistrationResult:
        """Igual que register_sale pero convierte los errores en un resultado"""
        try:
            return await self.register_sale(sale_data)
        except PartialSaleError as e:
            return SaleRegistrationResult(
                outcome=SaleOutcome.PARTIAL,
                message=e.message,
                sale=e.sale,
                device_id=e.device_id,
                error_code=e.error_code,
                refresh_required=True
            )
        except ValidationError as e:
            return SaleRegistrationResult(
                outcome=SaleOutcome.FAILED,
                message=e.message,
                device_id=sale_data.device_id or None,
                error_code=e.error_code,
                field=e.field
            )
        except AppError as e:
            return SaleRegistrationResult(
                outcome=SaleOutcome.FAILED,
                message="Error al registrar la venta",
                device_id=sale_data.device_id or None,
                error_code=e.error_code
            )

    async def complete_device_transition(self, device_id: str) -> None:
        """
        Reintento manual del paso 4 tras una venta parcial.

        Sólo procede si existe una venta para el equipo; marcar vendido es
        idempotente.
        """
        sales = [sale for sale in self.gateway.list_sales() if sale.device_id == device_id]
        if not sales:
            raise ValidationError("device_id", "No hay una venta registrada para este equipo")

        self.gateway.set_device_status(device_id, DeviceStatus.SOLD)
        logger.info(f"Equipo {device_id} conciliado con venta {sales[0].id}")

    async def find_anomalies(self) -> SaleAnomalies:
        """Detectar ventas huérfanas, equipos vendidos dos veces y vendidos sin venta"""
        devices = {device.id: device for device in self.gateway.list_devices()}
        sales = self.gateway.list_sales()

        sales_by_device = defaultdict(list)
        for sale in sales:
            sales_by_device[sale.device_id].append(sale.id)

        orphan_sales = [
            sale for sale in sales
            if sale.device_id not in devices or devices[sale.device_id].is_available
        ]
        duplicate_sales = {
            device_id: sale_ids
            for device_id, sale_ids in sales_by_device.items()
            if len(sale_ids) > 1
        }
        unsold_without_sale = [
            device for device in devices.values()
            if device.status == DeviceStatus.SOLD and device.id not in sales_by_device
        ]

        anomalies = SaleAnomalies(
            orphan_sales=orphan_sales,
            duplicate_sales=duplicate_sales,
            unsold_without_sale=unsold_without_sale
        )
        if anomalies.total:
            logger.warning(f"{anomalies.total} inconsistencias entre ventas y equipos")
        return anomalies
