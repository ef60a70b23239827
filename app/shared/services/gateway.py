# app/shared/services/gateway.py
"""
Interfaz del gateway remoto de datos.

El gateway es el dueño de equipos y ventas; la API sólo lee y escribe a
través de él. Toda falla de lectura o escritura se reporta como GatewayError.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterator, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.core.exceptions import GatewayError
from app.shared.schemas.records import DeviceRecord, DeviceStatus, SaleRecord


class DataGateway(ABC):

    @abstractmethod
    def list_devices(self) -> List[DeviceRecord]:
        """Equipos, los más recientes primero"""

    @abstractmethod
    def get_device(self, device_id: str) -> Optional[DeviceRecord]:
        """Un equipo por id, o None si no existe"""

    @abstractmethod
    def list_sales(self) -> List[SaleRecord]:
        """Ventas con modelo/IMEI del equipo, las más recientes primero"""

    @abstractmethod
    def create_device(self, model: str, imei: str) -> DeviceRecord:
        """Alta de equipo, siempre en estado disponible"""

    @abstractmethod
    def create_sale(
        self,
        device_id: str,
        client_name: str,
        client_phone: str,
        channel: str,
        down_payment: Decimal
    ) -> SaleRecord:
        ...

    @abstractmethod
    def set_device_status(self, device_id: str, status: DeviceStatus) -> None:
        ...

    def ping(self) -> bool:
        try:
            self.list_devices()
            return True
        except GatewayError:
            return False


def _sql_gateway(db: Session = Depends(get_db)) -> DataGateway:
    from .sql_gateway import SqlDataGateway

    return SqlDataGateway(db)


def _rest_gateway() -> Iterator[DataGateway]:
    from .rest_gateway import RestDataGateway

    gateway = RestDataGateway.from_settings()
    try:
        yield gateway
    finally:
        gateway.close()


def get_gateway_dependency():
    """Dependency de FastAPI según el backend configurado"""
    if settings.data_backend == "rest":
        return _rest_gateway
    return _sql_gateway


get_gateway = get_gateway_dependency()
