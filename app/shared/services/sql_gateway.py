# app/shared/services/sql_gateway.py
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from decimal import Decimal
import logging

from app.core.exceptions import GatewayError
from app.shared.database.models import Device, Sale
from app.shared.schemas.records import DeviceRecord, DeviceStatus, SaleRecord
from .gateway import DataGateway

logger = logging.getLogger(__name__)


class SqlDataGateway(DataGateway):
    """
    Gateway sobre SQLAlchemy (tablas equipos/ventas).

    Cada escritura hace su propio commit: el alta de venta y el cambio de
    estado del equipo NO comparten transacción, igual que en el servicio
    remoto.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_devices(self) -> List[DeviceRecord]:
        try:
            devices = self.db.query(Device).order_by(Device.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise GatewayError(cause=e) from e
        return [DeviceRecord.model_validate(device) for device in devices]

    def get_device(self, device_id: str) -> Optional[DeviceRecord]:
        try:
            device = self.db.query(Device).filter(Device.id == device_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise GatewayError(cause=e) from e
        return DeviceRecord.model_validate(device) if device else None

    def list_sales(self) -> List[SaleRecord]:
        try:
            sales = self.db.query(Sale).options(
                joinedload(Sale.device)
            ).order_by(Sale.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise GatewayError(cause=e) from e
        return [self._to_sale_record(sale) for sale in sales]

    def create_device(self, model: str, imei: str) -> DeviceRecord:
        device = Device(model=model, imei=imei, status=DeviceStatus.AVAILABLE.value)
        self._commit_new(device)
        logger.info(f"Equipo {device.id} creado ({model} - {imei})")
        return DeviceRecord.model_validate(device)

    def create_sale(
        self,
        device_id: str,
        client_name: str,
        client_phone: str,
        channel: str,
        down_payment: Decimal
    ) -> SaleRecord:
        sale = Sale(
            device_id=device_id,
            client_name=client_name,
            client_phone=client_phone,
            channel=channel,
            down_payment=down_payment
        )
        self._commit_new(sale)
        logger.info(f"Venta {sale.id} creada para equipo {device_id}")
        return self._to_sale_record(sale)

    def set_device_status(self, device_id: str, status: DeviceStatus) -> None:
        try:
            updated = self.db.query(Device).filter(
                Device.id == device_id
            ).update({Device.status: status.value}, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise GatewayError(cause=e) from e

        if not updated:
            raise GatewayError(f"Equipo {device_id} no encontrado")
        logger.info(f"Equipo {device_id} -> {status.value}")

    # MÉTODOS PRIVADOS HELPERS

    def _commit_new(self, instance) -> None:
        try:
            self.db.add(instance)
            self.db.commit()
            self.db.refresh(instance)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise GatewayError(cause=e) from e

    @staticmethod
    def _to_sale_record(sale: Sale) -> SaleRecord:
        record = SaleRecord.model_validate(sale)
        if sale.device is not None:
            record.model = sale.device.model
            record.imei = sale.device.imei
        return record
