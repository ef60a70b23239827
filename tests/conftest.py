# tests/conftest.py
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import init_db
from app.core.exceptions import GatewayError
from app.main import app
from app.shared.schemas.records import DeviceRecord, DeviceStatus, SaleRecord
from app.shared.services.gateway import DataGateway, get_gateway
from app.shared.services.sql_gateway import SqlDataGateway


class FakeGateway(DataGateway):
    """Gateway en memoria que registra cada llamada y puede fallar a pedido"""

    def __init__(self):
        self.devices: List[DeviceRecord] = []
        self.sales: List[SaleRecord] = []
        self.calls: List[str] = []
        self.fail_on = set()
        self._clock = datetime(2026, 10, 1, 10, 0, 0)
        self._next_id = 1

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def _new_id(self, prefix: str) -> str:
        value = f"{prefix}{self._next_id}"
        self._next_id += 1
        return value

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise GatewayError(cause=RuntimeError(f"{name} failed"))

    def add_device(self, model="iPhone 15", imei="123456789012", status=DeviceStatus.AVAILABLE) -> DeviceRecord:
        device = DeviceRecord(
            id=self._new_id("dev-"), model=model, imei=imei, status=status, created_at=self._tick()
        )
        self.devices.append(device)
        return device

    def list_devices(self) -> List[DeviceRecord]:
        self._call("list_devices")
        return sorted(self.devices, key=lambda d: d.created_at, reverse=True)

    def get_device(self, device_id: str) -> Optional[DeviceRecord]:
        self._call("get_device")
        return next((d for d in self.devices if d.id == device_id), None)

    def list_sales(self) -> List[SaleRecord]:
        self._call("list_sales")
        devices = {d.id: d for d in self.devices}
        result = []
        for sale in sorted(self.sales, key=lambda s: s.created_at, reverse=True):
            joined = sale.model_copy()
            device = devices.get(sale.device_id)
            joined.model = device.model if device else None
            joined.imei = device.imei if device else None
            result.append(joined)
        return result

    def create_device(self, model: str, imei: str) -> DeviceRecord:
        self._call("create_device")
        return self.add_device(model, imei)

    def create_sale(self, device_id, client_name, client_phone, channel, down_payment) -> SaleRecord:
        self._call("create_sale")
        sale = SaleRecord(
            id=self._new_id("sale-"),
            device_id=device_id,
            client_name=client_name,
            client_phone=client_phone,
            channel=channel,
            down_payment=Decimal(down_payment),
            created_at=self._tick()
        )
        self.sales.append(sale)
        return sale.model_copy()

    def set_device_status(self, device_id: str, status: DeviceStatus) -> None:
        self._call("set_device_status")
        for index, device in enumerate(self.devices):
            if device.id == device_id:
                self.devices[index] = device.model_copy(update={"status": status})
                return
        raise GatewayError(f"Equipo {device_id} no encontrado")

    def status_of(self, device_id: str) -> DeviceStatus:
        return next(d.status for d in self.devices if d.id == device_id)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def sql_gateway(db_session):
    return SqlDataGateway(db_session)
