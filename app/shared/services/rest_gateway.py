# app/shared/services/rest_gateway.py
import httpx
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional
from dateutil import parser as date_parser

from app.config.settings import settings
from app.core.exceptions import GatewayError
from app.shared.schemas.records import DeviceRecord, DeviceStatus, SaleRecord
from .gateway import DataGateway

logger = logging.getLogger(__name__)


class RestDataGateway(DataGateway):
    """Cliente para el API REST de Supabase (PostgREST) con tablas equipos/ventas"""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=f"{self.base_url}/rest/v1",
            headers=self._get_headers(api_key),
            timeout=timeout,
            transport=transport
        )

    @classmethod
    def from_settings(cls) -> "RestDataGateway":
        if not settings.supabase_url or not settings.supabase_key:
            raise GatewayError("Falta configurar SUPABASE_URL / SUPABASE_KEY")
        return cls(settings.supabase_url, settings.supabase_key, settings.gateway_timeout)

    @staticmethod
    def _get_headers(api_key: str) -> Dict[str, str]:
        """Headers para autenticación"""
        return {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        }

    def close(self) -> None:
        self.client.close()

    # LECTURAS

    def list_devices(self) -> List[DeviceRecord]:
        rows = self._request(
            "GET", "/equipos",
            params={"select": "*", "order": "created_at.desc"}
        )
        return [self._to_device_record(row) for row in rows]

    def get_device(self, device_id: str) -> Optional[DeviceRecord]:
        rows = self._request(
            "GET", "/equipos",
            params={"select": "*", "id": f"eq.{device_id}", "limit": "1"}
        )
        return self._to_device_record(rows[0]) if rows else None

    def list_sales(self) -> List[SaleRecord]:
        rows = self._request(
            "GET", "/ventas",
            params={"select": "*,equipos(modelo,imei)", "order": "created_at.desc"}
        )
        return [self._to_sale_record(row) for row in rows]

    # ESCRITURAS

    def create_device(self, model: str, imei: str) -> DeviceRecord:
        rows = self._request(
            "POST", "/equipos",
            json=[{"modelo": model, "imei": imei, "estado": DeviceStatus.AVAILABLE.value}],
            headers={"Prefer": "return=representation"}
        )
        if not rows:
            raise GatewayError("El servicio no devolvió el equipo creado")
        return self._to_device_record(rows[0])

    def create_sale(
        self,
        device_id: str,
        client_name: str,
        client_phone: str,
        channel: str,
        down_payment: Decimal
    ) -> SaleRecord:
        rows = self._request(
            "POST", "/ventas",
            json=[{
                "equipo_id": device_id,
                "cliente": client_name,
                "telefono": client_phone,
                "canal": channel,
                "enganche": float(down_payment)
            }],
            headers={"Prefer": "return=representation"}
        )
        if not rows:
            raise GatewayError("El servicio no devolvió la venta creada")
        return self._to_sale_record(rows[0])

    def set_device_status(self, device_id: str, status: DeviceStatus) -> None:
        rows = self._request(
            "PATCH", "/equipos",
            params={"id": f"eq.{device_id}"},
            json={"estado": status.value},
            headers={"Prefer": "return=representation"}
        )
        if not rows:
            raise GatewayError(f"Equipo {device_id} no encontrado")

    # MÉTODOS PRIVADOS HELPERS

    def _request(self, method: str, path: str, **kwargs) -> List[Dict[str, Any]]:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout en {method} {path}")
            raise GatewayError("Tiempo de espera agotado con la base de datos", cause=e) from e
        except httpx.HTTPError as e:
            logger.error(f"Error de conexión en {method} {path}: {e}")
            raise GatewayError(cause=e) from e

        if response.status_code >= 400:
            logger.error(f"Error del servicio: {response.status_code} - {response.text}")
            raise GatewayError(cause=httpx.HTTPStatusError(
                f"{response.status_code} {response.text}",
                request=response.request,
                response=response
            ))

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    @staticmethod
    def _parse_timestamp(value: Optional[str]):
        return date_parser.isoparse(value) if value else None

    def _to_device_record(self, row: Dict[str, Any]) -> DeviceRecord:
        return DeviceRecord(
            id=str(row["id"]),
            model=row.get("modelo") or "",
            imei=row.get("imei") or "",
            status=row.get("estado") or DeviceStatus.AVAILABLE,
            created_at=self._parse_timestamp(row.get("created_at"))
        )

    def _to_sale_record(self, row: Dict[str, Any]) -> SaleRecord:
        # Flatten del join equipos(modelo, imei)
        device = row.get("equipos") or {}
        return SaleRecord(
            id=str(row["id"]),
            device_id=str(row.get("equipo_id") or ""),
            client_name=row.get("cliente") or "",
            client_phone=row.get("telefono") or "",
            channel=row.get("canal") or "",
            down_payment=Decimal(str(row.get("enganche") or 0)),
            created_at=self._parse_timestamp(row.get("created_at")),
            model=device.get("modelo"),
            imei=device.get("imei")
        )
