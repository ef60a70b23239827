# app/modules/reports/service.py
import csv
import io
import logging
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from app.config.settings import settings
from app.core.exceptions import NothingToExportError
from app.shared.schemas.records import DeviceStatus, SaleRecord
from app.shared.services.gateway import DataGateway
from .schemas import SalesSummaryResponse

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Cliente", "Modelo", "IMEI", "Canal", "Enganche", "Fecha"]


def build_sales_csv(sales: Iterable[SaleRecord], date_format: Optional[str] = None) -> str:
    """
    Bitácora de ventas en CSV.

    Campos de texto entre comillas dobles, enganche sin comillas, fecha con
    el formato configurado (vacía si no se conoce). Sin ventas sólo queda
    el encabezado.
    """
    date_format = date_format or settings.report_date_format
    buffer = io.StringIO()

    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for sale in sales:
        writer.writerow([
            sale.client_name,
            sale.model or "",
            sale.imei or "",
            sale.channel,
            sale.down_payment,
            sale.created_at.strftime(date_format) if sale.created_at else ""
        ])
    return buffer.getvalue()


def report_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{settings.report_filename_prefix}_{today.isoformat()}.csv"


class ReportsService:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    async def export_sales_csv(self) -> str:
        """Leer todas las ventas y generar el CSV; sin ventas no hay descarga"""
        sales = self.gateway.list_sales()
        if not sales:
            raise NothingToExportError()

        logger.info(f"Exportando {len(sales)} ventas a CSV")
        return build_sales_csv(sales)

    async def get_summary(self) -> SalesSummaryResponse:
        """Totales de ventas, enganches y stock"""
        sales = self.gateway.list_sales()
        devices = self.gateway.list_devices()

        total_down_payment = sum((sale.down_payment for sale in sales), Decimal("0"))
        by_channel = Counter(sale.channel for sale in sales)

        return SalesSummaryResponse(
            success=True,
            message="Resumen de ventas",
            total_sales=len(sales),
            total_down_payment=total_down_payment,
            devices_in_stock=sum(1 for device in devices if device.status == DeviceStatus.AVAILABLE),
            devices_sold=sum(1 for device in devices if device.status == DeviceStatus.SOLD),
            sales_by_channel=dict(by_channel)
        )
