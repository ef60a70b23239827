# app/modules/reports/schemas.py
from decimal import Decimal
from typing import Dict
from app.shared.schemas.common import BaseResponse


class SalesSummaryResponse(BaseResponse):
    total_sales: int
    total_down_payment: Decimal
    devices_in_stock: int
    devices_sold: int
    sales_by_channel: Dict[str, int]
