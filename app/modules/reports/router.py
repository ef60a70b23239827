# app/modules/reports/router.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.shared.services.gateway import DataGateway, get_gateway
from .service import ReportsService, report_filename
from .schemas import SalesSummaryResponse

router = APIRouter()

@router.get("/sales.csv")
async def export_sales_csv(gateway: DataGateway = Depends(get_gateway)):
    """
    Exportar bitácora de ventas en CSV

    Responde 404 (`NOTHING_TO_EXPORT`) cuando no hay ventas registradas.
    """
    service = ReportsService(gateway)
    content = await service.export_sales_csv()
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'}
    )

@router.get("/summary", response_model=SalesSummaryResponse)
async def get_sales_summary(gateway: DataGateway = Depends(get_gateway)):
    """Resumen: ventas, enganches, equipos en stock y vendidos, ventas por canal"""
    service = ReportsService(gateway)
    return await service.get_summary()
