# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.inventory.router import router as inventory_router
from app.modules.sales.router import router as sales_router
from app.modules.reports.router import router as reports_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    inventory_router,
    prefix="/inventory",
    tags=["Inventory"]
)

api_router.include_router(
    sales_router,
    prefix="/sales",
    tags=["Sales"]
)

api_router.include_router(
    reports_router,
    prefix="/reports",
    tags=["Reports"]
)
