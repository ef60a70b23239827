# app/modules/reports/__init__.py
"""
Módulo de Reportes - Bitácora de ventas

- Exportación CSV de ventas (Cliente, Modelo, IMEI, Canal, Enganche, Fecha)
- Resumen de ventas y stock
"""

from .router import router
from .service import ReportsService, build_sales_csv

__all__ = [
    "router",
    "ReportsService",
    "build_sales_csv"
]
