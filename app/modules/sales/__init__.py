# app/modules/sales/__init__.py
"""
Módulo de Ventas - Registro de ventas de equipos

Este módulo maneja:
- Registro de venta en dos pasos (alta de venta, equipo -> vendido)
- Resultado con tres desenlaces: éxito, falla limpia, falla parcial
- Reintento manual del cambio de estado del equipo
- Reporte de inconsistencias entre ventas y equipos

Arquitectura:
- router.py: Endpoints de ventas
- service.py: Flujo de registro de venta
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import SalesService

__all__ = [
    "router",
    "SalesService"
]
