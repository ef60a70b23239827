# app/modules/inventory/__init__.py
"""
Módulo de Inventario - Equipos en stock

- Alta de equipos (siempre en estado disponible)
- Búsqueda por modelo o IMEI
- Equipos disponibles para venta

Arquitectura:
- router.py: Endpoints de inventario
- service.py: Validación y filtrado
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import InventoryService

__all__ = [
    "router",
    "InventoryService"
]
