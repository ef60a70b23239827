# app/core/exceptions.py
"""
Errores de dominio y su conversión a respuestas HTTP.

- ValidationError: datos inválidos detectados antes de tocar la base de datos
- GatewayError: cualquier falla del servicio remoto de datos
- PartialSaleError: la venta se creó pero el equipo no se marcó como vendido
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AppError):
    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message, {"field": field})
        self.field = field


class DeviceUnavailableError(ValidationError):
    status_code = 409
    error_code = "DEVICE_UNAVAILABLE"


class GatewayError(AppError):
    status_code = 502
    error_code = "GATEWAY_ERROR"

    def __init__(self, message: str = "Error al comunicarse con la base de datos", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class PartialSaleError(AppError):
    status_code = 502
    error_code = "PARTIAL_SALE"

    def __init__(self, sale, device_id: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"La venta {sale.id} quedó registrada pero el equipo {device_id} "
            f"no se pudo marcar como vendido. Se requiere conciliación manual.",
            {"sale_id": sale.id, "device_id": device_id},
        )
        self.sale = sale
        self.device_id = device_id
        self.cause = cause


class NothingToExportError(AppError):
    status_code = 404
    error_code = "NOTHING_TO_EXPORT"

    def __init__(self, message: str = "No hay ventas registradas para exportar."):
        super().__init__(message)


def _error_response(exc: AppError) -> JSONResponse:
    body = ErrorResponse(
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details or None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


def setup_exception_handlers(app: FastAPI):
    """Registrar handlers para que ningún error tumbe la aplicación"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, GatewayError):
            logger.error(f"Error de gateway en {request.url.path}: {exc.cause or exc.message}")
        else:
            # Las ventas parciales ya quedan en el log de error del servicio
            logger.info(f"{exc.error_code} en {request.url.path}: {exc.message}")
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Error inesperado en {request.url.path}")
        return _error_response(AppError("Error interno del servidor"))
