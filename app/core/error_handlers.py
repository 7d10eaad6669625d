import logging
from typing import Dict, List, Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.schemas.common.response import ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(message: str, errors: Optional[Dict[str, List[str]]] = None) -> dict:
    return ErrorResponse(message=message, errors=errors).model_dump(mode="json")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Error en la solicitud"
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Ruta no encontrada: {request.method} {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        # Drop the "body"/"query" location prefix
        path = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        errors.setdefault(path, []).append(error.get("msg", "Valor inválido"))

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("Error de validación", errors=errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    message = str(exc) if settings.DEBUG else "Error interno del servidor"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
