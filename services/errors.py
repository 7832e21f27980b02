"""
API error types and the centralized error-to-HTTP mapping.

Routers raise ``ApiError`` subclasses; ``register_exception_handlers`` turns
them (and framework errors) into the uniform envelope::

    {"success": false, "error": {"code": ..., "message": ...},
     "timestamp": ..., "path": ..., "method": ...}
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.config import get_settings
from services.logging_setup import log_api_error

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidIdError(ApiError):
    status_code = 400
    code = "INVALID_ID"

    def __init__(self, message: str = "ID inválido fornecido", **kwargs):
        super().__init__(message, **kwargs)


class UnauthorizedError(ApiError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Acesso não autorizado", **kwargs):
        super().__init__(message, **kwargs)


class InvalidTokenError(UnauthorizedError):
    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Token de acesso inválido", **kwargs):
        super().__init__(message, **kwargs)


class TokenExpiredError(UnauthorizedError):
    code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "Token de acesso expirado", **kwargs):
        super().__init__(message, **kwargs)


class ForbiddenError(ApiError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Acesso negado", **kwargs):
        super().__init__(message, **kwargs)


class NotFoundError(ApiError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Recurso", message: Optional[str] = None, **kwargs):
        super().__init__(message or f"{resource} não encontrado", **kwargs)


class AgentNotFoundError(NotFoundError):
    def __init__(self, agent_name: str):
        super().__init__(message=f"Agente '{agent_name}' não encontrado")
        self.agent_name = agent_name


class ConflictError(ApiError):
    status_code = 409
    code = "CONFLICT"


class DuplicateEntryError(ConflictError):
    code = "DUPLICATE_ENTRY"

    def __init__(self, message: str = "Registro duplicado encontrado", **kwargs):
        super().__init__(message, **kwargs)


class PayloadTooLargeError(ApiError):
    status_code = 413
    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, message: str = "Corpo da requisição excede o limite permitido", **kwargs):
        super().__init__(message, **kwargs)


class RateLimitError(ApiError):
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = "Muitas requisições. Tente novamente em alguns minutos.", **kwargs):
        super().__init__(message, **kwargs)


class ExternalServiceError(ApiError):
    status_code = 502
    code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, message: Optional[str] = None):
        super().__init__(
            message or f"Erro no serviço externo: {service}",
            details={"service": service},
        )
        self.service = service


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_payload(
    request: Request,
    code: str,
    message: str,
    exc: Optional[BaseException] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Build the uniform error envelope for a request."""
    error: Dict[str, Any] = {"code": code, "message": message}
    if get_settings().is_development:
        if exc is not None:
            error["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        if details is not None:
            error["details"] = details
    return {
        "success": False,
        "error": error,
        "timestamp": utc_timestamp(),
        "path": request.url.path,
        "method": request.method,
    }


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    exc: Optional[BaseException] = None,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_payload(request, code, message, exc=exc, details=details),
        headers=headers,
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    log_api_error(exc, request, "Error Handler")
    return error_response(
        request, exc.status_code, exc.code, exc.message, exc=exc, details=exc.details
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log_api_error(exc, request, "Request Validation")
    return error_response(
        request,
        400,
        "VALIDATION_ERROR",
        "Dados de entrada inválidos",
        exc=exc,
        details=jsonable_encoder(exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(
            request,
            404,
            "NOT_FOUND",
            f"Rota {request.method} {request.url.path} não encontrada",
        )
    log_api_error(exc, request, "HTTP Exception")
    code = "METHOD_NOT_ALLOWED" if exc.status_code == 405 else "HTTP_ERROR"
    return error_response(
        request,
        exc.status_code,
        code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_api_error(exc, request, "Unhandled Exception")
    return error_response(
        request,
        500,
        "INTERNAL_SERVER_ERROR",
        str(exc) or "Erro interno do servidor",
        exc=exc,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the centralized error mapping on an application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
