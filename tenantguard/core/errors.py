# tenantguard/core/errors.py
from typing import Any, Dict, Optional
from enum import Enum

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from tenantguard.core.logger import get_logger

log = get_logger("errors")


class ErrorCode(str, Enum):
    UNAUTHORIZED = "unauthorized"                # 401
    INVALID_CREDENTIALS = "invalid_credentials"  # 401
    FORBIDDEN = "forbidden"                      # 403
    TENANT_REQUIRED = "tenant_required"          # 400
    TENANT_NOT_FOUND = "tenant_not_found"        # 400
    TENANT_EXISTS = "tenant_exists"              # 409
    USER_EXISTS = "user_exists"                  # 409
    INTERNAL_ERROR = "internal_error"            # 500
    STORE_UNAVAILABLE = "store_unavailable"      # 503
    BAD_REQUEST = "bad_request"                  # 400


def http_error(
    *,
    status_code: int,
    code: ErrorCode,
    message: str,
    meta: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    """
    Standardized HTTPException factory.
    Clients should key on `detail.code` for i18n and behavior.
    """
    detail = {
        "code": code.value,
        "message": message,
    }
    if meta:
        detail["meta"] = meta
    return HTTPException(status_code=status_code, detail=detail)


class AppError(Exception):
    """Expected domain failure with a stable code and client-safe message."""

    status_code: int = 400
    code: ErrorCode = ErrorCode.BAD_REQUEST
    message: str = "Bad request"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"success": False, "code": self.code.value, "message": self.message}


class TenantIdentifierMissing(AppError):
    status_code = 400
    code = ErrorCode.TENANT_REQUIRED
    message = "Tenant ID is required"


class TenantNotFound(AppError):
    status_code = 400
    code = ErrorCode.TENANT_NOT_FOUND
    message = "Invalid tenant ID"


class TenantAlreadyExists(AppError):
    status_code = 409
    code = ErrorCode.TENANT_EXISTS
    message = "Tenant with this email already exists"


class UserAlreadyExists(AppError):
    status_code = 409
    code = ErrorCode.USER_EXISTS
    message = "User with this email already exists"


class InvalidCredentials(AppError):
    status_code = 401
    code = ErrorCode.INVALID_CREDENTIALS
    message = "Invalid credentials"


class StoreUnavailable(AppError):
    """Transport or transaction failure in the credential store. Never carries driver details."""

    status_code = 503
    code = ErrorCode.STORE_UNAVAILABLE
    message = "Service temporarily unavailable"


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, StoreUnavailable):
        log.error(
            "Store unavailable",
            extra={"meta": {"path": request.url.path, "cause": type(exc.__cause__).__name__}},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled error", exc_info=exc, extra={"meta": {"path": request.url.path}})
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "code": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal server error",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain failures to their stable responses and everything else to a generic 500."""
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
