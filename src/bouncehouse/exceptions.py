"""Application-level exceptions and FastAPI exception handlers."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class HostHeaderRequiredError(AppException):
    def __init__(self, message: str = "Host header is required"):
        super().__init__(message, status_code=400, code="HOST_REQUIRED")


class TenantNotFoundError(AppException):
    def __init__(self, host: str | None = None):
        self.host = host
        super().__init__("Company not found", status_code=404, code="TENANT_NOT_FOUND")


class CompanyContextRequiredError(AppException):
    def __init__(self, message: str = "Company context is required"):
        super().__init__(message, status_code=400, code="COMPANY_CONTEXT_REQUIRED")


class TenantLookupError(AppException):
    """The company store failed while resolving a host."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, status_code=500, code="TENANT_LOOKUP_FAILED")


class LocationQueryError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=400, code="INVALID_LOCATION_QUERY")


class LocationNotFoundError(AppException):
    def __init__(self, message: str = "Could not determine coordinates for the provided location"):
        super().__init__(message, status_code=404, code="LOCATION_NOT_FOUND")


def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the application exception handler to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message),
        )
