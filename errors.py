"""
Application error hierarchy and FastAPI exception handlers.

Two families live here:

* AppError and its subclasses are request-time errors. The global exception
  handler converts them to consistent JSON responses.
* ConfigurationError and its subclasses are startup errors (duplicate theme
  or driver registration, unknown theme). They are raised while the process
  is being wired up and are never caught by the core: startup must halt.

Captcha verification never raises; every failure is a plain ``False``.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error. All typed request errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class AssetNotFoundError(NotFoundError):
    error_code = "asset_not_found"


class ServiceUnavailableError(AppError):
    status_code = 503
    error_code = "service_unavailable"


class ConfigurationError(Exception):
    """Fatal wiring error detected while the process starts."""


class DuplicateRegistrationError(ConfigurationError):
    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"duplicate {kind} registration: {key!r}")
        self.kind = kind
        self.key = key


class UnknownThemeError(ConfigurationError):
    def __init__(self, key: str) -> None:
        super().__init__(f"unknown login theme: {key!r}")
        self.key = key


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
