"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system.
"""

from __future__ import annotations

from fastapi import Request

from errors import ServiceUnavailableError
from services.login_context import LoginContext
from services.login_page import LoginPage


def get_login_context(request: Request) -> LoginContext:
    """Return the process-wide LoginContext stored on app.state."""
    return request.app.state.login


def get_login_page(request: Request) -> LoginPage:
    """Return the configured LoginPage; fails if setup_login never ran."""
    page = request.app.state.login.page
    if page is None:
        raise ServiceUnavailableError("login page is not configured")
    return page
