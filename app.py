"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from routes.login_routes import router as login_router
from services.login_context import LoginContext, create_login_context, setup_login
from shared.logging import setup_logging


def create_app(
    settings: Optional[AppSettings] = None,
    context: Optional[LoginContext] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    The login context is configured here, before the app accepts traffic,
    so configuration errors (unknown theme, duplicate registration) stop
    startup instead of failing the first request.
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging.log_level, settings.logging.log_format, settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    if context is None:
        context = create_login_context(settings.captcha)
    setup_login(
        context,
        settings.captcha,
        settings.tencent,
        page_context={
            "asset_prefix": settings.asset_url_prefix,
            "login_url": settings.login_url,
        },
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.login = context
        yield
        await context.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(login_router)

    return app
