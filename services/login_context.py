"""
Process-wide login state and the one-time configuration step.

LoginContext owns everything that used to be ambient: the challenge store,
the captcha driver registry and the theme registry. Lifecycle:

1. ``create_login_context()`` once at startup (registers built-in themes).
2. Optionally register extra themes on ``context.themes``.
3. ``setup_login(settings, context)`` once; it picks the captcha mode,
   registers the matching driver and returns the LoginPage.
4. Serve traffic. Registries must not be mutated from here on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from config import DEFAULT_THEME, CaptchaSettings, TencentCaptchaSettings
from infrastructure.captcha.digits import DigitsCaptchaProvider
from infrastructure.captcha.registry import (
    CAPTCHA_DRIVER_KEY_DIGITS,
    CAPTCHA_DRIVER_KEY_TENCENT,
    CaptchaRegistry,
)
from infrastructure.captcha.tencent import TencentCaptchaProvider
from infrastructure.http_client import HttpClient
from services.challenge_store import ChallengeStore
from services.login_page import LoginConfig, LoginPage, TencentWaterProofWallData
from shared.logging import get_logger
from themes.registry import ThemeRegistry, create_default_registry

log = get_logger(__name__)


@dataclass
class LoginContext:
    store: ChallengeStore
    captchas: CaptchaRegistry = field(default_factory=CaptchaRegistry)
    themes: ThemeRegistry = field(default_factory=create_default_registry)
    http_client: Optional[HttpClient] = None
    active_driver: Optional[str] = None
    page: Optional[LoginPage] = None

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        """Verify ``token`` with the driver chosen by ``setup_login``."""
        if self.active_driver is None:
            return False
        return await self.captchas.verify(self.active_driver, token, remote_ip=remote_ip)

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()


def create_login_context(
    captcha_settings: Optional[CaptchaSettings] = None,
    themes: Optional[ThemeRegistry] = None,
) -> LoginContext:
    settings = captcha_settings or CaptchaSettings()
    store = ChallengeStore(
        disable_duration=settings.captcha_disable_duration_seconds,
        sweep_interval=settings.captcha_sweep_interval_seconds,
    )
    if themes is None:
        return LoginContext(store=store)
    return LoginContext(store=store, themes=themes)


def setup_login(
    context: LoginContext,
    captcha_settings: CaptchaSettings,
    tencent_settings: Optional[TencentCaptchaSettings] = None,
    page_context: Optional[Mapping[str, Any]] = None,
    http_client: Optional[HttpClient] = None,
) -> LoginPage:
    """Select theme and captcha mode, register the driver, build the page.

    Remote (Tencent) verification takes precedence over digit captchas when
    its id is configured. Raises ConfigurationError subclasses on duplicate
    driver registration or an unknown theme.
    """
    tencent_settings = tencent_settings or TencentCaptchaSettings()
    theme_key = captcha_settings.login_theme or DEFAULT_THEME
    theme = context.themes.require(theme_key)

    tencent = TencentWaterProofWallData(
        id=tencent_settings.tencent_captcha_id,
        app_id=tencent_settings.tencent_captcha_app_id,
        app_secret_key=tencent_settings.tencent_captcha_app_secret,
    )
    digits = captcha_settings.captcha_digits

    if tencent.enabled:
        if http_client is None:
            http_client = HttpClient(timeout=tencent_settings.tencent_captcha_timeout_seconds)
        context.http_client = http_client
        context.captchas.add(
            CAPTCHA_DRIVER_KEY_TENCENT,
            TencentCaptchaProvider(
                app_id=tencent.app_id,
                app_secret=tencent.app_secret_key,
                http_client=http_client,
                verify_url=tencent_settings.tencent_captcha_verify_url,
            ),
        )
        context.active_driver = CAPTCHA_DRIVER_KEY_TENCENT
        digits = 0
    elif digits:
        context.store.sweep()
        context.captchas.add(CAPTCHA_DRIVER_KEY_DIGITS, DigitsCaptchaProvider(context.store))
        context.active_driver = CAPTCHA_DRIVER_KEY_DIGITS

    config = LoginConfig(
        theme=theme_key,
        captcha_digits=digits,
        tencent=tencent,
        image_width=captcha_settings.captcha_image_width,
        image_height=captcha_settings.captcha_image_height,
    )
    page = LoginPage(
        config,
        theme,
        store=context.store if digits else None,
        page_context=page_context,
    )
    context.page = page
    log.info(
        "login_configured",
        theme=theme_key,
        captcha_driver=context.active_driver,
        captcha_digits=digits,
    )
    return page
