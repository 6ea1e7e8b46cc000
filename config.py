"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file) once at
startup. Local digit captchas and the remote Tencent captcha are mutually
exclusive: a non-empty TENCENT_CAPTCHA_ID switches remote mode on and wins
over CAPTCHA_DIGITS.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_THEME = "theme1"


class CaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    login_theme: str = DEFAULT_THEME

    # 0 disables local digit captchas
    captcha_digits: int = Field(default=0, ge=0, le=12)

    # Challenges older than this are removed by a sweep
    captcha_disable_duration_seconds: float = Field(default=120.0, gt=0)
    captcha_sweep_interval_seconds: float = Field(default=30.0, ge=0)

    captcha_image_width: int = Field(default=110, gt=0)
    captcha_image_height: int = Field(default=34, gt=0)


class TencentCaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Presence of the id enables remote verification
    tencent_captcha_id: str = ""
    tencent_captcha_app_id: str = ""
    tencent_captcha_app_secret: str = ""

    tencent_captcha_verify_url: str = "https://ssl.captcha.qq.com/ticket/verify"
    tencent_captcha_timeout_seconds: float = Field(default=5.0, gt=0)

    @property
    def enabled(self) -> bool:
        return bool(self.tencent_captcha_id)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "captcha-login"

    # Prefix the rendered page uses for theme asset URLs
    asset_url_prefix: str = "/login/assets"

    # Form action of the login page; the credential POST handler lives in the
    # hosting application
    login_url: str = "/login"

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    captcha: Optional[CaptchaSettings] = None
    tencent: Optional[TencentCaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.captcha is None:
            self.captcha = CaptchaSettings()
        if self.tencent is None:
            self.tencent = TencentCaptchaSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
