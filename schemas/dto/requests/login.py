"""
Request DTOs for the login captcha endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VerifyCaptchaRequest(BaseModel):
    """Request body for POST /login/verify.

    ``token`` is opaque: ``"<digits>,<challenge_id>"`` for digit captchas,
    the widget-issued ticket for Tencent captchas. It reaches the active
    driver unmodified; an empty or unusable token simply fails verification.
    """

    model_config = ConfigDict(populate_by_name=True)

    token: str = ""
