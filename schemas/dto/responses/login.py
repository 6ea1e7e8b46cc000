"""
Response DTOs for the login captcha endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VerifyCaptchaResponse(BaseModel):
    """Response body for POST /login/verify.

    ``success`` is False for a wrong answer, a malformed token and a remote
    outage alike; callers cannot and should not tell them apart.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
