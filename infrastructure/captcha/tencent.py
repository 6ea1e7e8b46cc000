"""Tencent "waterproof wall" implementation of CaptchaProvider.

The browser widget hands the user a ticket; this driver asks Tencent whether
the ticket is genuine. The call blocks on the network, so it is bounded by the
HttpClient timeout, and a timeout counts as a failed verification.

Failures are routine negatives here and are only logged at debug level.
"""

from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from infrastructure.http_client import HttpClient
from shared.generators import generate_nonce
from shared.logging import get_logger

log = get_logger(__name__)

TENCENT_VERIFY_URL = "https://ssl.captcha.qq.com/ticket/verify"

# Sent when the caller does not know the user's address. Tencent expects the
# real client IP here, so this placeholder weakens its risk scoring.
PLACEHOLDER_USER_IP = "127.0.0.1"

SUCCESS_RESPONSE = "1"


class TencentCaptchaResponse(BaseModel):
    """Body returned by the ticket verification endpoint."""

    model_config = ConfigDict(extra="ignore")

    response: str = ""
    evil_level: str = ""
    err_msg: str = ""


class TencentCaptchaProvider:
    def __init__(
        self,
        app_id: str,
        app_secret: str,
        http_client: HttpClient,
        verify_url: str = TENCENT_VERIFY_URL,
    ) -> None:
        self._app_id = app_id
        self._app_secret = app_secret
        self._http = http_client
        self._verify_url = verify_url

    def build_params(self, token: str, remote_ip: Optional[str] = None) -> dict[str, str]:
        return {
            "aid": self._app_id,
            "AppSecretKey": self._app_secret,
            "Ticket": token,
            "Randstr": generate_nonce(),
            "UserIP": remote_ip or PLACEHOLDER_USER_IP,
        }

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        try:
            response = await self._http.get(
                self._verify_url, params=self.build_params(token, remote_ip)
            )
        except httpx.HTTPError as e:
            log.debug("tencent_captcha_request_failed", error_type=type(e).__name__)
            return False

        try:
            result = TencentCaptchaResponse.model_validate_json(response.content)
        except PydanticValidationError:
            log.debug(
                "tencent_captcha_response_unparseable",
                status_code=response.status_code,
            )
            return False

        if result.response != SUCCESS_RESPONSE:
            log.debug(
                "tencent_captcha_rejected",
                response=result.response,
                evil_level=result.evil_level,
                err_msg=result.err_msg,
            )
            return False
        return True
