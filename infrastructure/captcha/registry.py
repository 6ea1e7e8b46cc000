"""Registry of captcha providers keyed by driver name.

Providers are added while the process is being configured and only read
afterwards. Registering a second provider under a key that is already taken
is a wiring bug and raises DuplicateRegistrationError; the first provider
stays registered.
"""

from __future__ import annotations

from typing import Optional

from errors import DuplicateRegistrationError
from infrastructure.captcha.protocol import CaptchaProvider

CAPTCHA_DRIVER_KEY_DIGITS = "digits"
CAPTCHA_DRIVER_KEY_TENCENT = "tencent"


class CaptchaRegistry:
    def __init__(self) -> None:
        self._providers: dict[str, CaptchaProvider] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._providers

    def keys(self) -> list[str]:
        return list(self._providers)

    def add(self, key: str, provider: CaptchaProvider) -> None:
        if key in self._providers:
            raise DuplicateRegistrationError("captcha driver", key)
        self._providers[key] = provider

    def get(self, key: str) -> Optional[CaptchaProvider]:
        return self._providers.get(key)

    async def verify(
        self, key: str, token: str, remote_ip: Optional[str] = None
    ) -> bool:
        """Dispatch ``token`` to the provider registered under ``key``."""
        provider = self._providers.get(key)
        if provider is None:
            return False
        return await provider.verify(token, remote_ip=remote_ip)
