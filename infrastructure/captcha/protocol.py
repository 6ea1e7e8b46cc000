"""CaptchaProvider protocol — the login flow depends on this, not on a concrete driver.

A provider answers one question: does this opaque token prove a human solved
the challenge? Every failure mode (wrong answer, malformed token, remote
outage) is reported the same way, as ``False``.
"""

from typing import Optional, Protocol


class CaptchaProvider(Protocol):
    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool: ...
