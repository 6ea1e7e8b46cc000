"""Local digit captcha implementation of CaptchaProvider.

The token bundles the typed digits with the challenge id,
``"<digits>,<challenge_id>"``, so the public contract stays a single opaque
string for every driver.
"""

from typing import Optional

from services.challenge_store import ChallengeStore
from shared.logging import get_logger

log = get_logger(__name__)

TOKEN_SEPARATOR = ","


def build_token(digits: str, challenge_id: str) -> str:
    """Compose the token a login form submits for a digit challenge."""
    return f"{digits}{TOKEN_SEPARATOR}{challenge_id}"


class DigitsCaptchaProvider:
    def __init__(self, store: ChallengeStore) -> None:
        self._store = store

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        parts = token.split(TOKEN_SEPARATOR)
        if len(parts) < 2:
            log.debug("digits_captcha_malformed_token")
            return False
        digits, challenge_id = parts[0], parts[1]
        return self._store.check(challenge_id, digits)
