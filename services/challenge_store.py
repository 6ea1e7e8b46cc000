"""In-memory store of pending login captcha challenges.

Each challenge is single use: a correct answer consumes it, a wrong answer
bumps its attempt counter and leaves it in place until it expires. Expiry is
enforced by ``sweep()``, which callers run opportunistically (``maybe_sweep``
on issuance, and once per configuration pass) instead of on every lookup.
Lookups themselves do not look at age, so an expired-but-unswept challenge
can still be answered for at most one sweep interval.

Challenges live only in process memory and are lost on restart.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from shared.generators import generate_challenge_id
from shared.logging import get_logger

log = get_logger(__name__)

DEFAULT_DISABLE_DURATION = 120.0


@dataclass
class Challenge:
    id: str
    expected_value: str
    issued_at: float
    attempt_count: int = 0


class ChallengeStore:
    def __init__(
        self,
        disable_duration: float = DEFAULT_DISABLE_DURATION,
        sweep_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = generate_challenge_id,
    ) -> None:
        self.disable_duration = disable_duration
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._challenges: dict[str, Challenge] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._challenges)

    def __contains__(self, challenge_id: object) -> bool:
        with self._lock:
            return challenge_id in self._challenges

    def issue(self, expected_value: str) -> str:
        """Store a new challenge and return its id."""
        self.maybe_sweep()
        with self._lock:
            challenge_id = self._id_factory()
            while challenge_id in self._challenges:
                challenge_id = self._id_factory()
            self._challenges[challenge_id] = Challenge(
                id=challenge_id,
                expected_value=expected_value,
                issued_at=self._clock(),
            )
        return challenge_id

    def check(self, challenge_id: str, submitted_value: str) -> bool:
        """Return True and consume the challenge if ``submitted_value`` matches.

        Unknown ids (never issued, already consumed or swept) return False.
        A mismatch increments ``attempt_count`` and keeps the challenge.
        """
        with self._lock:
            challenge = self._challenges.get(challenge_id)
            if challenge is None:
                return False
            if challenge.expected_value == submitted_value:
                del self._challenges[challenge_id]
                return True
            challenge.attempt_count += 1
            return False

    def get(self, challenge_id: str) -> Optional[Challenge]:
        """Return a copy of the stored challenge, or None."""
        with self._lock:
            challenge = self._challenges.get(challenge_id)
            if challenge is None:
                return None
            return Challenge(
                id=challenge.id,
                expected_value=challenge.expected_value,
                issued_at=challenge.issued_at,
                attempt_count=challenge.attempt_count,
            )

    def sweep(self) -> int:
        """Remove every challenge older than ``disable_duration``.

        Returns:
            Number of challenges removed.
        """
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, challenge in self._challenges.items()
                if challenge.issued_at + self.disable_duration < now
            ]
            for key in expired:
                del self._challenges[key]
            self._last_sweep = now
        if expired:
            log.debug("captcha_challenges_swept", removed=len(expired))
        return len(expired)

    def maybe_sweep(self) -> int:
        """Sweep only if ``sweep_interval`` has passed since the last sweep."""
        if self._clock() - self._last_sweep < self.sweep_interval:
            return 0
        return self.sweep()
