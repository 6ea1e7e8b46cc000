"""
Random identifier and digit generators — pure, side-effect-free functions.

All generators draw from the ``secrets`` module: challenge ids and expected
digits must not be predictable from earlier ones.
"""

from __future__ import annotations

import secrets
import string

_ID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def generate_challenge_id(length: int = 10) -> str:
    """Generate an alphanumeric challenge identifier.

    Args:
        length: Number of characters (default 10).

    Returns:
        Random alphanumeric string of the requested length.
    """
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_digits(count: int) -> list[int]:
    """Generate ``count`` random decimal digits (0-9)."""
    return [secrets.randbelow(10) for _ in range(count)]


def digits_to_str(digits: list[int]) -> str:
    """Join a digit list into the string a user is expected to type."""
    return "".join(str(d) for d in digits)


def generate_nonce(length: int = 10) -> str:
    """Generate the random ``Randstr`` nonce sent with remote verifications."""
    return generate_challenge_id(length)
