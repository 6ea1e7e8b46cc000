"""Render captcha digits to a PNG and embed it as a data URI.

The image never travels as a separate asset: the login page carries it
inline, so there is nothing extra to fetch (or cache) per challenge.
"""

from __future__ import annotations

import base64
import io
import secrets

from PIL import Image, ImageDraw, ImageFont

DATA_URI_PREFIX = "data:image/png;base64,"

_BACKGROUND = (255, 255, 255)
_NOISE_LINES = 3
_NOISE_DOTS = 40


def _random_colour(low: int = 0, high: int = 140) -> tuple[int, int, int]:
    span = high - low
    return tuple(low + secrets.randbelow(span) for _ in range(3))  # type: ignore[return-value]


def render_digits_png(digits: list[int], width: int = 110, height: int = 34) -> bytes:
    """Draw ``digits`` with light jitter and noise and return PNG bytes."""
    img = Image.new("RGB", (width, height), color=_BACKGROUND)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default(size=max(height - 10, 10))

    slot = width / max(len(digits), 1)
    for i, digit in enumerate(digits):
        x = int(i * slot + slot * 0.2) + secrets.randbelow(3)
        y = 2 + secrets.randbelow(max(height // 6, 1))
        draw.text((x, y), str(digit), font=font, fill=_random_colour())

    for _ in range(_NOISE_LINES):
        start = (secrets.randbelow(width), secrets.randbelow(height))
        end = (secrets.randbelow(width), secrets.randbelow(height))
        draw.line([start, end], fill=_random_colour(100, 220), width=1)

    for _ in range(_NOISE_DOTS):
        draw.point(
            (secrets.randbelow(width), secrets.randbelow(height)),
            fill=_random_colour(60, 200),
        )

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def to_data_uri(png: bytes) -> str:
    return DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")


def render_digits_data_uri(digits: list[int], width: int = 110, height: int = 34) -> str:
    return to_data_uri(render_digits_png(digits, width, height))
