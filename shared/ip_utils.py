"""
Client IP resolution for FastAPI requests.

The remote captcha service scores a ticket against the address of the user
who solved it, so the verify route forwards whatever this resolves.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

_PROXY_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Forwarded-For",
    "X-Real-IP",
)


def get_client_ip(request: Request) -> Optional[str]:
    """Extract the caller's IP from a FastAPI ``Request``.

    Proxy headers are checked in order (first entry of a comma list wins)
    before falling back to the socket peer address.

    Returns:
        The resolved IP, or ``None`` if the request carries no address.
    """
    for header in _PROXY_HEADERS:
        value = request.headers.get(header)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first

    if request.client and request.client.host:
        return request.client.host
    return None
