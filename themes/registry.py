"""Registry of login themes keyed by name.

Themes are wired in once while the process starts. A duplicate key is a
fatal configuration error, and so is selecting a theme nobody registered:
both surface at startup rather than on the first page render.
"""

from __future__ import annotations

from typing import Optional

from errors import DuplicateRegistrationError, UnknownThemeError
from themes.protocol import ThemeProvider
from themes.theme1 import Theme1


class ThemeRegistry:
    def __init__(self) -> None:
        self._themes: dict[str, ThemeProvider] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._themes

    def keys(self) -> list[str]:
        return list(self._themes)

    def register(self, key: str, theme: ThemeProvider) -> None:
        if key in self._themes:
            raise DuplicateRegistrationError("login theme", key)
        self._themes[key] = theme

    def lookup(self, key: str) -> Optional[ThemeProvider]:
        return self._themes.get(key)

    def require(self, key: str) -> ThemeProvider:
        theme = self._themes.get(key)
        if theme is None:
            raise UnknownThemeError(key)
        return theme


def create_default_registry() -> ThemeRegistry:
    """Return a registry holding the themes shipped with the service."""
    registry = ThemeRegistry()
    registry.register("theme1", Theme1())
    return registry
