"""ThemeProvider protocol — the login page depends on this, not on a concrete theme.

A theme supplies raw markup for the first template stage and a flat set of
static assets. Asset names in ``get_asset_list`` carry a leading ``/``;
``get_asset`` receives them without it.
"""

from typing import Protocol


class ThemeProvider(Protocol):
    def get_html(self) -> str: ...

    def get_asset_list(self) -> list[str]: ...

    def get_asset(self, name: str) -> bytes: ...
