"""Built-in login theme: a centred card with username, password and captcha."""

from __future__ import annotations

from pathlib import Path

from errors import AssetNotFoundError

_THEME_DIR = Path(__file__).resolve().parent
_ASSET_DIR = _THEME_DIR / "assets"

_ASSETS = ("/login.css", "/login.js")


class Theme1:
    def get_html(self) -> str:
        return (_THEME_DIR / "login.html").read_text(encoding="utf-8")

    def get_asset_list(self) -> list[str]:
        return list(_ASSETS)

    def get_asset(self, name: str) -> bytes:
        # Only listed assets are served; names never reach the filesystem otherwise.
        if "/" + name not in _ASSETS:
            raise AssetNotFoundError(f"asset not found: {name}", field="name")
        return (_ASSET_DIR / name).read_bytes()
