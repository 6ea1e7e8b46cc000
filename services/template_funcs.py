"""
Helper functions exposed to the final login template stage.

Themes call these from ``{{ ... }}`` expressions:

- lang(key): translated UI string, falls back to the key itself
- lang_html(key): same, marked safe for raw HTML insertion
- link(cdn_url, prefix, path): asset URL, served from the CDN when one is set
- asset_url(path): ``link`` with the page's own ``cdn_url`` / ``asset_prefix``
- is_link_url(value): whether ``value`` is an absolute http(s) URL
- render_js(value): JSON-encode ``value`` for inline ``<script>`` use
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional

from jinja2 import pass_context
from jinja2.runtime import Context
from markupsafe import Markup


DEFAULT_TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "login": "Login",
        "username": "Username",
        "password": "Password",
        "captcha": "Captcha",
        "login fail": "Login failed",
        "captcha required": "Please enter the captcha",
        "captcha fail": "Captcha verification failed",
    },
    "zh": {
        "login": "登录",
        "username": "用户名",
        "password": "密码",
        "captcha": "验证码",
        "login fail": "登录失败",
        "captcha required": "请输入验证码",
        "captcha fail": "验证码错误",
    },
}


def make_lang(
    lang_code: str = "en",
    translations: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Callable[[str], str]:
    table = (translations or DEFAULT_TRANSLATIONS).get(lang_code, {})

    def lang(key: str) -> str:
        return table.get(key.lower(), key)

    return lang


def link(cdn_url: str, prefix: str, path: str) -> str:
    if cdn_url:
        return cdn_url.rstrip("/") + path
    return prefix.rstrip("/") + path


@pass_context
def asset_url(context: Context, path: str) -> str:
    return link(context.get("cdn_url", ""), context.get("asset_prefix", ""), path)


def is_link_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def render_js(value: Any) -> Markup:
    # "</" must not close the surrounding <script> element
    return Markup(json.dumps(value, ensure_ascii=False).replace("</", "<\\/"))


def build_template_funcs(
    lang_code: str = "en",
    translations: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> dict[str, Callable[..., Any]]:
    """Return the helper set for one language, ready for ``Environment.globals``."""
    lang = make_lang(lang_code, translations)
    return {
        "lang": lang,
        "lang_html": lambda key: Markup(lang(key)),
        "link": link,
        "asset_url": asset_url,
        "is_link_url": is_link_url,
        "render_js": render_js,
    }
