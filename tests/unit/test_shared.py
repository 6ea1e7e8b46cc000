"""
Unit tests for the shared/ utility modules.

Covers:
- shared.generators   (generate_challenge_id, generate_digits, digits_to_str,
                       generate_nonce)
- shared.ip_utils     (get_client_ip)
- shared.logging      (redact_sensitive_fields, configure_structlog)
- services.template_funcs (lang, link, asset_url, is_link_url, render_js)
"""

from __future__ import annotations

import re
import warnings
from unittest.mock import MagicMock

import pytest
import structlog

from services.template_funcs import (
    build_template_funcs,
    is_link_url,
    link,
    make_lang,
    render_js,
)
from shared.generators import (
    digits_to_str,
    generate_challenge_id,
    generate_digits,
    generate_nonce,
)
from shared.ip_utils import get_client_ip
from shared.logging import configure_structlog, redact_sensitive_fields


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_request(headers: dict, client_host: str | None = "10.0.0.1") -> MagicMock:
    """Minimal mock of a FastAPI Request."""
    req = MagicMock()
    req.headers = headers
    if client_host is None:
        req.client = None
    else:
        req.client = MagicMock()
        req.client.host = client_host
    return req


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


class TestGenerators:
    def test_challenge_id_default_length(self):
        assert re.fullmatch(r"[A-Za-z0-9]{10}", generate_challenge_id())

    def test_challenge_id_custom_length(self):
        assert len(generate_challenge_id(16)) == 16

    def test_digits_in_range(self):
        digits = generate_digits(200)
        assert len(digits) == 200
        assert all(0 <= d <= 9 for d in digits)

    def test_zero_digits(self):
        assert generate_digits(0) == []

    def test_digits_to_str(self):
        assert digits_to_str([0, 4, 2]) == "042"

    def test_nonce_length(self):
        assert len(generate_nonce()) == 10


# ---------------------------------------------------------------------------
# shared.ip_utils — get_client_ip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "headers, client_host, expected_ip",
    [
        ({"CF-Connecting-IP": "1.1.1.1"}, "10.0.0.1", "1.1.1.1"),
        ({"X-Forwarded-For": "2.2.2.2, 3.3.3.3"}, "10.0.0.1", "2.2.2.2"),
        ({"X-Real-IP": "4.4.4.4"}, "10.0.0.1", "4.4.4.4"),
        ({}, "10.0.0.1", "10.0.0.1"),
        ({}, None, None),
    ],
    ids=["cloudflare", "forwarded_for_first", "real_ip", "peer_fallback", "no_address"],
)
def test_get_client_ip(headers, client_host, expected_ip):
    assert get_client_ip(_make_request(headers, client_host)) == expected_ip


# ---------------------------------------------------------------------------
# shared.logging — redaction
# ---------------------------------------------------------------------------


class TestRedaction:
    def test_secrets_are_redacted(self):
        event = {
            "event": "tencent_captcha_request",
            "app_secret": "s3cret",
            "Ticket": "t-1",
            "token": "1234,abc",
            "challenge_id": "abc",
        }
        out = redact_sensitive_fields(None, "info", event)
        assert out["app_secret"] == "***REDACTED***"
        assert out["Ticket"] == "***REDACTED***"
        assert out["token"] == "***REDACTED***"
        assert out["challenge_id"] == "abc"
        assert out["event"] == "tencent_captcha_request"


class TestConfigureStructlog:
    @pytest.mark.parametrize(
        "log_format, renderer",
        [
            ("console", structlog.dev.ConsoleRenderer),
            ("json", structlog.processors.JSONRenderer),
        ],
    )
    def test_renderer_without_deprecation_warnings(self, log_format, renderer):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            configure_structlog(log_format)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], renderer)
        assert redact_sensitive_fields in processors


# ---------------------------------------------------------------------------
# services.template_funcs
# ---------------------------------------------------------------------------


class TestTemplateFuncs:
    @pytest.mark.parametrize(
        "lang_code, key, expected",
        [
            ("en", "login", "Login"),
            ("zh", "login", "登录"),
            ("en", "Login Fail", "Login failed"),
            ("en", "unknown key", "unknown key"),
            ("fr", "login", "login"),
        ],
        ids=["en", "zh", "case_insensitive", "unknown_key", "unknown_language"],
    )
    def test_lang(self, lang_code, key, expected):
        assert make_lang(lang_code)(key) == expected

    def test_custom_translations(self):
        lang = make_lang("de", {"de": {"login": "Anmelden"}})
        assert lang("login") == "Anmelden"

    @pytest.mark.parametrize(
        "cdn_url, prefix, expected",
        [
            ("", "/login/assets", "/login/assets/login.css"),
            ("", "/login/assets/", "/login/assets/login.css"),
            ("https://cdn.example.com/", "/login/assets", "https://cdn.example.com/login.css"),
        ],
        ids=["local", "local_trailing_slash", "cdn"],
    )
    def test_link(self, cdn_url, prefix, expected):
        assert link(cdn_url, prefix, "/login.css") == expected

    @pytest.mark.parametrize(
        "value, expected",
        [("https://a.b", True), ("http://a.b", True), ("/local", False)],
    )
    def test_is_link_url(self, value, expected):
        assert is_link_url(value) is expected

    def test_render_js_escapes_script_close(self):
        out = render_js({"msg": "</script><script>alert(1)"})
        assert "</script>" not in out
        assert out.startswith('{"msg": ')

    def test_build_template_funcs_keys(self):
        assert set(build_template_funcs()) == {
            "lang",
            "lang_html",
            "link",
            "asset_url",
            "is_link_url",
            "render_js",
        }
