"""Unit tests for the theme registry and the built-in theme."""

import pytest

from errors import AssetNotFoundError, DuplicateRegistrationError, UnknownThemeError
from themes.registry import ThemeRegistry, create_default_registry
from themes.theme1 import Theme1


class TestThemeRegistry:
    def test_register_and_lookup(self, stub_theme):
        registry = ThemeRegistry()
        theme = stub_theme("<p></p>")
        registry.register("plain", theme)
        assert registry.lookup("plain") is theme
        assert registry.require("plain") is theme

    def test_duplicate_registration_halts(self, stub_theme):
        registry = ThemeRegistry()
        first = stub_theme("first")
        registry.register("plain", first)
        with pytest.raises(DuplicateRegistrationError) as excinfo:
            registry.register("plain", stub_theme("second"))
        assert excinfo.value.key == "plain"
        assert registry.lookup("plain") is first

    def test_lookup_unknown_returns_none(self):
        assert ThemeRegistry().lookup("missing") is None

    def test_require_unknown_raises(self):
        with pytest.raises(UnknownThemeError):
            ThemeRegistry().require("missing")

    def test_default_registry_has_theme1(self):
        registry = create_default_registry()
        assert isinstance(registry.lookup("theme1"), Theme1)

    def test_default_registries_are_independent(self, stub_theme):
        a = create_default_registry()
        a.register("extra", stub_theme(""))
        assert "extra" not in create_default_registry()


class TestTheme1:
    def test_html_uses_both_delimiter_sets(self):
        html = Theme1().get_html()
        assert "[[ captcha_img_src ]]" in html
        assert "{{ title }}" in html

    def test_asset_list_has_leading_slash(self):
        assert Theme1().get_asset_list() == ["/login.css", "/login.js"]

    @pytest.mark.parametrize("name", ["login.css", "login.js"])
    def test_listed_assets_are_readable(self, name):
        assert len(Theme1().get_asset(name)) > 0

    @pytest.mark.parametrize("name", ["missing.css", "../__init__.py", "login.html"])
    def test_unlisted_assets_raise(self, name):
        with pytest.raises(AssetNotFoundError):
            Theme1().get_asset(name)
