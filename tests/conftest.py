import pytest

from services.challenge_store import ChallengeStore


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubTheme:
    """Theme with inline markup, used to drive the template pipeline."""

    def __init__(self, html: str, assets: dict | None = None) -> None:
        self.html = html
        self.assets = assets or {}

    def get_html(self) -> str:
        return self.html

    def get_asset_list(self) -> list[str]:
        return ["/" + name for name in self.assets]

    def get_asset(self, name: str) -> bytes:
        return self.assets[name]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return ChallengeStore(disable_duration=120.0, sweep_interval=30.0, clock=clock)


@pytest.fixture
def stub_theme():
    """Factory for inline-markup themes: ``stub_theme("<p>[[ captcha_id ]]</p>")``."""
    return StubTheme
