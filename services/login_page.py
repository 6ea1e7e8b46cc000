"""
Login page rendering.

A page render runs three steps, always in this order:

1. Captcha provisioning (only when digit captchas are on): mint random
   digits, store them as a challenge, draw them into an inline PNG data URI.
2. First template stage: the theme's raw markup is compiled with ``[[ ]]`` /
   ``[% %]`` / ``[# #]`` delimiters and filled with the per-render captcha
   state. Theme markup is free to contain final-stage ``{{ }}`` syntax and
   inline scripts; neither is touched here.
3. Final template stage: the intermediate markup is compiled with the
   standard Jinja2 delimiters and the shared helper functions, then executed.

Template failures never escape ``render``. They are logged, recorded in
``RenderResult.diagnostics``, and the page degrades to whatever output was
produced (possibly an empty string).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from config import DEFAULT_THEME
from errors import ConfigurationError
from infrastructure.captcha.image import render_digits_data_uri
from services.challenge_store import ChallengeStore
from services.template_funcs import build_template_funcs
from shared.generators import digits_to_str, generate_digits
from shared.logging import get_logger
from themes.protocol import ThemeProvider

log = get_logger(__name__)

TEMPLATE_NAME = "login_theme1"


@dataclass(frozen=True)
class TencentWaterProofWallData:
    id: str = ""
    app_id: str = ""
    app_secret_key: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.id)


@dataclass(frozen=True)
class LoginConfig:
    """Static login settings, fixed once the process is configured."""

    theme: str = DEFAULT_THEME
    captcha_digits: int = 0
    tencent: TencentWaterProofWallData = field(
        default_factory=TencentWaterProofWallData
    )
    image_width: int = 110
    image_height: int = 34


@dataclass
class RenderState:
    """Per-render copy of LoginConfig plus the transient captcha fields."""

    theme: str
    captcha_digits: int
    tencent: TencentWaterProofWallData
    captcha_id: str = ""
    captcha_img_src: str = ""

    @classmethod
    def from_config(cls, config: LoginConfig) -> "RenderState":
        return cls(
            theme=config.theme,
            captcha_digits=config.captcha_digits,
            tencent=config.tencent,
        )

    def as_context(self) -> dict[str, Any]:
        # The app secret stays server-side; templates only see public fields.
        return {
            "theme": self.theme,
            "captcha_digits": self.captcha_digits,
            "captcha_id": self.captcha_id,
            "captcha_img_src": self.captcha_img_src,
            "tencent": {"id": self.tencent.id, "app_id": self.tencent.app_id},
        }


@dataclass
class RenderResult:
    content: str
    name: str
    state: RenderState
    diagnostics: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


@dataclass
class CompiledLogin:
    template: Optional[Template]
    name: str
    state: RenderState
    diagnostics: list[str] = field(default_factory=list)


def _first_stage_environment() -> Environment:
    return Environment(
        block_start_string="[%",
        block_end_string="%]",
        variable_start_string="[[",
        variable_end_string="]]",
        comment_start_string="[#",
        comment_end_string="#]",
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def _final_stage_environment(funcs: Mapping[str, Callable[..., Any]]) -> Environment:
    env = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=True,
    )
    env.globals.update(funcs)
    return env


class LoginPage:
    """The login surface: a standalone page built from the selected theme."""

    def __init__(
        self,
        config: LoginConfig,
        theme: ThemeProvider,
        store: Optional[ChallengeStore] = None,
        page_context: Optional[Mapping[str, Any]] = None,
        template_funcs: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> None:
        if config.captcha_digits and store is None:
            raise ConfigurationError("digit captchas need a challenge store")
        self.config = config
        self.theme = theme
        self.store = store

        page = dict(page_context or {})
        funcs = dict(template_funcs or build_template_funcs(page.get("lang_code", "en")))
        lang = funcs["lang"]
        page.setdefault("title", lang("login"))
        page.setdefault("lang_code", "en")
        page.setdefault("cdn_url", "")
        page.setdefault("asset_prefix", "")
        page.setdefault("login_url", "/login")
        page.setdefault(
            "messages",
            {
                "login_fail": lang("login fail"),
                "captcha_required": lang("captcha required"),
                "captcha_fail": lang("captcha fail"),
            },
        )
        self.page_context = page
        self._first_env = _first_stage_environment()
        self._final_env = _final_stage_environment(funcs)

    def get_name(self) -> str:
        return "login"

    def is_a_page(self) -> bool:
        return True

    def get_asset_list(self) -> list[str]:
        return self.theme.get_asset_list()

    def get_asset(self, name: str) -> bytes:
        return self.theme.get_asset(name.lstrip("/"))

    def provision_captcha(self, state: RenderState) -> RenderState:
        """Issue a digit challenge and attach its id and image to ``state``."""
        if not state.captcha_digits or self.store is None:
            return state
        digits = generate_digits(state.captcha_digits)
        challenge_id = self.store.issue(digits_to_str(digits))
        log.debug("captcha_issued", challenge_id=challenge_id)
        return dataclasses.replace(
            state,
            captcha_id=challenge_id,
            captcha_img_src=render_digits_data_uri(
                digits, self.config.image_width, self.config.image_height
            ),
        )

    def compile(self) -> CompiledLogin:
        """Run provisioning and the first stage; compile the final template."""
        diagnostics: list[str] = []
        state = self.provision_captcha(RenderState.from_config(self.config))

        intermediate = ""
        first = self._compile(self._first_env, self.theme.get_html(), "first", diagnostics)
        if first is not None:
            intermediate = self._execute(first, state.as_context(), "first", diagnostics)

        final = self._compile(self._final_env, intermediate, "final", diagnostics)
        return CompiledLogin(
            template=final, name=TEMPLATE_NAME, state=state, diagnostics=diagnostics
        )

    def render(self, **page: Any) -> RenderResult:
        """Render the login page.

        Keyword arguments extend or override the page context (title,
        login_url, cdn_url, ...). Captcha state always wins over them.
        """
        compiled = self.compile()
        content = ""
        if compiled.template is not None:
            context = {**self.page_context, **page, **compiled.state.as_context()}
            content = self._execute(
                compiled.template, context, "final", compiled.diagnostics
            )
        return RenderResult(
            content=content,
            name=compiled.name,
            state=compiled.state,
            diagnostics=compiled.diagnostics,
        )

    def _compile(
        self, env: Environment, source: str, stage: str, diagnostics: list[str]
    ) -> Optional[Template]:
        try:
            return env.from_string(source)
        except TemplateError as e:
            log.error(
                "login_template_parse_failed",
                stage=stage,
                theme=self.config.theme,
                error=str(e),
                error_type=type(e).__name__,
            )
            diagnostics.append(f"{stage} stage parse error: {e}")
            return None

    def _execute(
        self,
        template: Template,
        context: Mapping[str, Any],
        stage: str,
        diagnostics: list[str],
    ) -> str:
        chunks: list[str] = []
        try:
            for chunk in template.generate(context):
                chunks.append(chunk)
        except Exception as e:
            # Any error raised by a template expression degrades the page
            log.error(
                "login_template_execute_failed",
                stage=stage,
                theme=self.config.theme,
                error=str(e),
                error_type=type(e).__name__,
            )
            diagnostics.append(f"{stage} stage execute error: {e}")
        return "".join(chunks)
