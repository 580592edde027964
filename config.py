"""Runtime settings for page-object test runs.

Values come from pytest CLI options, environment variables and defaults, in
that order of precedence, and are frozen into one Settings object that the
fixtures use to build browser sessions and page objects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from playwright.sync_api import Browser, Playwright
    from pytest import Config

DEFAULT_BASE_URL = ""
DEFAULT_BROWSER = "chromium"
DEFAULT_VIEWPORT = "1280x1024"
DEFAULT_ARTIFACTS_DIR = "artifacts"
DEFAULT_ELEMENT_WAIT_MS = 60_000
DEFAULT_NEW_WINDOW_TIMEOUT_MS = 10_000
DEFAULT_WINDOW_POLL_MS = 250
DEFAULT_TRACE_MODE = "on-failure"
DEFAULT_SCREENSHOT_MODE = "on-failure"
MODE_CHOICES = {"on", "off", "on-failure"}
BROWSER_CHOICES = {"chromium", "firefox", "webkit"}


@dataclass(frozen=True)
class Settings:
    """Resolved settings shared by fixtures, page objects and reporting hooks."""

    base_url: str
    browser_name: str
    headless: bool
    slowmo_ms: int
    viewport_width: int
    viewport_height: int
    artifacts_dir: Path
    element_wait_ms: int
    new_window_timeout_ms: int
    window_poll_ms: int
    trace: str
    screenshot: str

    @property
    def viewport(self) -> tuple[int, int]:
        return self.viewport_width, self.viewport_height

    def page_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for constructing a BasePage subclass."""
        return {
            "base_url": self.base_url,
            "timeout_ms": self.element_wait_ms,
            "viewport": self.viewport,
            "new_window_timeout_ms": self.new_window_timeout_ms,
            "window_poll_ms": self.window_poll_ms,
        }


def launch_browser(playwright: Playwright, settings: Settings) -> Browser:
    """Launch the configured engine; a missing binary fails the run."""
    browser_type = getattr(playwright, settings.browser_name)
    return browser_type.launch(headless=settings.headless, slow_mo=settings.slowmo_ms)


def _get_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def _parse_bool(value: str, *, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


def _parse_int(value: str, *, name: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from exc
    if parsed < 0:
        raise ValueError(f"{name} must be >= 0, got {parsed}")
    return parsed


def parse_viewport(value: str) -> tuple[int, int]:
    """Parse a WIDTHxHEIGHT viewport string into integer dimensions."""

    width_str, sep, height_str = value.lower().strip().partition("x")
    if not sep:
        raise ValueError(f"Viewport must be WIDTHxHEIGHT, got {value!r}")
    width = _parse_int(width_str, name="viewport width")
    height = _parse_int(height_str, name="viewport height")
    if width == 0 or height == 0:
        raise ValueError(f"Viewport dimensions must be > 0, got {value!r}")
    return width, height


def _pick(cli_value, env_value, default_value):
    if cli_value is not None:
        return cli_value
    if env_value is not None:
        return env_value
    return default_value


def _resolve_int(cli: dict[str, object], key: str, env_name: str, default: int) -> int:
    cli_value = cli.get(key)
    if cli_value is not None:
        option = "--" + key.replace("_", "-")
        return _parse_int(str(cli_value), name=option)
    return _parse_int(str(_pick(None, _get_env(env_name), default)), name=env_name)


def _build_settings_from_sources(*, cli: dict[str, object] | None) -> Settings:
    """Merge CLI/env/defaults with precedence CLI > env > defaults."""

    cli = cli or {}

    base_url = str(_pick(cli.get("base_url"), _get_env("BASE_URL"), DEFAULT_BASE_URL))
    browser_name = (
        str(_pick(cli.get("browser"), _get_env("BROWSER"), DEFAULT_BROWSER)).strip().lower()
    )
    if browser_name not in BROWSER_CHOICES:
        raise ValueError(
            f"Unsupported browser {browser_name!r}; expected one of {sorted(BROWSER_CHOICES)}"
        )

    headless_cli = cli.get("headless")
    headless_env = _get_env("HEADLESS")
    if isinstance(headless_cli, bool):
        headless = headless_cli
    elif headless_env is not None:
        headless = _parse_bool(headless_env, name="HEADLESS")
    else:
        headless = True

    viewport_raw = str(_pick(cli.get("viewport"), _get_env("VIEWPORT"), DEFAULT_VIEWPORT))
    viewport_width, viewport_height = parse_viewport(viewport_raw)

    window_poll_ms = _resolve_int(cli, "window_poll_ms", "WINDOW_POLL_MS", DEFAULT_WINDOW_POLL_MS)
    if window_poll_ms == 0:
        name = "--window-poll-ms" if cli.get("window_poll_ms") is not None else "WINDOW_POLL_MS"
        raise ValueError(f"{name} must be > 0")

    trace = str(_pick(cli.get("trace"), _get_env("TRACE"), DEFAULT_TRACE_MODE)).lower()
    screenshot = str(
        _pick(cli.get("screenshot"), _get_env("SCREENSHOT"), DEFAULT_SCREENSHOT_MODE)
    ).lower()
    for mode_name, mode_value in (("trace", trace), ("screenshot", screenshot)):
        if mode_value not in MODE_CHOICES:
            raise ValueError(
                f"Invalid {mode_name} mode {mode_value!r}; expected one of {sorted(MODE_CHOICES)}"
            )

    return Settings(
        base_url=base_url,
        browser_name=browser_name,
        headless=headless,
        slowmo_ms=_resolve_int(cli, "slowmo_ms", "SLOWMO_MS", 0),
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        artifacts_dir=Path(
            str(_pick(cli.get("artifacts_dir"), _get_env("ARTIFACTS_DIR"), DEFAULT_ARTIFACTS_DIR))
        ),
        element_wait_ms=_resolve_int(
            cli, "element_wait_ms", "ELEMENT_WAIT_MS", DEFAULT_ELEMENT_WAIT_MS
        ),
        new_window_timeout_ms=_resolve_int(
            cli, "new_window_timeout_ms", "NEW_WINDOW_TIMEOUT_MS", DEFAULT_NEW_WINDOW_TIMEOUT_MS
        ),
        window_poll_ms=window_poll_ms,
        trace=trace,
        screenshot=screenshot,
    )


def get_settings(pytest_config: Config | None = None) -> Settings:
    """Return the cached Settings for a pytest session, or an env/default-only copy."""

    if pytest_config is None:
        return _build_settings_from_sources(cli=None)

    cached = getattr(pytest_config, "_qa_settings_cache", None)
    if cached is not None:
        return cached

    cli_values: dict[str, object] = {
        "base_url": pytest_config.getoption("base_url"),
        "browser": pytest_config.getoption("browser"),
        "headless": pytest_config.getoption("headless"),
        "slowmo_ms": pytest_config.getoption("slowmo_ms"),
        "viewport": pytest_config.getoption("viewport"),
        "artifacts_dir": pytest_config.getoption("artifacts_dir"),
        "element_wait_ms": pytest_config.getoption("element_wait_ms"),
        "new_window_timeout_ms": pytest_config.getoption("new_window_timeout_ms"),
        "window_poll_ms": pytest_config.getoption("window_poll_ms"),
        "trace": pytest_config.getoption("pw_trace"),
        "screenshot": pytest_config.getoption("screenshot"),
    }
    settings = _build_settings_from_sources(cli=cli_values)
    pytest_config._qa_settings_cache = settings  # type: ignore[attr-defined]
    return settings
