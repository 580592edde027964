# Shared page-object helpers for element waits, interactions and window handling.
from __future__ import annotations

import functools
import logging
from typing import Callable, TypeVar, Union

from playwright.sync_api import Locator, Page
from playwright.sync_api import (
    TimeoutError as PlaywrightTimeoutError,
)

from pageobject.elements import declared_elements
from pageobject.errors import NoSuchWindowError, PageInitializationError
from pageobject.session import BrowserSession
from pageobject.waits import DEFAULT_ELEMENT_WAIT_MS, DEFAULT_POLL_MS, WaitPolicy

LOGGER = logging.getLogger("qa.pages")

DEFAULT_VIEWPORT = (1280, 1024)
DEFAULT_NEW_WINDOW_TIMEOUT_MS = 10_000

Target = Union[str, Locator]
F = TypeVar("F", bound=Callable)


def normalize_text(value: str) -> str:
    """Replace each literal two-character `\\s` sequence with a single space."""
    return value.replace("\\s", " ")


def _tracked(action: str) -> Callable[[F], F]:
    """Count `action` on the session and record timeouts before re-raising them."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: BasePage, *args, **kwargs):
            self.session.record(action)
            try:
                return func(self, *args, **kwargs)
            except PlaywrightTimeoutError:
                self.session.record("wait_timeout")
                LOGGER.warning(
                    "wait_timeout",
                    extra={
                        "event": "wait_timeout",
                        "action": action,
                        "page_object": type(self).__name__,
                    },
                )
                raise

        return wrapper  # type: ignore[return-value]

    return decorator


class BasePage:
    """Base class for page objects composed over a shared BrowserSession.

    Subclasses declare their elements with FindBy class attributes and build
    page-specific workflows on the wait-then-act helpers below.
    """

    def __init__(
        self,
        session: BrowserSession,
        base_url: str = "",
        timeout_ms: int = DEFAULT_ELEMENT_WAIT_MS,
        *,
        viewport: tuple[int, int] = DEFAULT_VIEWPORT,
        new_window_timeout_ms: int = DEFAULT_NEW_WINDOW_TIMEOUT_MS,
        window_poll_ms: int = DEFAULT_POLL_MS,
    ) -> None:
        self.session = session
        self.base_url = base_url
        self.load()
        self.wait = WaitPolicy(timeout_ms=timeout_ms)
        self.window_wait = WaitPolicy(timeout_ms=new_window_timeout_ms, poll_ms=window_poll_ms)
        width, height = viewport
        self.page.set_viewport_size({"width": width, "height": height})

    @property
    def page(self) -> Page:
        """The Playwright page for the window that currently has focus."""
        return self.session.current_page

    @property
    def timeout_ms(self) -> int:
        return self.wait.timeout_ms

    def load(self) -> None:
        """Bind every declared FindBy against the current window."""

        elements = declared_elements(type(self))
        for name, element in elements.items():
            try:
                element.bind(self)
            except PageInitializationError:
                raise
            except Exception as exc:
                raise PageInitializationError(
                    f"{type(self).__name__}.{name}: could not bind {element!r}"
                ) from exc
        LOGGER.debug(
            "page_loaded",
            extra={
                "event": "page_loaded",
                "page_object": type(self).__name__,
                "elements": sorted(elements),
            },
        )

    def is_loaded(self) -> None:
        """Raise AssertionError when the page is not ready; subclasses override."""

    def get(self) -> BasePage:
        """Return self once loaded, calling load() first if is_loaded() fails."""

        try:
            self.is_loaded()
        except AssertionError:
            self.load()
            self.is_loaded()
        return self

    def _resolve(self, target: Target) -> Locator:
        if isinstance(target, str):
            return self.page.locator(target).first
        return target

    @_tracked("wait_presence")
    def wait_for_presence(self, target: Target) -> Locator:
        """Wait until the element is attached to the DOM and return its locator."""
        locator = self._resolve(target)
        locator.wait_for(state="attached", timeout=self.timeout_ms)
        return locator

    @_tracked("wait_visibility")
    def wait_for_visibility(self, target: Target) -> Locator:
        """Wait until the element is rendered and visible and return its locator."""
        locator = self._resolve(target)
        locator.wait_for(state="visible", timeout=self.timeout_ms)
        return locator

    def _wait_for_clickable(self, locator: Locator) -> None:
        # A trial click runs Playwright's actionability checks without clicking.
        locator.click(trial=True, timeout=self.timeout_ms)

    @_tracked("click")
    def click(self, target: Target) -> None:
        locator = self._resolve(target)
        self._wait_for_clickable(locator)
        locator.click(timeout=self.timeout_ms)

    @_tracked("set_text")
    def set_text(self, target: Target, value: str) -> None:
        """Clear the input and type `value` with literal `\\s` sequences turned into spaces."""
        locator = self._resolve(target)
        self._wait_for_clickable(locator)
        locator.clear(timeout=self.timeout_ms)
        locator.press_sequentially(normalize_text(value), timeout=self.timeout_ms)

    @_tracked("get_value")
    def get_value(self, target: Target) -> str:
        locator = self._resolve(target)
        self._wait_for_clickable(locator)
        return locator.input_value(timeout=self.timeout_ms)

    @_tracked("navigate")
    def navigate(self, url: str) -> None:
        """Record the focused window as main, then load `url` in it."""

        main = self.session.mark_main_window()
        LOGGER.info("navigate", extra={"event": "navigate", "url": url, "handle": main})
        self.page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)

    def goto(self, path: str = "") -> None:
        """Navigate to a path under base_url."""
        self.navigate(f"{self.base_url}{path}")

    def get_title(self) -> str:
        return self.page.title()

    def get_page_source(self) -> str:
        return self.page.content()

    @property
    def main_window_handle(self) -> str | None:
        return self.session.main_window_handle

    @property
    def current_window_handle(self) -> str:
        return self.session.current_window_handle

    def close_current_window(self) -> None:
        """Drop the focused window from the registry, then close it."""

        handle = self.session.current_window_handle
        if handle == self.session.main_window_handle:
            LOGGER.warning(
                "main_window_closed",
                extra={"event": "main_window_closed", "handle": handle},
            )
        self.session.forget(handle)
        self.session.close_current()

    @_tracked("switch_new_window")
    def switch_to_new_window(self) -> str:
        """Wait for an unseen window, register it and move focus there.

        When several windows appeared since the last call all of them are
        registered and focus goes to the first one in the order the browser
        context lists them. Returns the handle now in focus.
        """

        new_handles = self.session.wait_for_new_windows(self.window_wait)
        for handle in new_handles:
            self.session.remember(handle)
            LOGGER.info("window_adopted", extra={"event": "window_adopted", "handle": handle})
        target = new_handles[0]
        self._maximize(self.session.switch_to(target))
        return target

    def switch_to_main_window(self) -> None:
        handle = self.session.main_window_handle
        if handle is None:
            raise NoSuchWindowError(handle, "main window was never recorded")
        self.session.switch_to(handle)

    def _maximize(self, page: Page) -> None:
        """Size the viewport to the screen's available area.

        Playwright has no window maximize. Headless engines report the
        context viewport as the screen, so there this keeps the size as is.
        """
        # A fresh popup may still be leaving about:blank.
        page.wait_for_load_state("domcontentloaded", timeout=self.wait.timeout_ms)
        width, height = page.evaluate("() => [window.screen.availWidth, window.screen.availHeight]")
        page.set_viewport_size({"width": width, "height": height})

    def close(self) -> None:
        """Close the focused window without touching the registry."""
        self.page.close()

    def quit(self) -> None:
        """Close every window of the session's browser context."""
        self.session.quit()
