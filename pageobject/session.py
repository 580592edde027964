"""Browser session context shared by the page objects of one test.

A BrowserSession wraps one Playwright BrowserContext and owns the window
bookkeeping: stable string handles for each Page, which window has focus,
the main window and the registry of windows the test has already seen.
Pages receive the session explicitly, so separate sessions never share
window state.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections import Counter

from playwright.sync_api import BrowserContext, Page

from pageobject.errors import CancelledWait, NoSuchWindowError
from pageobject.waits import WaitPolicy

LOGGER = logging.getLogger("qa.session")


class BrowserSession:
    """One browser context plus the window registry page objects operate on."""

    def __init__(self, context: BrowserContext, page: Page | None = None) -> None:
        self.context = context
        self.cancel_event = threading.Event()
        self.stats: Counter[str] = Counter()
        self._ids = itertools.count(1)
        self._handles: dict[str, Page] = {}
        self._registry: dict[str, None] = {}
        self._main_handle: str | None = None
        if page is None:
            page = context.pages[0] if context.pages else context.new_page()
        self._current = page
        self.handle_of(page)

    def handle_of(self, page: Page) -> str:
        """Return the handle for `page`, assigning the next one on first sight."""

        for handle, known in self._handles.items():
            if known is page:
                return handle
        handle = f"window-{next(self._ids)}"
        self._handles[handle] = page
        return handle

    def window_handles(self) -> list[str]:
        """Handles of every open window, in the order the context reports them."""

        return [self.handle_of(page) for page in self.context.pages if not page.is_closed()]

    def page_for(self, handle: str) -> Page:
        page = self._handles.get(handle)
        if page is None:
            raise NoSuchWindowError(handle)
        if page.is_closed():
            raise NoSuchWindowError(handle, "window is closed")
        return page

    @property
    def current_page(self) -> Page:
        if self._current.is_closed():
            raise NoSuchWindowError(self.handle_of(self._current), "current window is closed")
        return self._current

    @property
    def current_window_handle(self) -> str:
        return self.handle_of(self.current_page)

    @property
    def main_window_handle(self) -> str | None:
        return self._main_handle

    @property
    def known_window_handles(self) -> tuple[str, ...]:
        return tuple(self._registry)

    def remember(self, handle: str) -> bool:
        """Add `handle` to the registry; return False if it was already there."""

        if handle in self._registry:
            return False
        self._registry[handle] = None
        return True

    def forget(self, handle: str) -> None:
        self._registry.pop(handle, None)

    def mark_main_window(self) -> str:
        """Record the focused window as main and register it."""

        handle = self.current_window_handle
        self._main_handle = handle
        self.remember(handle)
        return handle

    def unseen_window_handles(self) -> list[str]:
        return [handle for handle in self.window_handles() if handle not in self._registry]

    def switch_to(self, handle: str) -> Page:
        page = self.page_for(handle)
        page.bring_to_front()
        self._current = page
        self.record("window_switch")
        LOGGER.info("window_switched", extra={"event": "window_switched", "handle": handle})
        return page

    def wait_for_new_windows(self, policy: WaitPolicy) -> list[str]:
        """Poll until at least one window outside the registry is open.

        A cancel aborts only the wait in progress; the event is reset before
        CancelledWait propagates so later waits on this session still run.
        """

        try:
            return policy.until(
                self.unseen_window_handles,
                message="a new window",
                sleep=self.pump,
                cancel=self.cancel_event,
            )
        except CancelledWait:
            self.cancel_event.clear()
            raise

    def pump(self, seconds: float) -> None:
        """Sleep while letting Playwright dispatch events such as new pages."""

        for page in self.context.pages:
            if not page.is_closed():
                page.wait_for_timeout(seconds * 1000)
                return
        self.cancel_event.wait(seconds)

    def close_current(self) -> str:
        page = self.current_page
        handle = self.handle_of(page)
        page.close()
        LOGGER.info("window_closed", extra={"event": "window_closed", "handle": handle})
        return handle

    def quit(self) -> None:
        LOGGER.info(
            "session_closed",
            extra={"event": "session_closed", "windows": len(self._handles)},
        )
        self.context.close()

    def cancel(self) -> None:
        """Abort any wait currently polling on this session."""

        self.cancel_event.set()

    def record(self, action: str) -> None:
        self.stats[action] += 1
