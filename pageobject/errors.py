"""Error types raised by the page-object layer.

Playwright's own errors are never wrapped; these cover the failures the
library detects itself.
"""

from __future__ import annotations

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class PageObjectError(Exception):
    """Base class for page-object failures."""


class PageInitializationError(PageObjectError):
    """Declared element locators could not be bound at construction."""


class NoSuchWindowError(PageObjectError):
    """A window handle is unknown to the session or its window is closed."""

    def __init__(self, handle: str | None, reason: str = "no such window") -> None:
        super().__init__(f"{reason}: {handle!r}")
        self.handle = handle


class WaitTimeoutError(PageObjectError, PlaywrightTimeoutError):
    """A library-side polling wait ran past its deadline."""

    def __init__(self, message: str) -> None:
        PlaywrightTimeoutError.__init__(self, message)


class CancelledWait(PageObjectError):
    """A wait was aborted through its cancel event before it completed."""
