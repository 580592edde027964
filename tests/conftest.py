"""In-memory stand-ins for Playwright contexts, pages and inputs.

They let the page-object and session logic be exercised without launching a
browser; the real-browser checks live in test_browser_pages.py.
"""

from __future__ import annotations

import time
from unittest.mock import MagicMock

import pytest

from pageobject import BrowserSession


class FakeContext:
    """Mimics BrowserContext.pages: closed pages drop out of the list."""

    def __init__(self) -> None:
        self.pages: list[MagicMock] = []
        self.closed = False

    def open_window(self, title: str = "") -> MagicMock:
        window = MagicMock(name=f"Page[{len(self.pages)}]")
        window.is_closed.return_value = False
        window.title.return_value = title
        window.content.return_value = f"<html><title>{title}</title></html>"
        window.evaluate.return_value = [1920, 1080]
        window.wait_for_timeout.side_effect = lambda ms: time.sleep(ms / 1000)

        def close() -> None:
            window.is_closed.return_value = True
            if window in self.pages:
                self.pages.remove(window)

        window.close.side_effect = close
        self.pages.append(window)
        return window

    def new_page(self) -> MagicMock:
        return self.open_window()

    def close(self) -> None:
        self.closed = True
        for window in list(self.pages):
            window.close()


class FakeInput:
    """Locator double for a text input that records what was typed."""

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.calls: list[tuple] = []

    def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        self.calls.append(("wait_for", state, timeout))

    def click(self, trial: bool = False, timeout: float | None = None) -> None:
        self.calls.append(("click", trial, timeout))

    def clear(self, timeout: float | None = None) -> None:
        self.calls.append(("clear", timeout))
        self.value = ""

    def press_sequentially(self, text: str, timeout: float | None = None) -> None:
        self.calls.append(("press_sequentially", text, timeout))
        self.value += text

    def input_value(self, timeout: float | None = None) -> str:
        return self.value


@pytest.fixture
def fake_context() -> FakeContext:
    context = FakeContext()
    context.open_window(title="Main")
    return context


@pytest.fixture
def new_fake_context() -> type[FakeContext]:
    return FakeContext


@pytest.fixture
def session(fake_context: FakeContext) -> BrowserSession:
    return BrowserSession(fake_context)  # type: ignore[arg-type]


@pytest.fixture
def fake_input() -> FakeInput:
    return FakeInput()
