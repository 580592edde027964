"""Page-object base classes over Playwright's sync API."""

from pageobject.base_page import BasePage, normalize_text
from pageobject.elements import FindBy
from pageobject.errors import (
    CancelledWait,
    NoSuchWindowError,
    PageInitializationError,
    PageObjectError,
    WaitTimeoutError,
)
from pageobject.session import BrowserSession
from pageobject.waits import WaitPolicy, wait_until_ready

__all__ = [
    "BasePage",
    "BrowserSession",
    "CancelledWait",
    "FindBy",
    "NoSuchWindowError",
    "PageInitializationError",
    "PageObjectError",
    "WaitPolicy",
    "WaitTimeoutError",
    "normalize_text",
    "wait_until_ready",
]
