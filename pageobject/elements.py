# Declarative element locators for page objects.
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from playwright.sync_api import Locator

from pageobject.errors import PageInitializationError

if TYPE_CHECKING:
    from pageobject.base_page import BasePage


class FindBy:
    """Class-level element declaration resolved against the session's current window.

    Access from an instance returns a fresh Locator on whichever window has
    focus, so one page object keeps working after window switches.
    """

    def __init__(self, selector: str, *, has_text: str | None = None) -> None:
        self.selector = selector
        self.has_text = has_text
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"FindBy({self.selector!r})"

    def bind(self, page_object: BasePage) -> Locator:
        if not isinstance(self.selector, str) or not self.selector.strip():
            raise PageInitializationError(
                f"{type(page_object).__name__}.{self.name}: selector must be a non-empty string, "
                f"got {self.selector!r}"
            )
        kwargs: dict[str, Any] = {}
        if self.has_text is not None:
            kwargs["has_text"] = self.has_text
        return page_object.session.current_page.locator(self.selector, **kwargs)

    def __get__(self, instance: BasePage | None, owner: type) -> Any:
        if instance is None:
            return self
        return self.bind(instance)


def declared_elements(cls: type) -> dict[str, FindBy]:
    """Collect FindBy declarations from `cls` and its bases, subclasses winning."""

    found: dict[str, FindBy] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, FindBy):
                found[name] = value
            elif name in found:
                # A subclass replaced the declaration with something else.
                del found[name]
    return found
