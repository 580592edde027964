"""Wait primitives shared by page objects and sessions.

`WaitPolicy.until` is the explicit-wait loop used where Playwright has no
built-in condition (new windows appearing). Element waits go through
Playwright's own locator waits with the policy's timeout.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from pageobject.errors import CancelledWait, WaitTimeoutError

LOGGER = logging.getLogger("qa.waits")

DEFAULT_ELEMENT_WAIT_MS = 60_000
DEFAULT_POLL_MS = 250
DEFAULT_READY_SECONDS = 30.0

T = TypeVar("T")


def wait_until_ready(
    seconds: float = DEFAULT_READY_SECONDS,
    *,
    cancel: threading.Event | None = None,
) -> None:
    """Block for a fixed duration, raising CancelledWait if `cancel` fires first."""

    event = cancel if cancel is not None else threading.Event()
    if event.wait(seconds):
        LOGGER.warning("wait_cancelled", extra={"event": "wait_cancelled", "seconds": seconds})
        raise CancelledWait(f"Fixed wait of {seconds}s was cancelled")


@dataclass(frozen=True)
class WaitPolicy:
    """Timeout and polling interval for one page object's waits."""

    timeout_ms: int = DEFAULT_ELEMENT_WAIT_MS
    poll_ms: int = DEFAULT_POLL_MS

    def __post_init__(self) -> None:
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {self.timeout_ms}")
        if self.poll_ms <= 0:
            raise ValueError(f"poll_ms must be > 0, got {self.poll_ms}")

    def until(
        self,
        condition: Callable[[], T],
        *,
        message: str = "condition",
        sleep: Callable[[float], None] = time.sleep,
        cancel: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> T:
        """Poll `condition` until it returns a truthy value and return that value.

        The condition is always evaluated at least once. Between attempts the
        loop calls `sleep` with the poll interval in seconds; callers driving
        Playwright pass a sleep that pumps its event loop. Raises
        WaitTimeoutError once `timeout_ms` has elapsed and CancelledWait as
        soon as `cancel` is set.
        """

        deadline = clock() + self.timeout_ms / 1000
        while True:
            if cancel is not None and cancel.is_set():
                LOGGER.warning("wait_cancelled", extra={"event": "wait_cancelled", "wait": message})
                raise CancelledWait(f"Wait for {message} was cancelled")
            value = condition()
            if value:
                return value
            remaining = deadline - clock()
            if remaining <= 0:
                raise WaitTimeoutError(f"Timed out after {self.timeout_ms}ms waiting for {message}")
            sleep(min(self.poll_ms / 1000, remaining))
