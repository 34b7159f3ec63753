"""
Deterministic waiting on element state.

Absence is only an error once the deadline passes: every poll re-resolves the
target, so an element that is briefly missing while the page transitions is
picked up on a later poll.
"""
from __future__ import annotations

import logging
from time import monotonic
from typing import Callable, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError

from .engine import PageHandle, ElementHandle
from .errors import ElementNotFound
from .targets import Target, resolve_target

logger = logging.getLogger(__name__)

VISIBLE = "visible"
HIDDEN = "hidden"
DETACHED = "detached"
STATES = (VISIBLE, HIDDEN, DETACHED)

DEFAULT_POLL_MS = 100


def poll_until(page: PageHandle, predicate: Callable[[], bool], timeout_ms: float,
               interval_ms: float = DEFAULT_POLL_MS) -> Tuple[bool, float]:
    """Evaluate ``predicate`` until it holds or ``timeout_ms`` elapses.

    The predicate is always evaluated once more after the last sleep, so a
    condition that becomes true right before the deadline is not missed.

    Returns:
        Tuple of (satisfied, elapsed milliseconds).
    """
    start = monotonic()
    while True:
        if predicate():
            return True, (monotonic() - start) * 1000.0
        elapsed = (monotonic() - start) * 1000.0
        if elapsed >= timeout_ms:
            return False, elapsed
        page.wait_for_timeout(min(interval_ms, timeout_ms - elapsed))


def _element_state(page: PageHandle, target: Target, state: str) -> Tuple[bool, Optional[ElementHandle]]:
    try:
        element = resolve_target(page, target)
        if state == VISIBLE:
            return (element is not None and element.is_visible()), element
        if state == HIDDEN:
            return (element is None or not element.is_visible()), None
        return element is None, None
    except PlaywrightError as e:
        # Execution context destroyed mid-navigation and similar; no state is proven this poll.
        logger.debug(f"[wait] {target.description}: resolution error during transition: {e}")
        return False, None


def wait_for_state(page: PageHandle, target: Target, state: str = VISIBLE,
                   timeout_ms: float = 15000, interval_ms: float = DEFAULT_POLL_MS) -> Optional[ElementHandle]:
    """Block until ``target`` reaches ``state`` and return the element (visible) or None.

    Raises:
        ElementNotFound: if the state is not reached before the deadline.
    """
    if state not in STATES:
        raise ValueError(f"Unknown element state: {state}")
    logger.debug(f"[wait] {target.description} -> {state} (timeout {timeout_ms:.0f}ms)")
    found: dict = {}

    def reached() -> bool:
        ok, element = _element_state(page, target, state)
        if ok:
            found["element"] = element
        return ok

    ok, elapsed = poll_until(page, reached, timeout_ms, interval_ms)
    if not ok:
        logger.error(f"[wait] timed out waiting for {target.description} to be {state} after {elapsed:.0f}ms")
        raise ElementNotFound(target.description, target.expressions, state, elapsed)
    logger.debug(f"[wait] {target.description} is {state} after {elapsed:.0f}ms")
    return found.get("element")


def wait_visible(page: PageHandle, target: Target, timeout_ms: float = 15000) -> ElementHandle:
    element = wait_for_state(page, target, VISIBLE, timeout_ms)
    assert element is not None
    return element
