"""
Clicks and key presses that tolerate flaky elements and optional navigations.

A click may or may not navigate. ``run_concurrently_tolerant`` pairs the action
with a bounded navigation expectation: a navigation that happens is awaited
before returning, one that never happens is logged and ignored once its
timeout lapses.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, ContextManager, Optional, TypeVar

from playwright.sync_api import Error as PlaywrightError

from .engine import PageHandle
from .errors import ActionFailed, ElementNotFound
from .targets import Target
from .waiting import wait_visible

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BACKOFF_MS = 750
DEFAULT_NAVIGATION_TIMEOUT_MS = 25000


def run_concurrently_tolerant(primary: Callable[[], T], optional: ContextManager[Any]) -> Optional[T]:
    """Run ``primary`` inside the ``optional`` expectation and join both.

    Errors from ``primary`` propagate. Playwright errors raised while settling
    the expectation are swallowed and mean "did not happen".
    """
    primary_failed = True
    result: Optional[T] = None
    try:
        with optional:
            result = primary()
            primary_failed = False
    except PlaywrightError as e:
        if primary_failed:
            raise
        logger.debug(f"[race] optional expectation did not settle: {e}")
    return result


def expect_optional_navigation(page: PageHandle, timeout_ms: float = DEFAULT_NAVIGATION_TIMEOUT_MS):
    return page.expect_navigation(wait_until="load", timeout=timeout_ms)


def retry_click(page: PageHandle, target: Target, attempts: int = 2, per_attempt_timeout_ms: float = 15000,
                backoff_ms: float = DEFAULT_BACKOFF_MS, navigates: bool = False,
                navigation_timeout_ms: float = DEFAULT_NAVIGATION_TIMEOUT_MS, delay_ms: float = 0) -> int:
    """Click ``target`` with up to ``attempts`` tries and a constant backoff.

    Returns:
        The number of attempts used.

    Raises:
        ActionFailed: once every attempt has failed.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            element = wait_visible(page, target, per_attempt_timeout_ms)
            logger.info(f"[click] {target.description} (attempt {attempt}/{attempts})")

            def click() -> None:
                element.click(timeout=per_attempt_timeout_ms, delay=delay_ms or None)

            if navigates:
                run_concurrently_tolerant(click, expect_optional_navigation(page, navigation_timeout_ms))
            else:
                click()
            return attempt
        except (PlaywrightError, ElementNotFound) as e:
            last_error = e
            if attempt < attempts:
                logger.warning(f"[click] attempt {attempt} failed for {target.description}. Retrying...")
                page.wait_for_timeout(backoff_ms)
    logger.error(f"[click] all {attempts} attempts failed for {target.description}")
    raise ActionFailed(target.description, attempts, last_error)


def press_key(page: PageHandle, target: Target, key: str = "Enter", navigates: bool = True,
              timeout_ms: float = 15000, navigation_timeout_ms: float = DEFAULT_NAVIGATION_TIMEOUT_MS) -> None:
    """Press ``key`` in ``target``, awaiting a navigation only if one starts."""
    element = wait_visible(page, target, timeout_ms)
    logger.info(f"[click] press {key} in {target.description}")

    def press() -> None:
        element.press(key, timeout=timeout_ms)

    if navigates:
        run_concurrently_tolerant(press, expect_optional_navigation(page, navigation_timeout_ms))
    else:
        press()
