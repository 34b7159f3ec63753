from enum import Enum
import logging

from playwright.sync_api import Error as PlaywrightError

from .engine import PageHandle, ElementHandle
from .errors import ElementNotFound, ElementUnavailable
from .targets import Target
from .waiting import wait_visible

logger = logging.getLogger(__name__)

MASK = "********"


class FillMode(str, Enum):
    SET = "set"
    TYPE = "type"


def mask(value: str, secret: bool = True) -> str:
    """Render a value for logs; secrets always become the same fixed-length placeholder."""
    return MASK if secret else repr(value)


def fill(page: PageHandle, target: Target, value: str, mode: FillMode = FillMode.SET,
         secret: bool = True, timeout_ms: float = 15000, key_delay_ms: float = 15) -> ElementHandle:
    """Clear a field and write ``value`` into it.

    ``FillMode.TYPE`` sends one key event per character with ``key_delay_ms``
    between keys, for fields whose client-side validation listens to key
    events. Filling is idempotent: the field is always cleared first.

    Raises:
        ElementUnavailable: if the target is never visible or is read-only.
    """
    try:
        element = wait_visible(page, target, timeout_ms)
    except ElementNotFound as e:
        raise ElementUnavailable(target.description, target.expressions, "never became visible",
                                 e.elapsed_ms) from e
    if not element.is_editable():
        raise ElementUnavailable(target.description, target.expressions, "element is not editable")

    logger.info(f"[fill] {target.description} <- {mask(value, secret)} ({mode.value})")
    try:
        element.fill("", timeout=timeout_ms)
        if mode == FillMode.TYPE:
            element.click(timeout=timeout_ms)
            element.press_sequentially(value, delay=key_delay_ms)
        else:
            element.fill(value, timeout=timeout_ms)
    except PlaywrightError as e:
        raise ElementUnavailable(target.description, target.expressions, f"write failed: {e}") from e
    return element
