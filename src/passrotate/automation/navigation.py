import logging
from typing import Optional
from urllib.parse import urlsplit

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from .engine import PageHandle
from .types import NavigationOutcome

logger = logging.getLogger(__name__)


def host_of(url: str) -> Optional[str]:
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def same_host(current_url: str, target_url: str) -> bool:
    current, target = host_of(current_url), host_of(target_url)
    return bool(current and target and current == target)


def navigate(page: PageHandle, url: str, timeout_ms: float = 30000, wait_until: str = "load") -> NavigationOutcome:
    """Navigate and wait for the load event, tolerating late load signals.

    Sites under load often fire the load event late or never even though the
    document is usable. When the wait fails but the tab is already on the
    requested host, the navigation counts as reached.
    """
    logger.info(f"[nav] goto {url}")
    try:
        response = page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightError as e:
        current = page.url
        timed_out = isinstance(e, PlaywrightTimeoutError)
        if same_host(current, url):
            logger.warning(f"[nav] load wait failed but on expected host, at {current}. Continuing.")
            return NavigationOutcome(reached=True, final_url=current, timed_out=True)
        logger.error(f"[nav] failed to navigate to {url}, at {current or 'no page'}: {e}")
        return NavigationOutcome(reached=False, final_url=current, timed_out=timed_out)

    if response is None:
        logger.debug(f"[nav] no response object for {url} (same-document navigation)")
    elif not response.ok:
        logger.error(f"[nav] {url}: HTTP {response.status} {response.status_text}")
    logger.info(f"[nav] reached {page.url}")
    return NavigationOutcome(reached=True, final_url=page.url, timed_out=False)
