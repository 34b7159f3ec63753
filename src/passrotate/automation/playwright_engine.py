from contextlib import contextmanager
import logging
from typing import Iterator, Optional

from playwright.sync_api import sync_playwright, Page, Browser, Playwright

logger = logging.getLogger(__name__)


class BrowserSession:
    """One browser connection whose first tab is the page a flow drives."""

    def __init__(self, pw: Playwright, browser: Browser):
        self._pw: Optional[Playwright] = pw
        self._browser: Optional[Browser] = browser
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        assert self._browser is not None, "session is closed"
        if self._page is None:
            contexts = self._browser.contexts
            context = contexts[0] if contexts else self._browser.new_context()
            pages = context.pages
            self._page = pages[0] if pages else context.new_page()
        return self._page

    def close(self) -> None:
        if self._browser:
            self._browser.close()
        if self._pw:
            self._pw.stop()
        self._page = None
        self._browser = None
        self._pw = None


class PlaywrightProvider:
    """Obtains browser sessions, either remote over CDP or a local Chromium.

    ``cdp_url`` may contain a ``{session_id}`` placeholder, in which case
    ``connect`` attaches to that existing remote session. A CDP URL without
    the placeholder is used by ``create`` as-is; with no CDP URL at all,
    ``create`` launches Chromium locally.
    """

    def __init__(self, cdp_url: Optional[str] = None, headless: bool = True):
        self.cdp_url = cdp_url
        self.headless = headless

    def connect(self, session_id: str) -> BrowserSession:
        if not self.cdp_url or "{session_id}" not in self.cdp_url:
            raise ValueError("Connecting to a session requires a CDP URL template with a {session_id} placeholder")
        endpoint = self.cdp_url.format(session_id=session_id)
        logger.info(f"[session] connecting to existing session {session_id}")
        pw = sync_playwright().start()
        try:
            browser = pw.chromium.connect_over_cdp(endpoint)
        except Exception:
            pw.stop()
            raise
        return BrowserSession(pw, browser)

    def create(self) -> BrowserSession:
        pw = sync_playwright().start()
        try:
            if self.cdp_url and "{session_id}" not in self.cdp_url:
                logger.info("[session] creating session over CDP")
                browser = pw.chromium.connect_over_cdp(self.cdp_url)
            else:
                logger.info(f"[session] launching local chromium (headless={self.headless})")
                browser = pw.chromium.launch(headless=self.headless)
        except Exception:
            pw.stop()
            raise
        return BrowserSession(pw, browser)

    def open(self, session_id: Optional[str] = None) -> BrowserSession:
        return self.connect(session_id) if session_id else self.create()


@contextmanager
def open_session(provider: PlaywrightProvider, session_id: Optional[str] = None) -> Iterator[BrowserSession]:
    session = provider.open(session_id)
    try:
        yield session
    finally:
        session.close()
