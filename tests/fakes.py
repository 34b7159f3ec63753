"""
A scripted stand-in for the Playwright sync ``Page``/``Locator`` API.

Elements are registered with the CSS selectors, labels, roles and text they
should match. Time is virtual: ``wait_for_timeout`` advances the page clock,
which the waiting module reads through a patched ``monotonic``.
"""
import re

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError


class FakeClock:
    def __init__(self):
        self.now_ms = 0.0

    def advance(self, ms):
        # At least one virtual millisecond per sleep so float rounding cannot stall a poll loop.
        self.now_ms += max(ms, 1.0)

    def monotonic(self):
        return self.now_ms / 1000.0


class FakeElement:
    def __init__(self, *selectors, visible=True, editable=True, text="", label=None, role=None, name=None,
                 appear_at_ms=0.0, disappear_at_ms=None, fail_clicks=0, on_click=None, on_press=None):
        self.selectors = set(selectors)
        self.visible = visible
        self.editable = editable
        self.text = text
        self.label = label
        self.role = role
        self.name = name
        self.appear_at_ms = appear_at_ms
        self.disappear_at_ms = disappear_at_ms
        self.fail_clicks = fail_clicks
        self.on_click = on_click
        self.on_press = on_press
        self.attached = True
        self.value = ""
        self.writes = []
        self.typed = []
        self.presses = []
        self.clicks = 0

    def present(self, clock):
        if not self.attached or clock.now_ms < self.appear_at_ms:
            return False
        return self.disappear_at_ms is None or clock.now_ms < self.disappear_at_ms

    def __repr__(self):
        return f"FakeElement({', '.join(sorted(self.selectors)) or self.label or self.name or self.text})"


class FakeLocator:
    def __init__(self, page, finder, description):
        self._page = page
        self._finder = finder
        self._description = description

    def _all(self):
        if self._page.clock.now_ms < self._page.unstable_until_ms:
            raise PlaywrightError("Execution context was destroyed, most likely because of a navigation")
        return [e for e in self._finder() if e.present(self._page.clock)]

    def _one(self):
        elements = self._all()
        if not elements:
            raise PlaywrightTimeoutError(f"Timeout exceeded: no element matches {self._description}")
        return elements[0]

    @property
    def first(self):
        return FakeLocator(self._page, lambda: self._all()[:1], self._description)

    def count(self):
        return len(self._all())

    def is_visible(self):
        elements = self._all()
        return bool(elements) and elements[0].visible

    def is_editable(self):
        return self._one().editable

    def fill(self, value, timeout=None):
        element = self._one()
        element.value = value
        element.writes.append(value)

    def press_sequentially(self, text, delay=None):
        element = self._one()
        element.value += text
        element.typed.append((text, delay))

    def click(self, timeout=None, delay=None):
        element = self._one()
        element.clicks += 1
        if element.fail_clicks:
            element.fail_clicks -= 1
            raise PlaywrightError("Element is not attached to the DOM")
        self._page.clicked.append(element)
        if element.on_click:
            element.on_click(self._page)

    def press(self, key, timeout=None):
        element = self._one()
        element.presses.append(key)
        if element.on_press:
            element.on_press(self._page, key)

    def inner_text(self, timeout=None):
        return self._one().text


def _matches(pattern, value):
    if value is None:
        return False
    if isinstance(pattern, re.Pattern):
        return pattern.search(value) is not None
    return pattern.lower() in value.lower()


class FakeNavigation:
    def __init__(self, page, timeout):
        self._page = page
        self._timeout = timeout or 30000
        self._start = None

    def __enter__(self):
        self._start = self._page.navigations
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            return False
        if self._page.navigations == self._start:
            self._page.clock.advance(self._timeout)
            raise PlaywrightTimeoutError(f"Timeout {self._timeout}ms exceeded while waiting for navigation")
        return False


class FakePage:
    def __init__(self, url="about:blank"):
        self.clock = FakeClock()
        self.url = url
        self.elements = []
        self.routes = {}
        self.visits = []
        self.clicked = []
        self.navigations = 0
        # Element queries raise until the clock passes this point, as during a navigation.
        self.unstable_until_ms = 0.0

    def add(self, *selectors, **kwargs):
        element = FakeElement(*selectors, **kwargs)
        self.elements.append(element)
        return element

    def clear(self):
        for element in self.elements:
            element.attached = False
        self.elements = []

    def navigate_to(self, url):
        self.url = url
        self.navigations += 1

    def route(self, url, handler):
        self.routes[url] = handler

    def goto(self, url, wait_until="load", timeout=None):
        self.visits.append(url)
        handler = self.routes.get(url)
        if handler is not None:
            return handler(self, url)
        self.navigate_to(url)
        return None

    def locator(self, selector):
        return FakeLocator(self, lambda: [e for e in self.elements if selector in e.selectors], selector)

    def get_by_role(self, role, name=None):
        def find():
            return [e for e in self.elements
                    if e.role == role and (name is None or _matches(name, e.name))]
        return FakeLocator(self, find, f"role={role}")

    def get_by_label(self, text):
        return FakeLocator(self, lambda: [e for e in self.elements if _matches(text, e.label)], f"label={text}")

    def get_by_text(self, text):
        return FakeLocator(self, lambda: [e for e in self.elements if _matches(text, e.text)], f"text={text}")

    def wait_for_timeout(self, timeout):
        self.clock.advance(timeout)

    def expect_navigation(self, wait_until="load", timeout=None):
        return FakeNavigation(self, timeout)


def timeout_on(final_url):
    """Route handler: the page ends up at ``final_url`` but the load event never fires."""
    def handler(page, url):
        page.navigate_to(final_url)
        raise PlaywrightTimeoutError("Timeout 30000ms exceeded.")
    return handler


def lands_on(final_url, then=None):
    """Route handler: navigation redirects to ``final_url`` and optionally builds the page."""
    def handler(page, url):
        page.navigate_to(final_url)
        if then is not None:
            then(page)
    return handler
