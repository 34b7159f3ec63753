from typing import Protocol, Optional, Any, ContextManager, Pattern, Union


class ElementHandle(Protocol):
    """Subset of the Playwright ``Locator`` API the primitives rely on."""

    @property
    def first(self) -> "ElementHandle":
        ...

    def count(self) -> int:
        ...

    def is_visible(self) -> bool:
        ...

    def is_editable(self) -> bool:
        ...

    def fill(self, value: str, timeout: Optional[float] = None) -> None:
        ...

    def press_sequentially(self, text: str, delay: Optional[float] = None) -> None:
        ...

    def click(self, timeout: Optional[float] = None, delay: Optional[float] = None) -> None:
        ...

    def press(self, key: str, timeout: Optional[float] = None) -> None:
        ...

    def inner_text(self, timeout: Optional[float] = None) -> str:
        ...


class PageHandle(Protocol):
    """Subset of the Playwright sync ``Page`` API a flow is driven through."""

    @property
    def url(self) -> str:
        ...

    def goto(self, url: str, wait_until: str = "load", timeout: Optional[float] = None) -> Any:
        ...

    def locator(self, selector: str) -> ElementHandle:
        ...

    def get_by_role(self, role: Any, name: Union[str, Pattern[str], None] = None) -> ElementHandle:
        ...

    def get_by_label(self, text: Union[str, Pattern[str]]) -> ElementHandle:
        ...

    def get_by_text(self, text: Union[str, Pattern[str]]) -> ElementHandle:
        ...

    def wait_for_timeout(self, timeout: float) -> None:
        ...

    def expect_navigation(self, wait_until: str = "load", timeout: Optional[float] = None) -> ContextManager[Any]:
        ...
