"""
Declarative description of a credential-rotation flow.

A ``Flow`` is an ordered tuple of ``Step`` values plus the inputs it needs.
Steps are immutable and carry only data; ``FlowRunner`` in ``runner.py``
interprets them against a page.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import re
from typing import Optional, Tuple

from playwright.sync_api import Error as PlaywrightError

from ..core.models import InputSpec
from .engine import PageHandle
from .forms import FillMode
from .targets import Target, is_target_visible, resolve_target
from .waiting import VISIBLE, STATES

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    NAVIGATE = "navigate"
    WAIT = "wait"
    FILL = "fill"
    CLICK = "click"
    VERIFY = "verify"


@dataclass(frozen=True)
class Signal:
    """One independent post-submission success signal."""
    kind: str
    value: str = ""
    target: Optional[Target] = None

    def check(self, page: PageHandle) -> bool:
        if self.kind == "url_contains":
            return self.value in page.url
        if self.kind == "url_matches":
            return re.search(self.value, page.url) is not None
        if self.kind == "visible":
            return is_target_visible(page, self.target)
        if self.kind == "gone":
            try:
                element = resolve_target(page, self.target)
                return element is None or not element.is_visible()
            except PlaywrightError:
                return False
        raise ValueError(f"Unknown signal kind: {self.kind}")

    def describe(self) -> str:
        if self.kind in ("url_contains", "url_matches"):
            return f"URL {self.value!r}"
        if self.kind == "visible":
            return f"{self.target.description} visible"
        return f"{self.target.description} gone"


def url_contains(fragment: str) -> Signal:
    return Signal("url_contains", value=fragment)


def url_matches(pattern: str) -> Signal:
    return Signal("url_matches", value=pattern)


def visible(target: Target) -> Signal:
    return Signal("visible", target=target)


def gone(target: Target) -> Signal:
    return Signal("gone", target=target)


@dataclass(frozen=True)
class Step:
    kind: StepKind
    name: str
    target: Optional[Target] = None
    # navigate
    url: str = ""
    # fill
    value_from: str = ""
    mode: FillMode = FillMode.SET
    submit_key: str = ""
    secret: bool = True
    # wait
    state: str = VISIBLE
    # click
    attempts: int = 2
    navigates: bool = False
    # landing check and fallback for navigate/click
    expect_url: str = ""
    fallback_url: str = ""
    # verify
    signals: Tuple[Signal, ...] = ()
    error_target: Optional[Target] = None
    error_hint: Optional[Target] = None
    optimistic: bool = False
    success_message: str = ""
    failure_message: str = ""
    rejected_message: str = ""
    # common
    timeout_ms: float = 15000
    optional: bool = False
    skip_if: Optional[Target] = None
    only_if: Optional[Target] = None

    def __post_init__(self):
        if self.kind == StepKind.NAVIGATE and not self.url:
            raise ValueError(f"Step {self.name!r}: navigate needs a url")
        if self.kind in (StepKind.WAIT, StepKind.FILL, StepKind.CLICK) and self.target is None:
            raise ValueError(f"Step {self.name!r}: {self.kind.value} needs a target")
        if self.kind == StepKind.FILL and not self.value_from:
            raise ValueError(f"Step {self.name!r}: fill needs an input to read from")
        if self.kind == StepKind.WAIT and self.state not in STATES:
            raise ValueError(f"Step {self.name!r}: unknown state {self.state!r}")
        if self.kind == StepKind.VERIFY and not self.signals:
            raise ValueError(f"Step {self.name!r}: verify needs at least one signal")
        if self.attempts < 1:
            raise ValueError(f"Step {self.name!r}: attempts must be at least 1")


def navigate_to(name: str, url: str, timeout_ms: float = 30000, **kwargs) -> Step:
    return Step(StepKind.NAVIGATE, name, url=url, timeout_ms=timeout_ms, **kwargs)


def wait_for(name: str, target: Target, state: str = VISIBLE, timeout_ms: float = 20000, **kwargs) -> Step:
    return Step(StepKind.WAIT, name, target=target, state=state, timeout_ms=timeout_ms, **kwargs)


def fill_field(name: str, target: Target, value_from: str, **kwargs) -> Step:
    return Step(StepKind.FILL, name, target=target, value_from=value_from, **kwargs)


def click_on(name: str, target: Target, **kwargs) -> Step:
    return Step(StepKind.CLICK, name, target=target, **kwargs)


def verify(name: str, *signals: Signal, timeout_ms: float = 10000, **kwargs) -> Step:
    return Step(StepKind.VERIFY, name, signals=tuple(signals), timeout_ms=timeout_ms, **kwargs)


@dataclass(frozen=True)
class Reauth:
    """Replay login once with the new credential if the site signs the user out after the change."""
    after: str
    login_form: Target
    steps: Tuple[Step, ...]
    credential: str = "password"
    replacement: str = "new_password"
    timeout_ms: float = 6000


@dataclass(frozen=True)
class Flow:
    name: str
    site: str
    inputs: Tuple[InputSpec, ...]
    steps: Tuple[Step, ...]
    reauth: Optional[Reauth] = None
    description: str = ""
    success_message: str = "Password changed successfully."

    def __post_init__(self):
        if not self.steps:
            raise ValueError(f"Flow {self.name!r} has no steps")
        if self.steps[-1].kind != StepKind.VERIFY:
            raise ValueError(f"Flow {self.name!r} must end with a verify step")
        names = [s.name for s in self.steps]
        if len(names) != len(set(names)):
            raise ValueError(f"Flow {self.name!r} has duplicate step names")
        if self.reauth and self.reauth.after not in names:
            raise ValueError(f"Flow {self.name!r}: re-auth hook {self.reauth.after!r} is not a step")
        keys = {spec.key for spec in self.inputs}
        for step in self.steps + (self.reauth.steps if self.reauth else ()):
            if step.value_from and step.value_from not in keys:
                raise ValueError(f"Flow {self.name!r}: step {step.name!r} reads unknown input {step.value_from!r}")

    def match(self, url: str) -> bool:
        return self.site.lower() in (url or "").lower()

    def input_spec(self, key: str) -> Optional[InputSpec]:
        return next((spec for spec in self.inputs if spec.key == key), None)
