"""
Target descriptors: prioritized selection expressions for one UI element.

A ``Target`` holds candidate expressions tried in order against the live page.
The first candidate that matches at least one element wins, and the first
match in document order is used. Candidates are evaluated lazily, so a
cheap, specific CSS selector can be followed by broader role or label queries
that only run when the recorded selector has drifted.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Optional, Tuple

from playwright.sync_api import Error as PlaywrightError

from .engine import PageHandle, ElementHandle

logger = logging.getLogger(__name__)

CSS = "css"
ROLE = "role"
LABEL = "label"
TEXT = "text"


@dataclass(frozen=True)
class Candidate:
    kind: str
    value: str
    name: Optional[str] = None

    def __str__(self) -> str:
        if self.kind == CSS:
            return self.value
        if self.kind == ROLE:
            return f"role={self.value}[name=/{self.name}/i]" if self.name else f"role={self.value}"
        return f"{self.kind}=/{self.value}/i" if self.kind == LABEL else f"text={self.value!r}"

    def locate(self, page: PageHandle) -> ElementHandle:
        if self.kind == CSS:
            return page.locator(self.value)
        if self.kind == ROLE:
            if self.name:
                return page.get_by_role(self.value, name=re.compile(self.name, re.IGNORECASE))
            return page.get_by_role(self.value)
        if self.kind == LABEL:
            return page.get_by_label(re.compile(self.value, re.IGNORECASE))
        if self.kind == TEXT:
            return page.get_by_text(self.value)
        raise ValueError(f"Unknown candidate kind: {self.kind}")


def css(selector: str) -> Candidate:
    return Candidate(CSS, selector)


def role(aria_role: str, name: Optional[str] = None) -> Candidate:
    return Candidate(ROLE, aria_role, name)


def label(pattern: str) -> Candidate:
    return Candidate(LABEL, pattern)


def text(value: str) -> Candidate:
    return Candidate(TEXT, value)


class Target:
    """An element to interact with, described by ordered candidate expressions.

    Plain strings are treated as CSS selectors::

        Target("#id_username", "input[name='username']", description="username input")
    """

    __slots__ = ("candidates", "description")

    def __init__(self, *candidates, description: Optional[str] = None):
        if not candidates:
            raise ValueError("A target needs at least one candidate expression")
        self.candidates: Tuple[Candidate, ...] = tuple(
            css(c) if isinstance(c, str) else c for c in candidates
        )
        self.description = description or str(self.candidates[0])

    @property
    def expressions(self) -> Tuple[str, ...]:
        return tuple(str(c) for c in self.candidates)

    def __repr__(self) -> str:
        return f"Target({', '.join(self.expressions)})"

    def __str__(self) -> str:
        return self.description

    def __eq__(self, other) -> bool:
        return isinstance(other, Target) and self.candidates == other.candidates

    def __hash__(self) -> int:
        return hash(self.candidates)


def resolve_target(page: PageHandle, target: Target) -> Optional[ElementHandle]:
    """Return the first matching element for the first candidate that matches, or None."""
    for candidate in target.candidates:
        locator = candidate.locate(page)
        if locator.count() > 0:
            logger.debug(f"[target] {target.description} resolved via {candidate}")
            return locator.first
    return None


def is_target_visible(page: PageHandle, target: Target) -> bool:
    """Immediate visibility check; resolution errors during page transitions count as not visible."""
    try:
        element = resolve_target(page, target)
        return element is not None and element.is_visible()
    except PlaywrightError as e:
        logger.debug(f"[target] {target.description} check failed during transition: {e}")
        return False
