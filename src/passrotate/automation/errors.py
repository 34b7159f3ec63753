from typing import Optional, Sequence

from .types import FailureKind


class RotationError(Exception):
    """Base exception for failures inside a rotation flow."""
    kind = FailureKind.UNHANDLED


class MissingInput(RotationError):
    """Raised when required inputs are absent or empty."""
    kind = FailureKind.MISSING_INPUT

    def __init__(self, names: Sequence[str]):
        self.names = list(names)
        super().__init__(f"Missing required inputs: {', '.join(self.names)}")


class NavigationFailed(RotationError):
    """Raised when a navigation ends on a host other than the requested one."""
    kind = FailureKind.NAVIGATION_FAILED

    def __init__(self, url: str, final_url: str, reason: str = ""):
        self.url = url
        self.final_url = final_url
        message = f"Failed to navigate to {url} (ended at {final_url or 'no page'})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ElementNotFound(RotationError):
    """Raised when a target never reaches the requested state in time."""
    kind = FailureKind.ELEMENT_NOT_FOUND

    def __init__(self, description: str, expressions: Sequence[str], state: str, elapsed_ms: float,
                 message: Optional[str] = None):
        self.description = description
        self.expressions = list(expressions)
        self.state = state
        self.elapsed_ms = elapsed_ms
        super().__init__(message or (
            f"{description} not {state} after {elapsed_ms:.0f}ms "
            f"(tried {' | '.join(self.expressions)})"
        ))


class ElementUnavailable(ElementNotFound):
    """Raised when a form field cannot be resolved to a visible, editable element."""

    def __init__(self, description: str, expressions: Sequence[str], reason: str, elapsed_ms: float = 0.0):
        self.reason = reason
        super().__init__(description, expressions, "editable", elapsed_ms,
                         message=f"{description} is not available for input: {reason}")


class ActionFailed(RotationError):
    """Raised once the retry budget for an action is exhausted."""
    kind = FailureKind.ACTION_FAILED

    def __init__(self, description: str, attempts: int, last_error: Optional[BaseException]):
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Could not click {description} after {attempts} attempt(s): {last_error}")


class ValidationRejected(RotationError):
    """Raised when the site reports a policy or validation error after submission."""
    kind = FailureKind.VALIDATION_REJECTED


class Unconfirmed(RotationError):
    """Raised when no success signal is observed after submission."""
    kind = FailureKind.UNCONFIRMED
