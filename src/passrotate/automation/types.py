from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class FlowState(str, Enum):
    IDLE = "idle"
    VALIDATING_INPUTS = "validating_inputs"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(str, Enum):
    MISSING_INPUT = "missing_input"
    NAVIGATION_FAILED = "navigation_failed"
    ELEMENT_NOT_FOUND = "element_not_found"
    ACTION_FAILED = "action_failed"
    VALIDATION_REJECTED = "validation_rejected"
    UNCONFIRMED = "unconfirmed"
    UNHANDLED = "unhandled"


@dataclass(frozen=True)
class NavigationOutcome:
    reached: bool
    final_url: str = ""
    timed_out: bool = False


@dataclass(frozen=True)
class RunResult:
    success: bool
    message: str
    failure: Optional[FailureKind] = None
    final_url: str = ""
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def succeeded(cls, message: str, final_url: str = "") -> "RunResult":
        return cls(success=True, message=message, final_url=final_url)

    @classmethod
    def failed(cls, message: str, failure: FailureKind, final_url: str = "") -> "RunResult":
        return cls(success=False, message=message, failure=failure, final_url=final_url)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary for JSON output."""
        return {
            'success': self.success,
            'message': self.message,
            'failure': self.failure.value if self.failure else None,
            'final_url': self.final_url,
            'finished_at': self.finished_at.isoformat(),
        }
