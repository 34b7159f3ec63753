"""Automation layer for password rotation via the web.

This package provides the resilient primitives (navigation, element waiting,
form filling, click retries), the declarative flow model and the runner that
executes site-specific password change flows on a Playwright page.
"""

from .types import FailureKind, FlowState, NavigationOutcome, RunResult
from .targets import Target
from .flow import Flow, Step, StepKind
from .runner import FlowRunner, run_flow

__all__ = [
    'FailureKind',
    'Flow',
    'FlowRunner',
    'FlowState',
    'NavigationOutcome',
    'RunResult',
    'Step',
    'StepKind',
    'Target',
    'run_flow',
]
