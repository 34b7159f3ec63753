import logging
from typing import Callable, Dict, Mapping, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError

from ..core.config import resolve_inputs
from ..core.models import ResolvedInputs
from .actions import press_key, retry_click
from .engine import PageHandle
from .errors import (
    ActionFailed, ElementNotFound, MissingInput, NavigationFailed, RotationError,
    Unconfirmed, ValidationRejected,
)
from .flow import Flow, Step, StepKind
from .forms import fill
from .navigation import navigate
from .targets import Target, is_target_visible, resolve_target
from .types import FailureKind, FlowState, RunResult
from .waiting import VISIBLE, poll_until, wait_for_state

logger = logging.getLogger(__name__)

# Failures an ``optional`` step may absorb. Verification and input errors are never optional.
SKIPPABLE = (ElementNotFound, ActionFailed, NavigationFailed)

FALLBACK_NAVIGATION_TIMEOUT_MS = 30000


class FlowRunner:
    """Drives one flow against one page and produces exactly one ``RunResult``.

    States go ``IDLE -> VALIDATING_INPUTS -> RUNNING -> SUCCEEDED | FAILED``.
    Nothing raised inside a step escapes ``run``; every failure is turned into
    an unsuccessful result naming the step.
    """

    def __init__(self, flow: Flow, page: Optional[PageHandle] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.flow = flow
        self.page = page
        self.environ = environ
        self.state = FlowState.IDLE
        self.step_index: Optional[int] = None
        self.inputs: Optional[ResolvedInputs] = None
        self.result: Optional[RunResult] = None
        self.reauth_replayed = False
        self._current: Optional[Step] = None
        self._message = flow.success_message

    def _transition(self, state: FlowState) -> None:
        logger.debug(f"[flow] {self.flow.name}: {self.state.value} -> {state.value}")
        self.state = state

    def _finish(self, result: RunResult) -> RunResult:
        self._transition(FlowState.SUCCEEDED if result.success else FlowState.FAILED)
        self.result = result
        if result.success:
            logger.info(f"[flow] {self.flow.name}: {result.message}")
        else:
            logger.error(f"[flow] {self.flow.name}: {result.message}")
        return result

    def _current_url(self) -> str:
        try:
            return self.page.url if self.page is not None else ""
        except PlaywrightError:
            return ""

    def check_inputs(self) -> Optional[RunResult]:
        """Resolve inputs; return a failed result listing every missing input, or None."""
        if self.result is not None:
            return self.result if not self.result.success else None
        self._transition(FlowState.VALIDATING_INPUTS)
        self.inputs = resolve_inputs(self.flow.inputs, self.environ)
        if self.inputs.missing:
            error = MissingInput([spec.describe() for spec in self.inputs.missing])
            return self._finish(RunResult.failed(str(error), error.kind))
        return None

    def run(self) -> RunResult:
        if self.result is not None:
            return self.result
        failed = self.check_inputs() if self.inputs is None else None
        if failed is not None:
            return failed
        if self.page is None:
            return self._finish(RunResult.failed("No browser page is available to run the flow.", FailureKind.UNHANDLED))

        self._transition(FlowState.RUNNING)
        try:
            self._run_steps()
        except (Unconfirmed, ValidationRejected) as e:
            return self._finish(RunResult.failed(str(e), e.kind, self._current_url()))
        except RotationError as e:
            message = self._current.failure_message if self._current and self._current.failure_message else None
            message = message or f"Step '{self._step_name()}' failed: {e}"
            return self._finish(RunResult.failed(message, e.kind, self._current_url()))
        except Exception as e:
            logger.debug("[flow] unhandled error", exc_info=True)
            message = f"Unhandled error in step '{self._step_name()}': {e}"
            return self._finish(RunResult.failed(message, FailureKind.UNHANDLED, self._current_url()))
        return self._finish(RunResult.succeeded(self._message, self._current_url()))

    def _step_name(self) -> str:
        return self._current.name if self._current else "<none>"

    def _run_steps(self) -> None:
        reauth = self.flow.reauth
        for index, step in enumerate(self.flow.steps):
            self.step_index = index
            self._execute(step, self.inputs)
            if reauth and step.name == reauth.after:
                self._maybe_reauthenticate()

    def _maybe_reauthenticate(self) -> None:
        reauth = self.flow.reauth
        if self.reauth_replayed:
            return
        try:
            wait_for_state(self.page, reauth.login_form, VISIBLE, reauth.timeout_ms)
        except ElementNotFound:
            logger.info("[auth] No re-authentication form after the change. Proceeding.")
            return
        self.reauth_replayed = True
        logger.info("[auth] Re-authentication detected after the change. Signing in with the NEW credential.")
        replay = self.inputs.with_overrides({reauth.credential: self.inputs.get(reauth.replacement)})
        for step in reauth.steps:
            self._execute(step, replay)

    def _execute(self, step: Step, inputs: ResolvedInputs) -> None:
        self._current = step
        if step.skip_if is not None and is_target_visible(self.page, step.skip_if):
            logger.info(f"[flow] skip '{step.name}': {step.skip_if.description} is visible")
            return
        if step.only_if is not None and not is_target_visible(self.page, step.only_if):
            logger.info(f"[flow] skip '{step.name}': {step.only_if.description} is not visible")
            return

        logger.info(f"[flow] step '{step.name}' ({step.kind.value})")
        handlers: Dict[StepKind, Callable[[Step, ResolvedInputs], None]] = {
            StepKind.NAVIGATE: self._navigate,
            StepKind.WAIT: self._wait,
            StepKind.FILL: self._fill,
            StepKind.CLICK: self._click,
            StepKind.VERIFY: self._verify,
        }
        try:
            handlers[step.kind](step, inputs)
        except SKIPPABLE as e:
            if not step.optional:
                raise
            logger.info(f"[flow] optional step '{step.name}' skipped: {e}")

    def _url(self, template: str, inputs: ResolvedInputs) -> str:
        return template.format_map(inputs.values)

    def _goto(self, url: str, timeout_ms: float) -> None:
        outcome = navigate(self.page, url, timeout_ms)
        if not outcome.reached:
            raise NavigationFailed(url, outcome.final_url)

    def _check_landing(self, step: Step, inputs: ResolvedInputs, reason: str = "") -> None:
        if not step.expect_url or step.expect_url in self._current_url():
            return
        if not step.fallback_url:
            raise NavigationFailed(self._url(step.url, inputs) if step.url else step.expect_url,
                                   self._current_url(), reason or f"expected a URL containing {step.expect_url!r}")
        fallback = self._url(step.fallback_url, inputs)
        logger.info(f"[flow] '{step.name}' did not land on {step.expect_url!r}; falling back to {fallback}")
        self._goto(fallback, FALLBACK_NAVIGATION_TIMEOUT_MS)

    def _navigate(self, step: Step, inputs: ResolvedInputs) -> None:
        self._goto(self._url(step.url, inputs), step.timeout_ms)
        self._check_landing(step, inputs)

    def _wait(self, step: Step, inputs: ResolvedInputs) -> None:
        wait_for_state(self.page, step.target, step.state, step.timeout_ms)

    def _fill(self, step: Step, inputs: ResolvedInputs) -> None:
        value = inputs.get(step.value_from)
        if not value:
            # An optional field that is absent is skipped; one that shows up needs its value.
            if step.optional:
                wait_for_state(self.page, step.target, VISIBLE, step.timeout_ms)
            spec = self.flow.input_spec(step.value_from)
            raise MissingInput([spec.describe() if spec else step.value_from])
        fill(self.page, step.target, value, mode=step.mode, secret=step.secret, timeout_ms=step.timeout_ms)
        if step.submit_key:
            press_key(self.page, step.target, step.submit_key, navigates=True, timeout_ms=step.timeout_ms)

    def _click(self, step: Step, inputs: ResolvedInputs) -> None:
        try:
            retry_click(self.page, step.target, attempts=step.attempts, per_attempt_timeout_ms=step.timeout_ms,
                        navigates=step.navigates)
        except ActionFailed as e:
            if not (step.expect_url and step.fallback_url):
                raise
            logger.warning(f"[flow] '{step.name}' click failed ({e}); using direct navigation")
        self._check_landing(step, inputs)

    def _read_text(self, target: Optional[Target]) -> str:
        if target is None:
            return ""
        try:
            element = resolve_target(self.page, target)
            return element.inner_text(timeout=1000).strip() if element is not None else ""
        except PlaywrightError:
            return ""

    def _verify(self, step: Step, inputs: ResolvedInputs) -> None:
        hit = []
        rejected = []

        def settled() -> bool:
            for signal in step.signals:
                if signal.check(self.page):
                    hit.append(signal)
                    return True
            if step.error_target is not None and is_target_visible(self.page, step.error_target):
                rejected.append(step.error_target)
                return True
            return False

        _, elapsed = poll_until(self.page, settled, step.timeout_ms)
        if hit:
            logger.info(f"[verify] '{step.name}' confirmed by {hit[0].describe()} after {elapsed:.0f}ms")
            self._message = step.success_message or self._message
            return
        if rejected:
            hint = self._read_text(step.error_target) or "no details shown"
            raise ValidationRejected(
                step.rejected_message or f"Site rejected the submission in step '{step.name}': {hint}"
            )
        if step.optimistic:
            logger.warning(f"[verify] '{step.name}': no explicit confirmation detected; assuming success")
            self._message = step.success_message or self._message
            return
        expected = " or ".join(signal.describe() for signal in step.signals)
        message = step.failure_message or f"Password change may have failed: {expected} not detected."
        hint = self._read_text(step.error_hint)
        if hint:
            message = f"{message} Error hint: {hint}"
        raise Unconfirmed(message)


def run_flow(flow: Flow, page: PageHandle, environ: Optional[Mapping[str, str]] = None) -> RunResult:
    return FlowRunner(flow, page, environ).run()


def missing_inputs(flow: Flow, environ: Optional[Mapping[str, str]] = None) -> Sequence[str]:
    return [spec.describe() for spec in resolve_inputs(flow.inputs, environ).missing]
