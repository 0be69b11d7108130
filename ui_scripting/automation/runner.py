import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .commands import (
    ACTION_COMMANDS,
    ASSERTION_COMMANDS,
    DEFAULT_WAIT_FOR_ELEMENT_MS,
    RunContext,
    get_int,
)
from .driver.capability import AutomationCapability
from .exceptions import InvalidArgumentError, UnknownCommandError
from .result import StepResult, StepStatus, TestResult, TestStatus
from .script import STEP_ACTION, STEP_ASSERTION, STEP_WAIT, Script, Step
from .util import format_value, parse_bool, utc_now
from .variables import VariableStore

logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    default_wait_ms: int = 1000
    wait_for_element_timeout_ms: int = DEFAULT_WAIT_FOR_ELEMENT_MS


class Runner:
    """
    Executes one script against an automation backend.

    Steps run strictly in order. A failing step stops the run unless it sets
    ``continue_on_failure``; steps after the stop are not attempted and are not
    reported. Use one Runner per run: variables and the element cache are
    rebuilt by ``run`` but never shared between concurrent runs.
    """

    def __init__(self, automation: AutomationCapability, config: Optional[RunnerConfig] = None) -> None:
        self.automation = automation
        self.config = config or RunnerConfig()
        self._context: Optional[RunContext] = None

    @property
    def variables(self) -> Optional[VariableStore]:
        return self._context.variables if self._context is not None else None

    def run(self, script: Script, parameters: Optional[Mapping[str, Any]] = None) -> TestResult:
        result = TestResult(
            script_name=script.name,
            status=TestStatus.RUNNING,
            start_time=utc_now(),
            total_steps=len(script.steps),
        )
        self._context = RunContext(
            automation=self.automation,
            variables=VariableStore(script.variables, parameters),
            wait_for_element_timeout_ms=self.config.wait_for_element_timeout_ms,
        )
        result.screenshots = self._context.screenshots
        logger.info("Running script '%s' (%d steps)", script.name, result.total_steps)

        for index, step in enumerate(script.steps):
            step_result = self._execute_step(step, index)
            result.step_results.append(step_result)
            if step_result.status is StepStatus.FAILED:
                logger.warning(
                    "Step %d (%s) failed: %s", index + 1, step.command, step_result.error_message
                )
                if not step.continue_on_failure:
                    result.error_message = step_result.error_message
                    break

        result.end_time = utc_now()
        result.status = self._overall_status(result)
        logger.info(
            "Script '%s' finished: %s (%d passed, %d failed, %.0f ms)",
            script.name,
            result.status.value,
            result.passed_steps,
            result.failed_steps,
            result.duration_ms,
        )
        return result

    def _execute_step(self, step: Step, index: int) -> StepResult:
        step_result = StepResult(
            step_index=index,
            step=step.copy(),
            status=StepStatus.RUNNING,
            start_time=utc_now(),
        )
        try:
            params = self._context.variables.resolve(step.params)
            step_type = (step.type or "").strip().lower()
            if step_type == STEP_ACTION:
                self._run_action(step, params)
                step_result.status = StepStatus.PASSED
            elif step_type == STEP_ASSERTION:
                passed, actual = self._run_assertion(step, params)
                step_result.actual_value = actual
                if passed:
                    step_result.status = StepStatus.PASSED
                else:
                    step_result.status = StepStatus.FAILED
                    step_result.error_message = step.message or (
                        f"Assertion '{step.command}' failed: "
                        f"expected '{format_value(step.expected)}', got '{actual}'"
                    )
            elif step_type == STEP_WAIT:
                duration = get_int(params, "duration", self.config.default_wait_ms)
                logger.debug("Waiting %d ms", duration)
                time.sleep(max(duration, 0) / 1000.0)
                step_result.status = StepStatus.PASSED
            else:
                raise UnknownCommandError(f"Unknown step type: {step.type}")
        except Exception as exc:
            step_result.status = StepStatus.FAILED
            step_result.error_message = str(exc) or exc.__class__.__name__
            logger.debug("Step %d raised", index + 1, exc_info=True)
        step_result.end_time = utc_now()
        return step_result

    def _run_action(self, step: Step, params) -> None:
        command = ACTION_COMMANDS.get((step.command or "").strip().lower())
        if command is None:
            raise UnknownCommandError(f"Unknown action command: {step.command}")
        value = command.execute(self._context, params)
        logger.debug("Action %s -> %r", command.name, value)
        if step.store_result and value is not None:
            self._context.variables.set(step.store_result, value)

    def _run_assertion(self, step: Step, params) -> Tuple[bool, str]:
        command = ASSERTION_COMMANDS.get((step.command or "").strip().lower())
        if command is None:
            raise UnknownCommandError(f"Unknown assertion command: {step.command}")
        actual = command.execute(self._context, params)
        if command.boolean:
            expected = parse_bool(step.expected, None)
            if expected is None:
                raise InvalidArgumentError(
                    f"Assertion '{step.command}' expects a boolean, got '{format_value(step.expected)}'"
                )
            actual_bool = bool(parse_bool(actual, False))
            return actual_bool == expected, format_value(actual_bool)
        actual_text = format_value(actual)
        if step.expected is None:
            return False, actual_text
        return actual_text == format_value(step.expected), actual_text

    @staticmethod
    def _overall_status(result: TestResult) -> TestStatus:
        if result.total_steps == 0:
            return TestStatus.NOT_RUN
        passed = result.passed_steps
        failed = result.failed_steps
        if failed > 0 and passed > 0:
            return TestStatus.PARTIALLY_PASSED
        if failed > 0:
            return TestStatus.FAILED
        if passed == result.total_steps:
            return TestStatus.PASSED
        return TestStatus.NOT_RUN
