"""Run outcome models: overall status plus one entry per executed step."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ScriptFormatError
from .script import Step
from .util import format_timestamp, parse_timestamp, utc_now


class TestStatus(str, Enum):
    NOT_RUN = "NotRun"
    RUNNING = "Running"
    PASSED = "Passed"
    FAILED = "Failed"
    PARTIALLY_PASSED = "PartiallyPassed"


TestStatus.__test__ = False


class StepStatus(str, Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    PASSED = "Passed"
    FAILED = "Failed"
    SKIPPED = "Skipped"


def _duration_ms(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() * 1000.0


@dataclass
class StepResult:
    step_index: int
    step: Step
    status: StepStatus = StepStatus.PENDING
    actual_value: Optional[str] = None
    error_message: Optional[str] = None
    start_time: datetime = field(default_factory=utc_now)
    end_time: datetime = field(default_factory=utc_now)

    @property
    def duration_ms(self) -> float:
        return _duration_ms(self.start_time, self.end_time)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StepResult":
        if not isinstance(data, Mapping):
            raise ScriptFormatError(f"Step result must be an object, got {type(data).__name__}")
        try:
            return cls(
                step_index=int(data.get("stepIndex", 0)),
                step=Step.from_dict(data.get("step") or {}),
                status=StepStatus(data.get("status", StepStatus.PENDING.value)),
                actual_value=data.get("actualValue"),
                error_message=data.get("errorMessage"),
                start_time=parse_timestamp(data["startTime"]),
                end_time=parse_timestamp(data["endTime"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ScriptFormatError(f"Invalid step result: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stepIndex": self.step_index,
            "step": self.step.to_dict(),
            "status": self.status.value,
            "actualValue": self.actual_value,
            "errorMessage": self.error_message,
            "startTime": format_timestamp(self.start_time),
            "endTime": format_timestamp(self.end_time),
            "durationMs": self.duration_ms,
        }


@dataclass
class TestResult:
    """
    Outcome of one script run.

    Step counts and duration are derived from ``step_results`` and the timestamps;
    they are emitted in ``to_dict`` for readers but never stored separately.
    """

    __test__ = False  # keep pytest from collecting this class

    script_name: str
    status: TestStatus = TestStatus.NOT_RUN
    start_time: datetime = field(default_factory=utc_now)
    end_time: datetime = field(default_factory=utc_now)
    step_results: List[StepResult] = field(default_factory=list)
    total_steps: int = 0
    error_message: Optional[str] = None
    screenshots: List[str] = field(default_factory=list)

    @property
    def passed_steps(self) -> int:
        return sum(1 for r in self.step_results if r.status is StepStatus.PASSED)

    @property
    def failed_steps(self) -> int:
        return sum(1 for r in self.step_results if r.status is StepStatus.FAILED)

    @property
    def skipped_steps(self) -> int:
        return sum(1 for r in self.step_results if r.status is StepStatus.SKIPPED)

    @property
    def duration_ms(self) -> float:
        return _duration_ms(self.start_time, self.end_time)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TestResult":
        if not isinstance(data, Mapping):
            raise ScriptFormatError(f"Result must be an object, got {type(data).__name__}")
        raw_steps = data.get("stepResults") or []
        if not isinstance(raw_steps, list):
            raise ScriptFormatError("stepResults must be a list")
        try:
            return cls(
                script_name=str(data["scriptName"]),
                status=TestStatus(data.get("status", TestStatus.NOT_RUN.value)),
                start_time=parse_timestamp(data["startTime"]),
                end_time=parse_timestamp(data["endTime"]),
                step_results=[StepResult.from_dict(item) for item in raw_steps],
                total_steps=int(data.get("totalSteps", 0)),
                error_message=data.get("errorMessage"),
                screenshots=[str(p) for p in data.get("screenshots") or []],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ScriptFormatError(f"Invalid result document: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scriptName": self.script_name,
            "status": self.status.value,
            "startTime": format_timestamp(self.start_time),
            "endTime": format_timestamp(self.end_time),
            "durationMs": self.duration_ms,
            "stepResults": [r.to_dict() for r in self.step_results],
            "totalSteps": self.total_steps,
            "passedSteps": self.passed_steps,
            "failedSteps": self.failed_steps,
            "skippedSteps": self.skipped_steps,
            "errorMessage": self.error_message,
            "screenshots": list(self.screenshots),
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "durationMs": self.duration_ms,
            "totalSteps": self.total_steps,
            "passedSteps": self.passed_steps,
            "failedSteps": self.failed_steps,
            "skippedSteps": self.skipped_steps,
            "errorMessage": self.error_message,
        }
