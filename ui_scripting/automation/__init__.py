"""Script model, runner, recorder and persistence."""

from .script import Script, Step
from .result import StepResult, StepStatus, TestResult, TestStatus
from .variables import VariableStore
from .runner import Runner, RunnerConfig
from .recorder import Recorder, RecordingAutomation
from .repository import ScriptRepository
