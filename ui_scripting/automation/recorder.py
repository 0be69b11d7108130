import logging
from typing import Any, Dict, Optional

from .driver.capability import AutomationCapability
from .elements import ElementArena
from .exceptions import RecorderStateError
from .script import STEP_ACTION, STEP_ASSERTION, STEP_WAIT, Script, Step

logger = logging.getLogger(__name__)

ELEMENT_VARIABLE_PREFIX = "element"


class Recorder:
    """
    Builds a Script from automation calls observed while recording.

    NotRecording -> start -> Recording -> pause -> Paused -> resume -> Recording;
    ``stop`` from Recording or Paused hands the script back and resets state.
    """

    def __init__(self) -> None:
        self._script: Optional[Script] = None
        self._recording = False
        self._elements = ElementArena(first_id=1)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def is_paused(self) -> bool:
        return self._script is not None and not self._recording

    @property
    def current_script(self) -> Optional[Script]:
        return self._script

    def start(self, name: str, description: str = "") -> None:
        if self._recording:
            raise RecorderStateError("Already recording")
        if not name:
            raise RecorderStateError("Recording needs a script name")
        self._script = Script(name=name, description=description or "")
        self._elements.clear()
        self._recording = True
        logger.info("Recording started for '%s'", name)

    def stop(self) -> Optional[Script]:
        if self._script is None:
            return None
        script = self._script
        self._script = None
        self._recording = False
        self._elements.clear()
        logger.info("Recording stopped for '%s' (%d steps)", script.name, len(script.steps))
        return script

    def pause(self) -> None:
        if not self._recording:
            raise RecorderStateError("Not recording")
        self._recording = False
        logger.info("Recording paused")

    def resume(self) -> None:
        if self._script is None:
            raise RecorderStateError("No script to resume")
        self._recording = True
        logger.info("Recording resumed")

    def _element_variable(self, element: Any) -> str:
        element_id, _ = self._elements.identify(element)
        return f"{ELEMENT_VARIABLE_PREFIX}{element_id}"

    def _append(self, step: Step) -> None:
        self._script.steps.append(step)
        logger.debug("Recorded %s '%s'", step.type, step.command)

    def record_find_element(
        self,
        element: Any,
        automation_id: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> None:
        if not self._recording:
            return
        variable = self._element_variable(element)
        params: Dict[str, Any] = {}
        if automation_id:
            params["automationId"] = automation_id
        elif name:
            params["name"] = name
        elif class_name:
            params["className"] = class_name
        self._append(
            Step(
                type=STEP_ACTION,
                command="find_element",
                params=params,
                store_result=variable,
                description=f"Find element: {automation_id or name or class_name}",
            )
        )

    def record_click(self, element: Any, double_click: bool = False, right_click: bool = False) -> None:
        if not self._recording:
            return
        params: Dict[str, Any] = {"elementId": f"{{{{{self._element_variable(element)}}}}}"}
        if double_click:
            params["doubleClick"] = True
        if right_click:
            params["rightClick"] = True
        kind = "right" if right_click else "double" if double_click else "single"
        self._append(
            Step(
                type=STEP_ACTION,
                command="click_element",
                params=params,
                description=f"Click element ({kind})",
            )
        )

    def record_type_text(self, element: Any, text: str, clear_first: bool = False) -> None:
        if not self._recording:
            return
        params: Dict[str, Any] = {
            "elementId": f"{{{{{self._element_variable(element)}}}}}",
            "text": text,
        }
        if clear_first:
            params["clearFirst"] = True
        self._append(
            Step(
                type=STEP_ACTION,
                command="type_text",
                params=params,
                description=f"Type text: {text[:20]}",
            )
        )

    def record_wait(self, duration_ms: int) -> None:
        if not self._recording:
            return
        self._append(
            Step(
                type=STEP_WAIT,
                command="wait",
                params={"duration": int(duration_ms)},
                description=f"Wait for {int(duration_ms)}ms",
            )
        )

    def record_assertion(
        self,
        command: str,
        params: Dict[str, Any],
        expected: Any,
        message: Optional[str] = None,
    ) -> None:
        if not self._recording:
            return
        self._append(
            Step(
                type=STEP_ASSERTION,
                command=command,
                params=dict(params),
                expected=expected,
                message=message or f"Assert {command}",
                description=message,
            )
        )

    def add_variable(self, name: str, value: str) -> None:
        if self._script is None:
            raise RecorderStateError("No active script")
        self._script.variables[name] = value

    def add_tag(self, tag: str) -> None:
        if self._script is None:
            raise RecorderStateError("No active script")
        self._script.add_tag(tag)


class RecordingAutomation:
    """
    Automation capability proxy that forwards every call to ``backend`` and
    reports find/click/type calls to ``recorder``.
    """

    def __init__(self, backend: AutomationCapability, recorder: Recorder) -> None:
        self.backend = backend
        self.recorder = recorder

    def find_element(
        self,
        *,
        automation_id: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> Optional[Any]:
        element = self.backend.find_element(automation_id=automation_id, name=name, class_name=class_name)
        if element is not None:
            self.recorder.record_find_element(element, automation_id, name, class_name)
        return element

    def click(self, element: Any, double_click: bool = False, right_click: bool = False) -> None:
        self.backend.click(element, double_click=double_click, right_click=right_click)
        self.recorder.record_click(element, double_click, right_click)

    def type_text(self, element: Any, text: str, clear_first: bool = False) -> None:
        self.backend.type_text(element, text, clear_first=clear_first)
        self.recorder.record_type_text(element, text, clear_first)

    def __getattr__(self, item: str) -> Any:
        return getattr(self.backend, item)
