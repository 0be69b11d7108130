from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from ui_scripting.automation.driver.exceptions import AutomationError
from ui_scripting.automation.repository import ScriptRepository


@dataclass(eq=False)
class FakeElement:
    automation_id: Optional[str] = None
    name: Optional[str] = None
    class_name: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)


class FakeAutomation:
    """In-memory automation capability that records every call."""

    def __init__(self, elements: Optional[List[FakeElement]] = None) -> None:
        self.elements: List[FakeElement] = list(elements or [])
        self.calls: List[Tuple[str, Any]] = []
        self.failing: Set[str] = set()
        self.next_pid = 4242

    def add(self, **kwargs: Any) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements.append(element)
        return element

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failing:
            raise AutomationError(f"{operation} failed")

    def find_element(
        self,
        *,
        automation_id: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> Optional[FakeElement]:
        self.calls.append(("find_element", automation_id or name or class_name))
        self._maybe_fail("find_element")
        for element in self.elements:
            if automation_id and element.automation_id == automation_id:
                return element
            if name and element.name == name:
                return element
            if class_name and element.class_name == class_name:
                return element
        return None

    def element_exists(self, automation_id: str) -> bool:
        self.calls.append(("element_exists", automation_id))
        return any(element.automation_id == automation_id for element in self.elements)

    def click(self, element: FakeElement, double_click: bool = False, right_click: bool = False) -> None:
        self.calls.append(("click", (element, double_click, right_click)))
        self._maybe_fail("click")

    def type_text(self, element: FakeElement, text: str, clear_first: bool = False) -> None:
        self.calls.append(("type_text", (element, text, clear_first)))
        self._maybe_fail("type_text")
        current = "" if clear_first else str(element.properties.get("Value") or "")
        element.properties["Value"] = current + text

    def set_value(self, element: FakeElement, value: str) -> None:
        self.calls.append(("set_value", (element, value)))
        element.properties["Value"] = value

    def read_property(self, element: FakeElement, name: str) -> Any:
        if name in ("Name", "Text") and name not in element.properties:
            return element.name
        return element.properties.get(name)

    def wait_for_element(self, automation_id: str, timeout_ms: int = 10000) -> bool:
        self.calls.append(("wait_for_element", (automation_id, timeout_ms)))
        return self.element_exists(automation_id)

    def launch_app(
        self, path: str, arguments: Optional[str] = None, working_directory: Optional[str] = None
    ) -> int:
        self.calls.append(("launch_app", (path, arguments, working_directory)))
        self._maybe_fail("launch_app")
        return self.next_pid

    def close_app(self, pid: int, force: bool = False) -> None:
        self.calls.append(("close_app", (pid, force)))

    def take_screenshot(self, path: str, element: Optional[FakeElement] = None) -> None:
        self.calls.append(("take_screenshot", (path, element)))

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def fake_automation() -> FakeAutomation:
    automation = FakeAutomation()
    automation.add(automation_id="SubmitButton", name="Submit", class_name="Button")
    automation.add(
        automation_id="UserName",
        name="User name",
        class_name="Edit",
        properties={"Value": "", "IsEnabled": True, "IsOffscreen": False},
    )
    return automation


@pytest.fixture
def repository(tmp_path: Path) -> ScriptRepository:
    return ScriptRepository(tmp_path / "data")


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    slept: List[float] = []
    monkeypatch.setattr("ui_scripting.automation.runner.time.sleep", slept.append)
    return slept
