"""
Automation Capability: the backend operations the script engine drives.

``AutomationCapability`` is the contract; ``PywinautoAutomation`` fulfils it with
pywinauto's UIA backend and pyautogui screen captures.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .controls import UIControl
from .core import DEFAULT_WINDOW_SPEC, AutomationSession, ElementSelector, WindowSpec, attach_desktop
from .exceptions import AutomationError

try:
    from pywinauto.application import Application  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    Application = None  # type: ignore

try:
    import pyautogui
except Exception:  # pragma: no cover - needs a display
    pyautogui = None  # type: ignore

logger = logging.getLogger(__name__)


class AutomationCapability(Protocol):  # pragma: no cover - interface only
    def find_element(
        self,
        *,
        automation_id: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> Optional[Any]:
        ...

    def element_exists(self, automation_id: str) -> bool:
        ...

    def click(self, element: Any, double_click: bool = False, right_click: bool = False) -> None:
        ...

    def type_text(self, element: Any, text: str, clear_first: bool = False) -> None:
        ...

    def set_value(self, element: Any, value: str) -> None:
        ...

    def read_property(self, element: Any, name: str) -> Any:
        ...

    def wait_for_element(self, automation_id: str, timeout_ms: int = 10000) -> bool:
        ...

    def launch_app(
        self, path: str, arguments: Optional[str] = None, working_directory: Optional[str] = None
    ) -> int:
        ...

    def close_app(self, pid: int, force: bool = False) -> None:
        ...

    def take_screenshot(self, path: str, element: Optional[Any] = None) -> None:
        ...


class PywinautoAutomation:
    """UIA-backed capability; element handles are ``UIControl`` instances."""

    def __init__(
        self,
        window_spec: WindowSpec = DEFAULT_WINDOW_SPEC,
        *,
        find_timeout: float = 5.0,
        poll_interval: float = 0.25,
    ) -> None:
        self._window_spec = window_spec
        self._find_timeout = max(0.0, float(find_timeout))
        self._poll_interval = max(0.01, float(poll_interval))
        self._session: Optional[AutomationSession] = None
        self._apps: Dict[int, Any] = {}

    @property
    def session(self) -> AutomationSession:
        if self._session is None:
            self._session = attach_desktop(self._window_spec)
        return self._session

    def find_element(
        self,
        *,
        automation_id: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> Optional[UIControl]:
        selector = ElementSelector(automation_id=automation_id, name=name, class_name=class_name)
        wrapper = self.session.resolve_control(
            selector, timeout=self._find_timeout, retry_interval=self._poll_interval
        )
        if wrapper is None:
            logger.debug("Element '%s' not found", selector.describe())
            return None
        return UIControl(wrapper=wrapper)

    def element_exists(self, automation_id: str) -> bool:
        return self.session.find_control(ElementSelector(automation_id=automation_id)) is not None

    def click(self, element: UIControl, double_click: bool = False, right_click: bool = False) -> None:
        element.click(double_click=double_click, right_click=right_click)

    def type_text(self, element: UIControl, text: str, clear_first: bool = False) -> None:
        element.type_text(text, clear_first=clear_first)

    def set_value(self, element: UIControl, value: str) -> None:
        element.set_value(value)

    def read_property(self, element: UIControl, name: str) -> Any:
        return element.read_property(name)

    def wait_for_element(self, automation_id: str, timeout_ms: int = 10000) -> bool:
        selector = ElementSelector(automation_id=automation_id)
        found = self.session.resolve_control(
            selector, timeout=max(timeout_ms, 0) / 1000.0, retry_interval=self._poll_interval
        )
        return found is not None

    def launch_app(
        self, path: str, arguments: Optional[str] = None, working_directory: Optional[str] = None
    ) -> int:  # pragma: no cover - spawns processes
        if Application is None:
            raise AutomationError("pywinauto is required to launch applications.")
        cmd_line = f'"{path}"'
        if arguments:
            cmd_line = f"{cmd_line} {arguments}"
        app = Application(backend="uia").start(cmd_line, work_dir=working_directory or None)
        pid = int(app.process)
        self._apps[pid] = app
        logger.info("Launched '%s' (pid=%s)", path, pid)
        return pid

    def close_app(self, pid: int, force: bool = False) -> None:  # pragma: no cover - kills processes
        if Application is None:
            raise AutomationError("pywinauto is required to close applications.")
        app = self._apps.pop(pid, None)
        if app is None:
            app = Application(backend="uia").connect(process=pid)
        app.kill(soft=not force)
        logger.info("Closed pid=%s (force=%s)", pid, force)

    def take_screenshot(self, path: str, element: Optional[UIControl] = None) -> None:  # pragma: no cover - UI capture
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        if element is not None:
            element.capture(out)
        else:
            if pyautogui is None:
                raise AutomationError("pyautogui is required for full-screen screenshots.")
            shot = pyautogui.screenshot()
            shot.save(out)
        logger.info("Screenshot saved: %s", out)
