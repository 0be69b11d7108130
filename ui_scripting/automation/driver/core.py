"""
Core driver utilities for locating desktop controls via UI Automation.

Selectors map onto pywinauto descendant queries (auto_id, title, class_name);
lookups run against one scoped window or every top-level desktop window.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .exceptions import AutomationError

try:
    from pywinauto import Desktop  # type: ignore
    from pywinauto.base_wrapper import BaseWrapper  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    Desktop = None  # type: ignore
    BaseWrapper = object  # type: ignore


@dataclass(slots=True)
class WindowSpec:
    """Describes the top-level window searches are scoped to."""

    title_regex: Optional[str] = None
    class_name: Optional[str] = None

    def to_query(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if self.title_regex:
            query["title_re"] = self.title_regex
        if self.class_name:
            query["class_name"] = self.class_name
        return query

    @property
    def is_scoped(self) -> bool:
        return bool(self.title_regex or self.class_name)


DEFAULT_WINDOW_SPEC = WindowSpec()


class PywinautoUnavailableError(AutomationError):
    """Raised when pywinauto is not installed but UI automation is requested."""


@dataclass(slots=True, frozen=True)
class ElementSelector:
    """One of AutomationId, Name or ClassName; the first one set wins."""

    automation_id: Optional[str] = None
    name: Optional[str] = None
    class_name: Optional[str] = None

    def to_query(self) -> Dict[str, Any]:
        if self.automation_id:
            return {"auto_id": self.automation_id}
        if self.name:
            return {"title": self.name}
        if self.class_name:
            return {"class_name": self.class_name}
        return {}

    def describe(self) -> str:
        return self.automation_id or self.name or self.class_name or "<empty selector>"


@dataclass(slots=True)
class AutomationSession:
    """UIA desktop handle, optionally scoped to one application window."""

    desktop: Any
    spec: WindowSpec

    def _roots(self) -> List[BaseWrapper]:
        if self.spec.is_scoped:
            window = self.desktop.window(**self.spec.to_query())
            return [window.wrapper_object()]
        return list(self.desktop.windows())

    def find_control(self, selector: ElementSelector) -> Optional[BaseWrapper]:
        """Single lookup pass; returns None when no control matches."""
        query = selector.to_query()
        if not query:
            return None
        try:
            roots = self._roots()
        except Exception:  # pragma: no cover - UI timing dependent
            return None
        for root in roots:
            try:
                matches = root.descendants(**query)
            except Exception:  # pragma: no cover - UI timing dependent
                continue
            if matches:
                return matches[0]
        return None

    def resolve_control(
        self,
        selector: ElementSelector,
        *,
        timeout: float = 5.0,
        retry_interval: float = 0.25,
    ) -> Optional[BaseWrapper]:
        """Poll ``find_control`` until it succeeds or ``timeout`` seconds pass."""
        deadline = time.monotonic() + max(timeout, 0.0)
        while True:
            control = self.find_control(selector)
            if control is not None:
                return control
            if time.monotonic() >= deadline:
                return None
            time.sleep(retry_interval)  # pragma: no cover - UI timing dependent


def attach_desktop(spec: WindowSpec = DEFAULT_WINDOW_SPEC) -> AutomationSession:
    """Return an AutomationSession over the UIA desktop."""
    if Desktop is None:
        raise PywinautoUnavailableError(
            "pywinauto is required for UI automation but is not installed."
        )
    return AutomationSession(desktop=Desktop(backend="uia"), spec=spec)
