"""
Control-level helpers for desktop UI automation.

This module wraps pywinauto control handles with a consistent API that the
runner and recorder can use without worrying about backend specifics.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import AutomationError, UnsupportedOperationError

try:
    from pywinauto.base_wrapper import BaseWrapper  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    BaseWrapper = object  # type: ignore


@dataclass(eq=False)
class UIControl:
    """Concrete element handle backed by a pywinauto wrapper."""

    wrapper: BaseWrapper

    def click(self, *, double_click: bool = False, right_click: bool = False) -> None:  # pragma: no cover - UI interaction
        if right_click:
            self.wrapper.click_input(button="right")
        elif double_click:
            self.wrapper.double_click_input()
        else:
            self.wrapper.click_input()

    def set_value(self, value: Any) -> None:  # pragma: no cover - UI interaction
        if hasattr(self.wrapper, "set_edit_text"):
            self.wrapper.set_edit_text(str(value))
        elif hasattr(self.wrapper, "select"):
            self.wrapper.select(str(value))
        elif hasattr(self.wrapper, "set_value"):
            self.wrapper.set_value(value)
        else:
            raise UnsupportedOperationError(
                f"Control {self.wrapper} does not support setting value."
            )

    def type_text(self, text: str, clear_first: bool = False) -> None:  # pragma: no cover - UI interaction
        if not hasattr(self.wrapper, "type_keys"):
            raise UnsupportedOperationError("Control does not support typing text.")
        if clear_first:
            if hasattr(self.wrapper, "set_edit_text"):
                self.wrapper.set_edit_text("")
            else:
                self.wrapper.type_keys("^a{BACKSPACE}", set_foreground=True)
        self.wrapper.type_keys(text, with_spaces=True, with_newlines=True, set_foreground=True)

    def read_property(self, name: str) -> Any:  # pragma: no cover - UI interaction
        """Read Name/Text, Value, IsEnabled or IsOffscreen; None when unavailable."""
        target = (name or "name").strip().lower()
        if target in {"text", "name", "title", "window_text"}:
            return self.wrapper.window_text()
        if target in {"value", "currentvalue"}:
            if hasattr(self.wrapper, "get_value"):
                return self.wrapper.get_value()
            return None
        if target in {"isenabled", "enabled", "is_enabled"}:
            return self.wrapper.is_enabled()
        if target in {"isoffscreen", "offscreen"}:
            info = getattr(self.wrapper, "element_info", None)
            element = getattr(info, "element", None)
            if element is not None and hasattr(element, "CurrentIsOffscreen"):
                return bool(element.CurrentIsOffscreen)
            return not self.wrapper.is_visible()
        if target in {"isvisible", "visible"}:
            return self.wrapper.is_visible()
        attr = getattr(self.wrapper, target, None)
        if callable(attr):
            return attr()
        if attr is not None:
            return attr
        info = getattr(self.wrapper, "element_info", None)
        if info is not None:
            return getattr(info, target, None)
        return None

    def capture(self, path: Path) -> None:  # pragma: no cover - UI interaction
        image = self.wrapper.capture_as_image()
        if image is None:
            raise AutomationError(f"Control {self.wrapper} could not be captured.")
        image.save(path)
