"""Public exports for the desktop automation driver."""

from .core import (
    DEFAULT_WINDOW_SPEC,
    AutomationSession,
    ElementSelector,
    PywinautoUnavailableError,
    WindowSpec,
    attach_desktop,
)
from .controls import UIControl
from .capability import AutomationCapability, PywinautoAutomation
from .exceptions import (
    AutomationError,
    UnsupportedOperationError,
)

__all__ = [
    "DEFAULT_WINDOW_SPEC",
    "AutomationSession",
    "ElementSelector",
    "PywinautoUnavailableError",
    "WindowSpec",
    "attach_desktop",
    "UIControl",
    "AutomationCapability",
    "PywinautoAutomation",
    "AutomationError",
    "UnsupportedOperationError",
]
