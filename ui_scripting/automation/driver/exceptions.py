"""Custom exception types for the automation driver layer."""

from __future__ import annotations


class AutomationError(RuntimeError):
    """Base class for automation-related failures."""


class UnsupportedOperationError(AutomationError):
    """Raised when a control does not support the requested interaction."""
