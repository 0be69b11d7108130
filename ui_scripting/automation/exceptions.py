"""Exception types raised by the test-script engine."""

from __future__ import annotations


class ScriptError(RuntimeError):
    """Base class for test-script engine failures."""


class InvalidArgumentError(ScriptError, ValueError):
    """Raised when a required value is missing or malformed."""


class ScriptFormatError(InvalidArgumentError):
    """Raised when a persisted script or result document cannot be parsed."""


class UnknownCommandError(InvalidArgumentError):
    """Raised when a step names a type or command the runner does not know."""


class ElementNotCachedError(InvalidArgumentError):
    """Raised when a step references an element id that no earlier step produced."""


class ScriptNotFoundError(ScriptError, LookupError):
    """Raised by service operations that need an existing script."""


class ScriptStorageError(ScriptError):
    """Raised when reading or writing the script store fails."""


class RecorderStateError(ScriptError):
    """Raised when a recorder operation is not valid in its current state."""
