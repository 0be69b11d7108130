"""Runtime variables and ``{{name}}`` placeholder resolution."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from .util import format_value

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


class VariableStore:
    """Name -> string map seeded from script defaults, overridden by run parameters."""

    def __init__(
        self,
        declared: Optional[Mapping[str, Any]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._values: Dict[str, str] = {}
        for source in (declared, overrides):
            for name, value in (source or {}).items():
                self._values[str(name)] = format_value(value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = format_value(value)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def resolve_text(self, text: str) -> str:
        # Unknown placeholders are left as-is.
        def _replace(match: re.Match) -> str:
            return self._values.get(match.group(1), match.group(0))

        return PLACEHOLDER_PATTERN.sub(_replace, text)

    def resolve(self, params: Mapping[str, Any]) -> Dict[str, str]:
        """Return a copy of ``params`` with every value stringified and resolved."""
        return {str(key): self.resolve_text(format_value(value)) for key, value in params.items()}
