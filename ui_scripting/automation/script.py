# ui_scripting/automation/script.py
from __future__ import annotations

import getpass
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ScriptFormatError
from .util import format_timestamp, parse_bool, parse_timestamp, utc_now

STEP_ACTION = "action"
STEP_ASSERTION = "assertion"
STEP_WAIT = "wait"
STEP_TYPES = (STEP_ACTION, STEP_ASSERTION, STEP_WAIT)


def _default_author() -> str:
    try:
        return getpass.getuser()
    except Exception:
        return ""


@dataclass
class Step:
    command: str
    type: str = STEP_ACTION  # action, assertion, wait
    params: Dict[str, Any] = field(default_factory=dict)
    store_result: Optional[str] = None
    expected: Optional[Any] = None
    message: Optional[str] = None
    continue_on_failure: bool = False
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Step":
        if not isinstance(data, Mapping):
            raise ScriptFormatError(f"Step must be an object, got {type(data).__name__}")
        params = data.get("params") or {}
        if not isinstance(params, Mapping):
            raise ScriptFormatError("Step params must be an object")
        return cls(
            command=str(data.get("command") or ""),
            type=str(data.get("type") or STEP_ACTION),
            params=dict(params),
            store_result=data.get("storeResult"),
            expected=data.get("expected"),
            message=data.get("message"),
            continue_on_failure=bool(parse_bool(data.get("continueOnFailure"), False)),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "command": self.command,
            "params": dict(self.params),
            "storeResult": self.store_result,
            "expected": self.expected,
            "message": self.message,
            "continueOnFailure": self.continue_on_failure,
            "description": self.description,
        }

    def copy(self) -> "Step":
        return Step.from_dict(self.to_dict())


@dataclass
class Script:
    """A named, ordered list of steps plus declared variables and metadata."""

    name: str
    description: str = ""
    version: str = "1.0"
    created: datetime = field(default_factory=utc_now)
    modified: datetime = field(default_factory=utc_now)
    author: str = field(default_factory=_default_author)
    variables: Dict[str, str] = field(default_factory=dict)
    steps: List[Step] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    enabled: bool = True

    def add_step(self, step: Step) -> int:
        self.steps.append(step)
        return len(self.steps) - 1

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Script":
        if not isinstance(data, Mapping):
            raise ScriptFormatError(f"Script must be an object, got {type(data).__name__}")
        name = data.get("name")
        if not name:
            raise ScriptFormatError("Script name is required")
        raw_steps = data.get("steps") or []
        if not isinstance(raw_steps, list):
            raise ScriptFormatError("Script steps must be a list")
        raw_vars = data.get("variables") or {}
        if not isinstance(raw_vars, Mapping):
            raise ScriptFormatError("Script variables must be an object")
        raw_tags = data.get("tags") or []
        if not isinstance(raw_tags, list):
            raise ScriptFormatError("Script tags must be a list")
        tags: List[str] = []
        for tag in raw_tags:
            if str(tag) not in tags:
                tags.append(str(tag))
        try:
            created = parse_timestamp(data["created"]) if data.get("created") else utc_now()
            modified = parse_timestamp(data["modified"]) if data.get("modified") else created
        except ValueError as exc:
            raise ScriptFormatError(f"Invalid timestamp in script '{name}': {exc}") from exc
        return cls(
            name=str(name),
            description=str(data.get("description") or ""),
            version=str(data.get("version") or "1.0"),
            created=created,
            modified=modified,
            author=str(data.get("author") or ""),
            variables={str(k): "" if v is None else str(v) for k, v in raw_vars.items()},
            steps=[Step.from_dict(item) for item in raw_steps],
            tags=tags,
            enabled=bool(parse_bool(data.get("enabled"), True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "created": format_timestamp(self.created),
            "modified": format_timestamp(self.modified),
            "author": self.author,
            "variables": dict(self.variables),
            "steps": [step.to_dict() for step in self.steps],
            "tags": list(self.tags),
            "enabled": self.enabled,
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "stepCount": len(self.steps),
            "created": format_timestamp(self.created),
            "modified": format_timestamp(self.modified),
            "tags": list(self.tags),
        }
