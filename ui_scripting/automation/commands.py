"""
Step command vocabulary.

Action and assertion commands are looked up by lower-cased name in
``ACTION_COMMANDS`` / ``ASSERTION_COMMANDS``. Every entry exposes
``execute(context, params)`` where ``params`` are already variable-resolved
strings; handlers coerce them back to ints/bools as needed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .driver.capability import AutomationCapability
from .elements import ElementArena
from .exceptions import ElementNotCachedError, InvalidArgumentError
from .util import parse_bool, parse_int
from .variables import VariableStore

logger = logging.getLogger(__name__)

ELEMENT_ID_PREFIX = "elem_"
_ELEMENT_ID_PATTERN = re.compile(rf"^{ELEMENT_ID_PREFIX}(\d+)$")

DEFAULT_WAIT_FOR_ELEMENT_MS = 10000


@dataclass
class RunContext:
    """Mutable state owned by one script run."""

    automation: AutomationCapability
    variables: VariableStore
    elements: ElementArena = field(default_factory=ElementArena)
    screenshots: List[str] = field(default_factory=list)
    wait_for_element_timeout_ms: int = DEFAULT_WAIT_FOR_ELEMENT_MS

    def cache_element(self, handle: Any) -> str:
        return f"{ELEMENT_ID_PREFIX}{self.elements.register(handle)}"

    def cached_element(self, element_id: Optional[str]) -> Any:
        match = _ELEMENT_ID_PATTERN.match(element_id or "")
        handle = self.elements.get(int(match.group(1))) if match else None
        if handle is None:
            raise ElementNotCachedError(f"Element not found in cache: {element_id}")
        return handle


def get_str(params: Mapping[str, str], key: str, default: str = "") -> str:
    value = params.get(key)
    return default if value is None else value


def require_str(params: Mapping[str, str], key: str, command: str) -> str:
    value = params.get(key)
    if not value:
        raise InvalidArgumentError(f"'{command}' requires parameter '{key}'")
    return value


def get_int(params: Mapping[str, str], key: str, default: int = 0) -> int:
    return parse_int(params.get(key), default)


def get_bool(params: Mapping[str, str], key: str, default: bool = False) -> bool:
    return bool(parse_bool(params.get(key), default))


ActionHandler = Callable[[RunContext, Dict[str, str]], Optional[Any]]
AssertionHandler = Callable[[RunContext, Dict[str, str]], Any]


@dataclass(frozen=True, slots=True)
class ActionCommand:
    name: str
    handler: ActionHandler

    def execute(self, context: RunContext, params: Dict[str, str]) -> Optional[Any]:
        """Run the action; the return value (if any) feeds ``storeResult``."""
        return self.handler(context, params)


@dataclass(frozen=True, slots=True)
class AssertionCommand:
    name: str
    handler: AssertionHandler
    # Boolean assertions parse ``expected`` as a bool; others compare strings.
    boolean: bool = False

    def execute(self, context: RunContext, params: Dict[str, str]) -> Any:
        return self.handler(context, params)


ACTION_COMMANDS: Dict[str, ActionCommand] = {}
ASSERTION_COMMANDS: Dict[str, AssertionCommand] = {}


def register_action(name: str) -> Callable[[ActionHandler], ActionHandler]:
    def decorator(func: ActionHandler) -> ActionHandler:
        ACTION_COMMANDS[name.lower()] = ActionCommand(name=name, handler=func)
        return func

    return decorator


def register_assertion(name: str, *, boolean: bool = False) -> Callable[[AssertionHandler], AssertionHandler]:
    def decorator(func: AssertionHandler) -> AssertionHandler:
        ASSERTION_COMMANDS[name.lower()] = AssertionCommand(name=name, handler=func, boolean=boolean)
        return func

    return decorator


# --- actions -----------------------------------------------------------------


@register_action("launch_app")
def _launch_app(context: RunContext, params: Dict[str, str]) -> str:
    pid = context.automation.launch_app(
        require_str(params, "path", "launch_app"),
        get_str(params, "arguments") or None,
        get_str(params, "workingDirectory") or None,
    )
    return str(pid)


@register_action("find_element")
def _find_element(context: RunContext, params: Dict[str, str]) -> Optional[str]:
    if "automationId" in params:
        handle = context.automation.find_element(automation_id=params["automationId"])
    elif "name" in params:
        handle = context.automation.find_element(name=params["name"])
    elif "className" in params:
        handle = context.automation.find_element(class_name=params["className"])
    else:
        logger.warning("find_element called without automationId/name/className")
        return None
    if handle is None:
        logger.warning("find_element matched nothing for %s", params)
        return None
    return context.cache_element(handle)


@register_action("click_element")
def _click_element(context: RunContext, params: Dict[str, str]) -> None:
    element = context.cached_element(params.get("elementId"))
    context.automation.click(
        element,
        double_click=get_bool(params, "doubleClick"),
        right_click=get_bool(params, "rightClick"),
    )


@register_action("type_text")
def _type_text(context: RunContext, params: Dict[str, str]) -> None:
    element = context.cached_element(params.get("elementId"))
    context.automation.type_text(element, get_str(params, "text"), clear_first=get_bool(params, "clearFirst"))


@register_action("set_value")
def _set_value(context: RunContext, params: Dict[str, str]) -> None:
    element = context.cached_element(params.get("elementId"))
    context.automation.set_value(element, get_str(params, "value"))


@register_action("wait_for_element")
def _wait_for_element(context: RunContext, params: Dict[str, str]) -> bool:
    return context.automation.wait_for_element(
        require_str(params, "automationId", "wait_for_element"),
        get_int(params, "timeoutMs", context.wait_for_element_timeout_ms),
    )


@register_action("take_screenshot")
def _take_screenshot(context: RunContext, params: Dict[str, str]) -> str:
    path = require_str(params, "outputPath", "take_screenshot")
    element = context.cached_element(params["elementId"]) if params.get("elementId") else None
    context.automation.take_screenshot(path, element)
    context.screenshots.append(path)
    return path


@register_action("close_app")
def _close_app(context: RunContext, params: Dict[str, str]) -> None:
    pid = get_int(params, "pid")
    if pid <= 0:
        raise InvalidArgumentError("'close_app' requires a positive 'pid'")
    context.automation.close_app(pid, force=get_bool(params, "force"))


# --- assertions --------------------------------------------------------------


@register_assertion("element_exists", boolean=True)
def _element_exists(context: RunContext, params: Dict[str, str]) -> bool:
    return bool(context.automation.element_exists(require_str(params, "automationId", "element_exists")))


@register_assertion("get_element_value")
def _get_element_value(context: RunContext, params: Dict[str, str]) -> Any:
    element = context.cached_element(params.get("elementId"))
    value = context.automation.read_property(element, "Value")
    if value is None:
        value = context.automation.read_property(element, "Text")
    return value


@register_assertion("get_element_text")
def _get_element_text(context: RunContext, params: Dict[str, str]) -> Any:
    element = context.cached_element(params.get("elementId"))
    return context.automation.read_property(element, "Name")


_STATE_PROPERTIES = {"isenabled": "IsEnabled", "isoffscreen": "IsOffscreen"}


@register_assertion("get_element_state", boolean=True)
def _get_element_state(context: RunContext, params: Dict[str, str]) -> bool:
    element = context.cached_element(params.get("elementId"))
    requested = get_str(params, "property", "IsEnabled")
    prop = _STATE_PROPERTIES.get(requested.strip().lower())
    if prop is None:
        raise InvalidArgumentError(f"Unknown element state property: {requested}")
    return bool(context.automation.read_property(element, prop))
