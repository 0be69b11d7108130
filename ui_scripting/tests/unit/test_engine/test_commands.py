from __future__ import annotations

import pytest

from ui_scripting.automation.commands import ACTION_COMMANDS, ASSERTION_COMMANDS, RunContext
from ui_scripting.automation.elements import ElementArena
from ui_scripting.automation.exceptions import ElementNotCachedError, InvalidArgumentError
from ui_scripting.automation.variables import VariableStore


@pytest.fixture
def context(fake_automation) -> RunContext:
    return RunContext(automation=fake_automation, variables=VariableStore())


def test_command_tables_cover_vocabulary() -> None:
    assert set(ACTION_COMMANDS) == {
        "launch_app",
        "find_element",
        "click_element",
        "type_text",
        "set_value",
        "wait_for_element",
        "take_screenshot",
        "close_app",
    }
    assert set(ASSERTION_COMMANDS) == {
        "element_exists",
        "get_element_value",
        "get_element_text",
        "get_element_state",
    }
    assert ASSERTION_COMMANDS["element_exists"].boolean is True
    assert ASSERTION_COMMANDS["get_element_state"].boolean is True
    assert ASSERTION_COMMANDS["get_element_text"].boolean is False


def test_find_element_returns_sequential_ids(context: RunContext) -> None:
    find = ACTION_COMMANDS["find_element"]
    assert find.execute(context, {"automationId": "SubmitButton"}) == "elem_0"
    assert find.execute(context, {"className": "Edit"}) == "elem_1"
    assert find.execute(context, {"name": "Nothing here"}) is None
    assert find.execute(context, {}) is None


def test_find_element_prefers_automation_id(context: RunContext, fake_automation) -> None:
    ACTION_COMMANDS["find_element"].execute(context, {"automationId": "UserName", "name": "Submit"})
    assert fake_automation.calls[-1] == ("find_element", "UserName")


def test_cached_element_rejects_unknown_ids(context: RunContext) -> None:
    with pytest.raises(ElementNotCachedError, match="elem_3"):
        context.cached_element("elem_3")
    with pytest.raises(ElementNotCachedError):
        context.cached_element("not-an-id")


def test_click_passes_flags(context: RunContext, fake_automation) -> None:
    element_id = ACTION_COMMANDS["find_element"].execute(context, {"automationId": "SubmitButton"})
    ACTION_COMMANDS["click_element"].execute(
        context, {"elementId": element_id, "doubleClick": "true", "rightClick": "no"}
    )
    name, (element, double, right) = fake_automation.calls[-1]
    assert name == "click"
    assert element.automation_id == "SubmitButton"
    assert (double, right) == (True, False)


def test_wait_for_element_uses_context_timeout(fake_automation) -> None:
    context = RunContext(automation=fake_automation, variables=VariableStore(), wait_for_element_timeout_ms=1500)
    assert ACTION_COMMANDS["wait_for_element"].execute(context, {"automationId": "UserName"}) is True
    assert fake_automation.calls[0] == ("wait_for_element", ("UserName", 1500))
    assert ACTION_COMMANDS["wait_for_element"].execute(context, {"automationId": "Gone", "timeoutMs": "5"}) is False


def test_required_parameters_raise(context: RunContext) -> None:
    with pytest.raises(InvalidArgumentError, match="path"):
        ACTION_COMMANDS["launch_app"].execute(context, {})
    with pytest.raises(InvalidArgumentError, match="outputPath"):
        ACTION_COMMANDS["take_screenshot"].execute(context, {})
    with pytest.raises(InvalidArgumentError, match="pid"):
        ACTION_COMMANDS["close_app"].execute(context, {"pid": "abc"})


def test_value_falls_back_to_text(context: RunContext, fake_automation) -> None:
    element_id = ACTION_COMMANDS["find_element"].execute(context, {"automationId": "SubmitButton"})
    fake_automation.elements[0].properties["Text"] = "Go"
    assert ASSERTION_COMMANDS["get_element_value"].execute(context, {"elementId": element_id}) == "Go"
    assert ASSERTION_COMMANDS["get_element_text"].execute(context, {"elementId": element_id}) == "Submit"


def test_element_state_properties(context: RunContext) -> None:
    element_id = ACTION_COMMANDS["find_element"].execute(context, {"automationId": "UserName"})
    state = ASSERTION_COMMANDS["get_element_state"]
    assert state.execute(context, {"elementId": element_id}) is True
    assert state.execute(context, {"elementId": element_id, "property": "isoffscreen"}) is False
    with pytest.raises(InvalidArgumentError, match="IsFocused"):
        state.execute(context, {"elementId": element_id, "property": "IsFocused"})


def test_arena_identity_lookup() -> None:
    arena = ElementArena(first_id=1)
    first, second = object(), object()
    assert arena.identify(first) == (1, True)
    assert arena.identify(second) == (2, True)
    assert arena.identify(first) == (1, False)
    assert arena.get(2) is second
    arena.clear()
    assert len(arena) == 0
    assert arena.identify(second) == (1, True)
