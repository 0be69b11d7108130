from __future__ import annotations

from typing import List

import pytest

from ui_scripting.automation.result import StepStatus, TestStatus
from ui_scripting.automation.runner import Runner, RunnerConfig
from ui_scripting.automation.script import Script, Step


def _login_script(expected: str = "alice") -> Script:
    return Script(
        name="login",
        variables={"user": "alice"},
        steps=[
            Step(command="find_element", params={"automationId": "UserName"}, store_result="userBox"),
            Step(command="type_text", params={"elementId": "{{userBox}}", "text": "{{user}}", "clearFirst": True}),
            Step(
                command="get_element_value",
                type="assertion",
                params={"elementId": "{{userBox}}"},
                expected=expected,
            ),
        ],
    )


def _assert_counts_consistent(result) -> None:
    statuses = [r.status for r in result.step_results]
    assert result.passed_steps == statuses.count(StepStatus.PASSED)
    assert result.failed_steps == statuses.count(StepStatus.FAILED)
    assert result.skipped_steps == statuses.count(StepStatus.SKIPPED)


def test_all_steps_pass(fake_automation) -> None:
    script = Script(
        name="clicks",
        steps=[
            Step(command="find_element", params={"automationId": "SubmitButton"}, store_result="btn"),
            Step(command="click_element", params={"elementId": "{{btn}}"}),
            Step(command="element_exists", type="assertion", params={"automationId": "SubmitButton"}, expected=True),
        ],
    )
    result = Runner(fake_automation).run(script)
    assert result.status is TestStatus.PASSED
    assert result.total_steps == 3
    assert result.passed_steps == 3
    assert result.failed_steps == 0
    assert [r.step_index for r in result.step_results] == [0, 1, 2]
    assert result.start_time <= result.end_time
    _assert_counts_consistent(result)


def test_failure_stops_run_and_omits_later_steps(fake_automation) -> None:
    script = Script(
        name="stops",
        steps=[
            Step(command="find_element", params={"automationId": "SubmitButton"}, store_result="btn"),
            Step(command="click_element", params={"elementId": "elem_99"}),
            Step(command="click_element", params={"elementId": "{{btn}}"}),
        ],
    )
    result = Runner(fake_automation).run(script)
    assert len(result.step_results) == 2
    assert result.step_results[1].status is StepStatus.FAILED
    assert "Element not found in cache: elem_99" in result.step_results[1].error_message
    assert result.error_message == result.step_results[1].error_message
    assert result.status is TestStatus.PARTIALLY_PASSED
    assert result.total_steps == 3
    assert fake_automation.call_names().count("click") == 0
    _assert_counts_consistent(result)


def test_continue_on_failure_runs_every_step(fake_automation) -> None:
    steps: List[Step] = [
        Step(command="click_element", params={"elementId": "elem_1"}, continue_on_failure=True),
        Step(command="element_exists", type="assertion", params={"automationId": "Missing"}, expected=True, continue_on_failure=True),
        Step(command="no_such_command", continue_on_failure=True),
    ]
    result = Runner(fake_automation).run(Script(name="all", steps=steps))
    assert len(result.step_results) == 3
    assert result.failed_steps == 3
    assert result.status is TestStatus.FAILED
    assert result.error_message is None
    _assert_counts_consistent(result)


def test_first_step_failure_is_failed(fake_automation) -> None:
    script = Script(name="bad", steps=[Step(command="bogus"), Step(command="find_element", params={"name": "Submit"})])
    result = Runner(fake_automation).run(script)
    assert result.status is TestStatus.FAILED
    assert len(result.step_results) == 1
    assert "Unknown action command: bogus" in result.step_results[0].error_message


def test_empty_script_is_not_run(fake_automation) -> None:
    result = Runner(fake_automation).run(Script(name="empty"))
    assert result.status is TestStatus.NOT_RUN
    assert result.status is not TestStatus.PASSED
    assert result.total_steps == 0
    assert result.step_results == []


def test_overrides_beat_declared_variables(fake_automation) -> None:
    result = Runner(fake_automation).run(_login_script("bob"), {"user": "bob"})
    assert result.status is TestStatus.PASSED
    typed = [args for name, args in fake_automation.calls if name == "type_text"]
    assert typed[0][1] == "bob"
    assert result.step_results[2].actual_value == "bob"


def test_undefined_placeholder_stays_literal(fake_automation) -> None:
    script = Script(
        name="literal",
        steps=[
            Step(command="find_element", params={"automationId": "UserName"}, store_result="box"),
            Step(command="type_text", params={"elementId": "{{box}}", "text": "{{undefinedVar}}"}),
        ],
    )
    result = Runner(fake_automation).run(script)
    assert result.status is TestStatus.PASSED
    typed = [args for name, args in fake_automation.calls if name == "type_text"]
    assert typed[0][1] == "{{undefinedVar}}"


def test_step_results_keep_unresolved_step_copy(fake_automation) -> None:
    script = _login_script()
    result = Runner(fake_automation).run(script)
    recorded = result.step_results[1].step
    assert recorded.params["text"] == "{{user}}"
    assert recorded is not script.steps[1]


def test_store_result_skipped_when_action_returns_nothing(fake_automation) -> None:
    script = Script(
        name="missing",
        steps=[
            Step(command="find_element", params={"automationId": "Nope"}, store_result="el"),
            Step(command="click_element", params={"elementId": "{{el}}"}),
        ],
    )
    runner = Runner(fake_automation)
    result = runner.run(script)
    assert result.step_results[0].status is StepStatus.PASSED
    assert "el" not in runner.variables
    assert result.step_results[1].status is StepStatus.FAILED
    assert "{{el}}" in result.step_results[1].error_message


def test_boolean_assertion_matches_true(fake_automation) -> None:
    script = Script(
        name="exists",
        steps=[Step(command="element_exists", type="assertion", params={"automationId": "SubmitButton"}, expected="true")],
    )
    result = Runner(fake_automation).run(script)
    assert result.status is TestStatus.PASSED
    assert result.step_results[0].actual_value == "true"


def test_boolean_assertion_mismatch_names_both_values(fake_automation) -> None:
    script = Script(
        name="exists",
        steps=[Step(command="element_exists", type="assertion", params={"automationId": "Ghost"}, expected=True)],
    )
    result = Runner(fake_automation).run(script)
    step = result.step_results[0]
    assert step.status is StepStatus.FAILED
    assert step.actual_value == "false"
    assert "'true'" in step.error_message
    assert "'false'" in step.error_message


def test_assertion_uses_custom_message(fake_automation) -> None:
    script = Script(
        name="msg",
        steps=[
            Step(
                command="element_exists",
                type="assertion",
                params={"automationId": "Ghost"},
                expected=True,
                message="Ghost button should be visible",
            )
        ],
    )
    result = Runner(fake_automation).run(script)
    assert result.step_results[0].error_message == "Ghost button should be visible"


def test_assertion_without_expected_fails(fake_automation) -> None:
    script = Script(
        name="noexp",
        steps=[
            Step(command="find_element", params={"name": "Submit"}, store_result="btn"),
            Step(command="get_element_text", type="assertion", params={"elementId": "{{btn}}"}),
        ],
    )
    result = Runner(fake_automation).run(script)
    assert result.step_results[1].status is StepStatus.FAILED
    assert result.step_results[1].actual_value == "Submit"


def test_wait_step_sleeps_for_duration(fake_automation, no_sleep) -> None:
    script = Script(name="wait", steps=[Step(command="wait", type="wait", params={"duration": 250})])
    result = Runner(fake_automation).run(script)
    assert result.status is TestStatus.PASSED
    assert no_sleep == [pytest.approx(0.25)]


def test_wait_step_defaults_from_config(fake_automation, no_sleep) -> None:
    script = Script(name="wait", steps=[Step(command="wait", type="WAIT")])
    Runner(fake_automation, RunnerConfig(default_wait_ms=40)).run(script)
    assert no_sleep == [pytest.approx(0.04)]


def test_unknown_step_type_fails_step(fake_automation) -> None:
    result = Runner(fake_automation).run(Script(name="odd", steps=[Step(command="x", type="teleport")]))
    assert result.step_results[0].status is StepStatus.FAILED
    assert "Unknown step type: teleport" in result.step_results[0].error_message


def test_capability_exception_is_captured(fake_automation) -> None:
    fake_automation.failing.add("launch_app")
    result = Runner(fake_automation).run(
        Script(name="launch", steps=[Step(command="launch_app", params={"path": "C:/app.exe"})])
    )
    assert result.status is TestStatus.FAILED
    assert result.step_results[0].error_message == "launch_app failed"


def test_launch_app_stores_pid(fake_automation) -> None:
    script = Script(
        name="launch",
        steps=[
            Step(command="launch_app", params={"path": "C:/app.exe"}, store_result="pid"),
            Step(command="close_app", params={"pid": "{{pid}}", "force": True}),
        ],
    )
    runner = Runner(fake_automation)
    result = runner.run(script)
    assert result.status is TestStatus.PASSED
    assert runner.variables.get("pid") == "4242"
    assert ("close_app", (4242, True)) in fake_automation.calls


def test_screenshots_are_collected(fake_automation, tmp_path) -> None:
    shot = str(tmp_path / "shot.png")
    result = Runner(fake_automation).run(
        Script(name="shots", steps=[Step(command="take_screenshot", params={"outputPath": shot})])
    )
    assert result.screenshots == [shot]
