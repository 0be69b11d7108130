from __future__ import annotations

from ui_scripting.automation.util import format_value, parse_bool, parse_int, sanitize_name
from ui_scripting.automation.variables import VariableStore


def test_override_wins_over_declared() -> None:
    store = VariableStore({"x": "1", "y": "keep"}, {"x": 2})
    assert store.resolve_text("{{x}}-{{y}}") == "2-keep"


def test_unknown_placeholder_is_left_verbatim() -> None:
    store = VariableStore({"known": "v"})
    assert store.resolve_text("{{known}} {{undefinedVar}}") == "v {{undefinedVar}}"


def test_resolve_stringifies_every_value() -> None:
    store = VariableStore({"n": "7"})
    resolved = store.resolve(
        {"none": None, "flag": True, "off": False, "count": 3, "items": [1, 2], "ref": "#{{n}}"}
    )
    assert resolved == {
        "none": "",
        "flag": "true",
        "off": "false",
        "count": "3",
        "items": "[1, 2]",
        "ref": "#7",
    }


def test_set_makes_value_visible_to_later_resolution() -> None:
    store = VariableStore()
    assert store.resolve_text("{{pid}}") == "{{pid}}"
    store.set("pid", 99)
    assert "pid" in store
    assert store.resolve_text("{{pid}}") == "99"
    assert store.as_dict() == {"pid": "99"}


def test_parse_helpers_fall_back_to_defaults() -> None:
    assert parse_bool("YES") is True
    assert parse_bool("off") is False
    assert parse_bool("maybe", None) is None
    assert parse_int(" 12 ") == 12
    assert parse_int("twelve", 5) == 5
    assert format_value({"a": 1}) == '{"a": 1}'


def test_sanitize_name_collapses_illegal_characters() -> None:
    assert sanitize_name("a/b") == "a_b"
    assert sanitize_name("a//b") == "a_b"
    assert sanitize_name('re:port*"v2"') == "re_port_v2"
    assert sanitize_name("trailing...") == "trailing"
    assert sanitize_name("") == ""
