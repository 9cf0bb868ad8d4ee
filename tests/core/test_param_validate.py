"""Unit tests for param validation: check_params."""

from apiverifier.core.param_spec import parse_param
from apiverifier.core.param_validate import check_params


def _defs(**specs: object) -> dict:
    return {name: parse_param(spec) for name, spec in specs.items()}


# --- required ---


def test_required_missing_reports_not_set() -> None:
    errors = check_params(_defs(name="string"), {})
    assert errors == {"name": {"type": "string", "error": "not set"}}


def test_required_empty_list_reports_not_set() -> None:
    errors = check_params(_defs(ids="integer[]"), {"ids": []})
    assert errors["ids"]["error"] == "not set"


def test_optional_missing_is_fine() -> None:
    assert check_params(_defs(age="integer(18)"), {}) == {}


def test_all_present_is_fine() -> None:
    defs = _defs(name="string", flag="boolean")
    assert check_params(defs, {"name": "x", "flag": False}) == {}


# --- bounds ---


def test_string_min_length() -> None:
    defs = _defs(name={"type": "string", "min": 3})
    assert check_params(defs, {"name": "ab"}) == {
        "name": {"type": "string", "error": "value below min value", "min": 3}
    }
    assert check_params(defs, {"name": "abcd"}) == {}


def test_string_max_length() -> None:
    defs = _defs(name={"type": "string", "max": 4})
    errors = check_params(defs, {"name": "abcdef"})
    assert errors["name"] == {"type": "string", "error": "value exceeds max value", "max": 4}


def test_number_bounds() -> None:
    defs = _defs(score={"type": "number", "min": 1, "max": 10})
    assert check_params(defs, {"score": 5.0}) == {}
    assert check_params(defs, {"score": 11.0})["score"]["max"] == 10
    assert check_params(defs, {"score": 0.5})["score"]["min"] == 1


def test_number_zero_is_not_bounds_checked() -> None:
    defs = _defs(score={"type": "number", "min": 1})
    assert check_params(defs, {"score": 0.0}) == {}


def test_integer_is_not_bounds_checked() -> None:
    defs = _defs(count={"type": "integer", "max": 1})
    assert check_params(defs, {"count": 100}) == {}


def test_array_bounds_apply_per_element() -> None:
    defs = _defs(tags={"type": "string", "array": True, "max": 3})
    assert check_params(defs, {"tags": ["a", "abc"]}) == {}
    assert check_params(defs, {"tags": ["a", "abcd"]})["tags"]["error"] == "value exceeds max value"


def test_min_overrides_max_when_both_violated() -> None:
    # min < max misconfiguration: both checks fail, the later min check wins
    defs = _defs(name={"type": "string", "min": 10, "max": 2})
    errors = check_params(defs, {"name": "abcde"})
    assert errors["name"] == {"type": "string", "error": "value below min value", "min": 10}


# --- custom validate ---


def test_validate_hook_short_circuits_builtin_checks() -> None:
    calls = []

    def no_admins(value, name, definition):
        calls.append((value, name, definition.type.value))
        return "reserved name" if value == "admin" else None

    defs = _defs(name={"type": "string", "min": 1, "max": 10, "validate": no_admins})
    assert check_params(defs, {"name": "admin"}) == {
        "name": {"type": "string", "error": "reserved name"}
    }
    assert check_params(defs, {"name": "alice"}) == {}
    assert calls == [("admin", "name", "string"), ("alice", "name", "string")]


def test_validate_hook_replaces_required_check() -> None:
    defs = _defs(name={"type": "string", "validate": lambda value, name, definition: None})
    assert check_params(defs, {}) == {}


def test_errors_collected_for_every_param() -> None:
    defs = _defs(a="string", b="integer", c="number(1)")
    errors = check_params(defs, {"c": 2.0})
    assert set(errors) == {"a", "b"}
