# tests/test_record_flattener.py
from __future__ import annotations

from functions.sheet_append.record_flattener import flatten


def test_flatten_nested_object_uses_dotted_keys_and_serializes_lists() -> None:
    assert flatten({"a": {"b": 1, "c": [1, 2]}}) == {"a.b": 1, "a.c": "[1,2]"}


def test_flatten_none_returns_empty_record() -> None:
    assert flatten(None) == {}


def test_flatten_empty_object_returns_empty_record() -> None:
    assert flatten({}) == {}


def test_flatten_keeps_scalars_verbatim_including_booleans_and_null() -> None:
    out = flatten({"name": "Kai", "score": 9, "ratio": 0.5, "passed": True, "notes": None})
    assert out == {"name": "Kai", "score": 9, "ratio": 0.5, "passed": True, "notes": None}
    assert out["passed"] is True


def test_flatten_does_not_recurse_into_lists_of_objects() -> None:
    out = flatten({"projects": [{"name": "x", "tags": ["a"]}, {"name": "é"}]})
    assert out == {"projects": '[{"name":"x","tags":["a"]},{"name":"é"}]'}


def test_flatten_deeply_nested_paths() -> None:
    out = flatten({"form": {"projects": {"categories": {"aiml": False, "iot": True}}}})
    assert out == {"form.projects.categories.aiml": False, "form.projects.categories.iot": True}


def test_flatten_preserves_first_appearance_order() -> None:
    out = flatten({"z": 1, "a": {"y": 2, "b": 3}, "m": 4})
    assert list(out) == ["z", "a.y", "a.b", "m"]


def test_flatten_with_prefix() -> None:
    assert flatten({"b": 1}, prefix="a") == {"a.b": 1}


def test_flatten_strips_one_trailing_dot_from_leaf_key() -> None:
    assert flatten({"a.": [1]}) == {"a": "[1]"}


def test_flatten_drops_root_level_scalars_and_lists() -> None:
    assert flatten("text") == {}
    assert flatten([1, 2]) == {}


def test_flatten_is_deterministic_and_does_not_mutate_input() -> None:
    value = {"a": {"b": [1, {"c": 2}]}, "d": None}
    snapshot = {"a": {"b": [1, {"c": 2}]}, "d": None}

    first = flatten(value)
    second = flatten(value)

    assert first == second
    assert value == snapshot
