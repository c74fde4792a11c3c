"""
Tests for walking schemas against values.
"""

from datetime import timedelta

import pytest
from pydantic import BaseModel

from mapval import (
    VALID_VR,
    Compose,
    Each,
    IsAll,
    IsAny,
    IsDuration,
    IsEqual,
    IsIntGt,
    IsNil,
    IsStringContaining,
    KeyMissing,
    KeyPresent,
    Lax,
    MapNode,
    Optional,
    SliceNode,
    Strict,
    Validator,
    compile,
    to_node,
    validate,
)
from mapval.types import STRICT_FAILURE_VR


def _failed_paths(results):
    return sorted({e.path for e in results.errors()})


class TestToNode:
    def test_dict(self):
        node = to_node({"a": 1, "b": {"c": str}})
        assert isinstance(node, MapNode)
        assert node.strict is None
        assert isinstance(node.fields["b"], MapNode)

    def test_list(self):
        node = to_node([1, 2])
        assert isinstance(node, SliceNode)
        assert len(node.items) == 2

    def test_strict_requires_map(self):
        with pytest.raises(TypeError):
            Strict([1, 2])

    def test_strict_and_lax(self):
        assert Strict({"a": 1}).strict is True
        assert Lax({"a": 1}).strict is False


class TestMaps:
    def test_lax_scenario(self):
        results = validate({"a": IsEqual(1), "b": KeyMissing}, {"a": 1, "c": 2})
        assert results.valid
        assert results.fields == {"a": (VALID_VR,), "b": (VALID_VR,)}

    def test_strict_scenario(self):
        results = validate(Strict({"a": IsEqual(1), "b": KeyMissing}), {"a": 1, "c": 2})
        assert not results.valid
        assert results.fields["a"] == (VALID_VR,)
        assert results.fields["b"] == (VALID_VR,)
        assert results.fields["c"] == (STRICT_FAILURE_VR,)
        assert "unexpected" in results.fields["c"][0].message

    def test_strict_argument(self):
        results = validate({"a": 1}, {"a": 1, "c": 2}, strict=True)
        assert _failed_paths(results) == ["c"]

    def test_nested_paths(self):
        schema = {"a": {"b": {"c": IsEqual("x")}}}
        results = validate(schema, {"a": {"b": {"c": "y"}}})
        assert not results.valid
        assert _failed_paths(results) == ["a.b.c"]

    def test_collects_every_failure(self):
        schema = {
            "a": 1,
            "b": {"c": 2, "d": IsNil},
            "e": IsStringContaining("foo"),
        }
        actual = {"a": 0, "b": {"c": 0, "d": "x"}, "e": 42}
        results = validate(schema, actual)
        assert _failed_paths(results) == ["a", "b.c", "b.d", "e"]

    def test_missing_key(self):
        results = validate({"a": IsEqual(1)}, {})
        assert [str(e) for e in results.errors()] == [
            "@path 'a': expected this key to be present"
        ]

    def test_key_present_with_none(self):
        assert validate({"a": KeyPresent}, {"a": None}).valid
        assert not validate({"a": KeyPresent}, {}).valid

    def test_key_missing_never_sees_value(self):
        assert validate({"a": KeyMissing}, {}).valid
        assert not validate({"a": KeyMissing}, {"a": None}).valid

    def test_none_is_a_value(self):
        assert validate({"a": IsNil}, {"a": None}).valid
        assert not validate({"a": IsNil}, {}).valid

    def test_optional_key(self):
        schema = {"a": Optional(IsIntGt(0))}
        assert validate(schema, {}).valid
        assert validate(schema, {"a": 1}).valid
        assert not validate(schema, {"a": 0}).valid

    def test_expected_map(self):
        results = validate({"a": {"b": 1}}, {"a": "nope"})
        assert [str(e) for e in results.errors()] == [
            "@path 'a': expected a map, got type str"
        ]

    def test_missing_nested_map(self):
        results = validate({"a": {"b": 1}, "c": 2}, {"c": 3})
        assert _failed_paths(results) == ["a", "c"]
        assert results.fields["a"][0].message == "expected this key to be present"

    def test_strict_inherited_by_nested_levels(self):
        schema = Strict({"a": {"b": 1}})
        results = validate(schema, {"a": {"b": 1, "x": 2}, "y": 3})
        assert _failed_paths(results) == ["a.x", "y"]

    def test_lax_overrides_strict_parent(self):
        schema = Strict({"a": Lax({"b": 1})})
        results = validate(schema, {"a": {"b": 1, "x": 2}})
        assert results.valid

    def test_strict_nested_level_only(self):
        schema = {"a": Strict({"b": 1})}
        results = validate(schema, {"a": {"b": 1, "x": 2}, "y": 3})
        assert _failed_paths(results) == ["a.x"]

    def test_pydantic_model_as_map(self):
        class Monitor(BaseModel):
            id: str
            status: str

        results = validate({"id": "m1", "status": "up"}, Monitor(id="m1", status="down"))
        assert _failed_paths(results) == ["status"]

    def test_type_schema(self):
        assert validate({"a": int}, {"a": 1}).valid
        assert not validate({"a": int}, {"a": "1"}).valid

    def test_duration(self):
        assert validate({"rtt": IsDuration}, {"rtt": timedelta(milliseconds=5)}).valid

    def test_all_of_absent_key(self):
        assert validate({"a": IsAll(KeyMissing)}, {}).valid
        assert validate({"a": KeyMissing & Optional(IsIntGt(0))}, {}).valid
        assert not validate({"a": IsAll(KeyMissing)}, {"a": 1}).valid

    def test_empty_key_paths(self):
        results = validate({"": {"x": 1}}, {"": {"x": 2}})
        assert _failed_paths(results) == [".x"]

    def test_empty_key_strict_paths(self):
        results = validate(Strict({"a": {}}), {"a": {"": 1}})
        assert _failed_paths(results) == ["a."]


class TestSequences:
    def test_positional(self):
        results = validate({"a": [1, {"b": 2}]}, {"a": [1, {"b": 3}]})
        assert _failed_paths(results) == ["a.1.b"]

    def test_length_mismatch(self):
        results = validate({"a": [1, 2, 3]}, {"a": [1, 9]})
        assert not results.valid
        assert results.fields["a"][0].message == "expected 3 elements, got 2"
        assert _failed_paths(results) == ["a", "a.1"]

    def test_longer_actual(self):
        results = validate({"a": [1]}, {"a": [1, 2]})
        assert results.fields["a"][0].message == "expected 1 elements, got 2"
        assert results.fields["a.0"] == (VALID_VR,)

    def test_expected_list(self):
        results = validate({"a": [1]}, {"a": {"0": 1}})
        assert results.fields["a"][0].message == "expected a list, got type dict"

    def test_string_is_not_a_list(self):
        assert not validate({"a": ["x"]}, {"a": "x"}).valid

    def test_missing_list(self):
        results = validate({"a": [1]}, {})
        assert _failed_paths(results) == ["a"]

    def test_each(self):
        schema = {"items": Each({"id": IsIntGt(0)})}
        results = validate(schema, {"items": [{"id": 1}, {"id": 0}, {}]})
        assert _failed_paths(results) == ["items.1.id", "items.2.id"]

    def test_each_length_bounds(self):
        schema = {"tags": Each(str, min_length=1, max_length=2)}
        assert validate(schema, {"tags": ["a"]}).valid
        too_short = validate(schema, {"tags": []})
        assert too_short.fields["tags"][0].message == "List too short: 0 < 1"
        too_long = validate(schema, {"tags": ["a", "b", "c"]})
        assert too_long.fields["tags"][0].message == "List too long: 3 > 2"

    def test_root_sequence(self):
        results = validate([1, 2], [1, 3])
        assert _failed_paths(results) == ["1"]


class TestValidator:
    def test_compile(self):
        v = compile({"a": 1})
        assert isinstance(v, Validator)
        assert v({"a": 1}).valid
        assert not v({"a": 2}).valid

    def test_compile_validator(self):
        v = compile({"a": 1})
        assert compile(v) is v
        assert compile(v, strict=True).strict is True

    def test_nested_compiled_schema(self):
        inner = compile({"b": 1})
        assert validate({"a": inner}, {"a": {"b": 1}}).valid
        results = validate({"a": inner}, {"a": {"b": 2}})
        assert _failed_paths(results) == ["a.b"]

    def test_nested_compiled_schema_keeps_strict(self):
        inner = compile({"b": 1}, strict=True)
        results = validate({"a": inner}, {"a": {"b": 1, "c": 2}, "d": 3})
        assert _failed_paths(results) == ["a.c"]

    def test_nested_compose_rejected(self):
        with pytest.raises(TypeError):
            compile({"a": Compose({"b": 1})})

    def test_root_leaf(self):
        results = validate(IsStringContaining("foo"), "foobar")
        assert results.fields == {"": (VALID_VR,)}

    def test_runs_are_independent(self):
        v = compile(Strict({"a": IsAny(1, 2)}))
        first = v({"a": 3, "b": 1})
        second = v({"a": 1})
        assert not first.valid
        assert second.valid
        assert second.fields == {"a": (VALID_VR,)}


class TestCompose:
    def test_merges_results(self):
        check = Compose({"a": 1}, compile({"b": 2}))
        results = check({"a": 1, "b": 3})
        assert set(results.fields) == {"a", "b"}
        assert _failed_paths(results) == ["b"]

    def test_same_path_accumulates(self):
        check = Compose({"a": IsIntGt(0)}, {"a": IsIntGt(5)})
        results = check({"a": 3})
        assert len(results.fields["a"]) == 2
        assert not results.valid
        assert len(results.errors()) == 1
