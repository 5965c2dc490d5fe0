from __future__ import annotations

from descriptors import BOOLEAN, FLOAT, INT, JSON, STRING, ListType, NamedType
from infer import infer_type


def test_scalar_fields() -> None:
    registry: dict[str, NamedType] = {}
    named = infer_type({"id": 1, "name": "x", "score": 1.5, "ok": True, "gone": None, "whole": 2.0}, "T", registry)
    assert isinstance(named, NamedType)
    types = {name: fdesc.type for name, fdesc in named.fields.items()}
    assert types == {"id": INT, "name": STRING, "score": FLOAT, "ok": BOOLEAN, "gone": STRING, "whole": INT}
    assert registry["T"] is named


def test_list_of_objects_gets_item_type_and_page_args() -> None:
    registry: dict[str, NamedType] = {}
    named = infer_type({"users": [{"id": 1}, {"id": 2}]}, "T", registry)
    users = named.fields["users"]
    assert isinstance(users.type, ListType)
    assert isinstance(users.type.of_type, NamedType)
    assert users.type.of_type.name == "T_users_Item"
    assert users.type.default_limit == 50
    assert users.args["limit"].default == 50
    assert users.args["offset"].default == 0
    assert "T_users_Item" in registry


def test_mixed_and_empty_lists() -> None:
    named = infer_type({"mixed": [1, "a"], "empty": []}, "T", {})
    assert named.fields["mixed"].type == JSON
    assert named.fields["empty"].type == ListType(JSON, 50)


def test_empty_object_gets_placeholder_field() -> None:
    named = infer_type({"meta": {}}, "T", {})
    meta = named.fields["meta"].type
    assert isinstance(meta, NamedType)
    assert list(meta.fields) == ["_empty"]


def test_majority_type_is_used() -> None:
    items = [{"v": f"s{i}"} for i in range(8)] + [{"v": i} for i in range(2)]
    named = infer_type({"rows": items}, "T", {})
    item = named.fields["rows"].type.of_type
    assert item.fields["v"].type == STRING
    assert not item.fields["v"].conflict


def test_conflicting_field_becomes_json() -> None:
    items = [{"v": 1}, {"v": 2}, {"v": 3}, {"v": True}, {"v": False}, {"v": True}] + [{"v": "x"}] * 4
    named = infer_type({"rows": items}, "T", {})
    field = named.fields["rows"].type.of_type.fields["v"]
    assert field.type == JSON
    assert field.conflict
    assert "raw JSON" in field.description


def test_nested_conflicts_are_scoped_to_their_object() -> None:
    items = [{"owner": {"id": 1, "id2": 1}}, {"owner": {"id": "u", "id2": 2}}]
    named = infer_type({"rows": items}, "T", {})
    owner = named.fields["rows"].type.of_type.fields["owner"].type
    assert owner.fields["id"].type == JSON
    assert owner.fields["id2"].type == INT


def test_depth_cap_yields_json() -> None:
    value: object = "leaf"
    for _ in range(10):
        value = {"n": value}
    current = infer_type(value, "T", {})
    for _ in range(7):
        current = current.fields["n"].type
        assert isinstance(current, NamedType)
    assert current.fields["n"].type == JSON


def test_sanitized_collisions_keep_original_keys() -> None:
    named = infer_type({"my-field": 1, "my_field": 2}, "T", {})
    assert list(named.fields) == ["my_field", "my_field_2"]
    assert named.fields["my_field"].original_key == "my-field"
    assert named.fields["my_field"].description == "Maps to JSON key 'my-field'."
    assert named.fields["my_field_2"].original_key == "my_field"


def test_registered_name_is_reused() -> None:
    registry: dict[str, NamedType] = {}
    first = infer_type({"a": 1}, "T", registry)
    second = infer_type({"b": "x"}, "T", registry)
    assert first is second
    assert list(second.fields) == ["a"]


def test_top_level_null_is_string() -> None:
    assert infer_type(None, "T", {}) == STRING
