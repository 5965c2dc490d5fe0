from __future__ import annotations

from common import InferenceLimits
from merge import has_mixed_types, merge_array_samples, merge_samples


def test_merge_unions_keys_across_samples() -> None:
    merged = merge_samples([{"a": 1, "b": "x"}, {"a": 2, "c": True}])
    assert list(merged.representative) == ["a", "b", "c"]
    assert merged.representative["a"] == 1
    assert merged.representative["c"] is True
    assert merged.conflicts == set()


def test_majority_type_wins_without_conflict() -> None:
    items = [{"v": f"s{i}"} for i in range(8)] + [{"v": i} for i in range(2)]
    merged = merge_samples(items)
    assert merged.representative["v"] == "s0"
    assert merged.conflicts == set()


def test_no_majority_marks_conflict_and_keeps_first_value() -> None:
    items = [{"v": 1}, {"v": 2}, {"v": 3}, {"v": True}, {"v": False}, {"v": True}] + [{"v": "x"}] * 4
    merged = merge_samples(items)
    assert merged.conflicts == {"v"}
    assert merged.representative["v"] == 1


def test_nested_conflicts_are_dotted_paths() -> None:
    merged = merge_samples([{"owner": {"id": 1, "name": "a"}}, {"owner": {"id": "u-2", "name": "b"}}])
    assert merged.conflicts == {"owner.id"}
    assert merged.representative["owner"]["name"] == "a"


def test_all_null_key_stays_null() -> None:
    merged = merge_samples([{"a": None}, {"a": None}])
    assert merged.representative == {"a": None}


def test_first_non_empty_array_is_kept() -> None:
    merged = merge_samples([{"tags": []}, {"tags": ["a", "b"]}])
    assert merged.representative["tags"] == ["a", "b"]


def test_ints_and_floats_share_a_base_type() -> None:
    merged = merge_samples([{"n": 1}, {"n": 2.5}])
    assert merged.conflicts == set()


def test_has_mixed_types_ignores_nulls() -> None:
    assert has_mixed_types([1, "a"])
    assert not has_mixed_types([1, None, 2])
    assert not has_mixed_types([])


def test_merge_array_samples_needs_objects() -> None:
    assert merge_array_samples([1, 2, 3]) is None
    assert merge_array_samples([]) is None


def test_only_the_first_samples_are_merged() -> None:
    limits = InferenceLimits(sample_size=2)
    merged = merge_array_samples([{"a": 1}, {"b": 2}, {"late": 3}], limits)
    assert merged is not None
    assert "late" not in merged.representative


def test_deeply_nested_samples_stop_merging_at_the_depth_cap() -> None:
    value: dict = {"n": 1}
    for _ in range(700):
        value = {"n": value}
    merged = merge_array_samples([value, value])
    assert merged is not None
    assert merged.conflicts == set()
    assert isinstance(merged.representative["n"], dict)
