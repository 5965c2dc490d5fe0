from __future__ import annotations

from budget import (
    build_status_message,
    estimate_tokens,
    find_primary_array,
    find_primary_array_key,
    truncate_if_array,
    truncate_to_token_budget,
)


def test_estimate_tokens() -> None:
    # '{"a":1}' is seven characters
    assert estimate_tokens({"a": 1}) == 2
    assert estimate_tokens("") == 1


def test_primary_array_prefers_items() -> None:
    assert find_primary_array_key({"data": [1], "items": [2]}) == "items"
    assert find_primary_array_key({"_meta": [1], "data": [2]}) == "data"
    assert find_primary_array_key({"a": 1}) is None
    assert find_primary_array_key([1]) is None
    assert find_primary_array({"rows": [1, 2]}) == [1, 2]


def test_truncate_if_array() -> None:
    result = truncate_if_array(list(range(100)))
    assert len(result["data"]) == 50
    assert result["truncated"] is True
    assert result["total"] == 100

    result = truncate_if_array(list(range(100)), limit=10, offset=95)
    assert result["data"] == [95, 96, 97, 98, 99]

    result = truncate_if_array([1, 2], limit=10)
    assert result == {"data": [1, 2], "truncated": False, "total": 2}

    assert truncate_if_array({"a": 1}) == {"data": {"a": 1}, "truncated": False, "total": None}


def test_status_for_results_within_budget() -> None:
    assert build_status_message({"items": [1, 2], "_count": 2}) == ("COMPLETE (2 items)", {"items": [1, 2], "_count": 2})
    assert build_status_message({"id": 1}) == ("COMPLETE", {"id": 1})
    assert build_status_message([1, 2]) == ("COMPLETE", [1, 2])


def test_truncation_keeps_a_prefix_within_budget() -> None:
    result = {"items": [{"text": "x" * 100, "n": i} for i in range(100)], "_count": 100}
    status, truncated = build_status_message(result, budget=500)
    kept = len(truncated["items"])
    assert status.startswith(f"TRUNCATED - {kept} of 100 items (token budget 500)")
    assert 0 < kept < 100
    assert truncated["items"] == result["items"][:kept]
    assert truncated["_count"] == 100
    assert estimate_tokens(truncated["items"]) <= 500
    assert len(result["items"]) == 100


def test_truncation_keeps_at_least_one_item() -> None:
    obj = {"items": [{"text": "x" * 400}, {"text": "y" * 400}]}
    truncated, original, kept = truncate_to_token_budget(obj, 10)
    assert (original, kept) == (2, 1)
    assert truncated["items"] == obj["items"][:1]


def test_oversized_result_without_array() -> None:
    result = {"text": "x" * 1000}
    status, same = build_status_message(result, budget=10)
    assert status.startswith("COMPLETE (response exceeds token budget 10")
    assert same is result
