from __future__ import annotations

from pagination import PAGINATION_PARAM_NAMES, detect_pagination, resolve_param_name


def test_next_cursor() -> None:
    hint = detect_pagination({"data": [], "next_cursor": "abc"})
    assert hint["cursor"] == "abc"
    assert hint["nextParams"] == {"cursor": "abc"}
    assert '{"cursor": "abc"}' in hint["_hint"]


def test_cursor_parameter_follows_endpoint_params() -> None:
    hint = detect_pagination({"next_cursor": "abc"}, ["next_cursor", "limit"])
    assert hint["nextParams"] == {"next_cursor": "abc"}

    hint = detect_pagination({"meta": {"page": {"after": "z"}}}, ["page[after]"])
    assert hint["nextParams"] == {"page[after]": "z"}


def test_next_page_token() -> None:
    hint = detect_pagination({"items": [], "nextPageToken": "t1"})
    assert hint["nextPageToken"] == "t1"
    assert hint["nextParams"] == {"pageToken": "t1"}


def test_next_link_query_is_parsed() -> None:
    hint = detect_pagination({"links": {"next": "https://api.test/v1/users?page=2&per_page=10"}})
    assert hint["nextUrl"] == "https://api.test/v1/users?page=2&per_page=10"
    assert hint["nextParams"] == {"page": "2", "per_page": "10"}


def test_has_more_alone() -> None:
    hint = detect_pagination({"has_more": True, "data": []})
    assert hint["hasMore"] is True
    assert "nextParams" not in hint
    assert hint["_hint"] == "Pagination detected: 'has_more' = true."


def test_nothing_to_detect() -> None:
    assert detect_pagination({"id": 1}) is None
    assert detect_pagination([{"next_cursor": "abc"}]) is None
    assert detect_pagination({"next_cursor": ""}) is None
    assert detect_pagination({"has_more": "yes"}) is None


def test_resolve_param_name() -> None:
    assert resolve_param_name(("cursor", "after"), ["after"]) == "after"
    assert resolve_param_name(("cursor", "after"), None) == "cursor"
    assert resolve_param_name((), ["after"]) is None
    assert "page[cursor]" in PAGINATION_PARAM_NAMES
