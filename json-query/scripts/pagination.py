#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Spot pagination cursors and next-page links in response data."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl, urlsplit

# (key path, hint field, label, candidate query parameter names)
CURSOR_PATTERNS: list[tuple[tuple[str, ...], str, str, tuple[str, ...]]] = [
    (("meta", "page", "after"), "cursor", "meta.page.after", ("page[cursor]", "page[after]", "cursor", "after")),
    (("meta", "page", "cursor"), "cursor", "meta.page.cursor", ("page[cursor]", "cursor")),
    (("paging", "cursors", "after"), "cursor", "paging.cursors.after", ("after", "cursor")),
    (("pagination", "next_cursor"), "cursor", "pagination.next_cursor", ("cursor", "next_cursor")),
    (("next_cursor",), "cursor", "next_cursor", ("cursor", "next_cursor")),
    (("cursor",), "cursor", "cursor", ("cursor",)),
    (("nextPageToken",), "nextPageToken", "nextPageToken", ("pageToken", "page_token")),
    (("next_page_token",), "nextPageToken", "next_page_token", ("page_token", "pageToken")),
    (("links", "next"), "nextUrl", "links.next", ()),
    (("_links", "next", "href"), "nextUrl", "_links.next.href", ()),
    (("has_more",), "hasMore", "has_more", ()),
    (("hasMore",), "hasMore", "hasMore", ()),
]

PAGINATION_PARAM_NAMES = frozenset(
    {
        "page", "cursor", "after", "before", "limit", "offset", "per_page",
        "page_size", "pageSize", "page_token", "pageToken", "next_page_token",
        "page[cursor]", "page[after]", "page[before]", "page[size]", "page[number]",
        "page[offset]", "page[limit]", "starting_after", "ending_before",
        "start_cursor", "next_cursor",
    }
)


def walk_keys(data: Any, keys: tuple[str, ...]) -> Any:
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def resolve_param_name(candidates: tuple[str, ...], query_params: list[str] | None = None) -> str | None:
    """Pick the candidate the endpoint actually accepts, else the first candidate."""
    if not candidates:
        return None
    if query_params:
        accepted = set(query_params)
        for candidate in candidates:
            if candidate in accepted:
                return candidate
    return candidates[0]


def next_url_params(url: str) -> dict[str, str]:
    try:
        return dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    except ValueError:
        return {}


def detect_pagination(data: Any, query_params: list[str] | None = None) -> dict[str, Any] | None:
    """Pagination hint for an object response, or None when nothing looks like paging.

    query_params are the query parameter names the endpoint accepts; they
    decide which parameter name the cursor should be sent back as.
    """
    if not isinstance(data, dict):
        return None

    found: dict[str, Any] = {}
    hints: list[str] = []
    next_params: dict[str, str] = {}
    for keys, target, label, candidates in CURSOR_PATTERNS:
        if target in found:
            continue
        value = walk_keys(data, keys)
        if value is None:
            continue
        if target == "hasMore":
            if isinstance(value, bool):
                found["hasMore"] = value
                hints.append(f"'{label}' = {'true' if value else 'false'}")
            continue
        if not isinstance(value, str) or not value:
            continue
        found[target] = value
        if target == "nextUrl":
            next_params.update(next_url_params(value))
            hints.append(f"'{label}' contains the full URL for the next page")
        else:
            param = resolve_param_name(candidates, query_params)
            if param:
                next_params[param] = value
            hints.append(f"Use '{label}' value as cursor parameter for the next page")

    if not hints:
        return None
    if next_params:
        found["nextParams"] = next_params
        found["_hint"] = (
            "Pagination detected. To fetch the next page, repeat the request with the same method and path, "
            f"adding these parameters: {json.dumps(next_params)}"
        )
    else:
        found["_hint"] = f"Pagination detected: {'; '.join(hints)}."
    return found
