#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Keep query results inside an approximate token budget."""

from __future__ import annotations

import json
import math
from typing import Any

DEFAULT_BUDGET = 4000
DEFAULT_ARRAY_LIMIT = 50


def estimate_tokens(value: Any) -> int:
    """Roughly one token per four characters of compact JSON."""
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return 1
    return max(1, math.ceil(len(text) / 4))


def find_primary_array_key(obj: Any) -> str | None:
    """Key of the main list in a result: 'items' first, else the first list not starting with '_'."""
    if not isinstance(obj, dict):
        return None
    if isinstance(obj.get("items"), list):
        return "items"
    for key, value in obj.items():
        if not key.startswith("_") and isinstance(value, list):
            return key
    return None


def find_primary_array(obj: Any) -> list[Any] | None:
    key = find_primary_array_key(obj)
    return obj[key] if key is not None else None


def truncate_if_array(data: Any, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
    """Slice a raw array to [offset, offset + limit) and report what was dropped."""
    if not isinstance(data, list):
        return {"data": data, "truncated": False, "total": None}
    start = offset or 0
    size = DEFAULT_ARRAY_LIMIT if limit is None else limit
    sliced = data[start : start + size]
    return {"data": sliced, "truncated": len(sliced) < len(data), "total": len(data)}


def truncate_to_token_budget(obj: dict[str, Any], budget: int) -> tuple[dict[str, Any], int, int]:
    """Cut the primary array so the whole object fits the budget.

    Returns the (possibly new) object with the original and kept item
    counts. At least one item is always kept.
    """
    key = find_primary_array_key(obj)
    if key is None or not obj[key]:
        return obj, 0, 0
    items = obj[key]
    original = len(items)

    overhead = {name: value for name, value in obj.items() if name != key}
    array_budget = max(1, budget - estimate_tokens(overhead))
    if estimate_tokens(items) <= array_budget:
        return obj, original, original

    lo, hi, best = 1, original, 1
    while lo <= hi:
        mid = (lo + hi) // 2
        if estimate_tokens(items[:mid]) <= array_budget:
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return {**obj, key: items[:best]}, original, best


def build_status_message(result: Any, budget: int = DEFAULT_BUDGET) -> tuple[str, Any]:
    """Status line plus the result, truncated when it would exceed the budget."""
    if not isinstance(result, dict):
        return "COMPLETE", result

    if estimate_tokens(result) <= budget:
        items = find_primary_array(result)
        status = f"COMPLETE ({len(items)} items)" if items is not None else "COMPLETE"
        return status, result

    truncated, original, kept = truncate_to_token_budget(result, budget)
    if original == 0:
        return f"COMPLETE (response exceeds token budget {budget} - select fewer fields)", result
    return (
        f"TRUNCATED - {kept} of {original} items (token budget {budget}). "
        "Select fewer fields to fit more items.",
        truncated,
    )
