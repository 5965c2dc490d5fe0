#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Estimate output cost of JSON values and size list pages from it."""

from __future__ import annotations

import argparse
import math
from collections import Counter
from typing import Any

from common import DEFAULT_LIMITS, InferenceLimits, base_type, configure_logging, load_json, write_json
from merge import merge_array_samples


def estimate_cost(value: Any, depth: int = 0, limits: InferenceLimits = DEFAULT_LIMITS) -> float:
    """Approximate cost units of a value (roughly one unit per four output characters).

    Lists cost as much as their average sampled element, since every list
    is paged separately at query time.
    """
    if value is None or depth >= limits.max_depth:
        return 1
    if isinstance(value, list):
        sample = value[: limits.cost_sample_size]
        if not sample:
            return 1
        total = sum(estimate_cost(item, depth + 1, limits) for item in sample)
        return max(1, total / len(sample))
    if isinstance(value, dict):
        return max(1, sum(estimate_cost(child, depth + 1, limits) for child in value.values()))
    if isinstance(value, str):
        return math.ceil((len(value) + limits.char_overhead) / limits.chars_per_unit)
    return 1


def item_cost(values: list[Any], depth: int = 0, limits: InferenceLimits = DEFAULT_LIMITS) -> float:
    """Representative cost of one element of values."""
    merged = merge_array_samples(values, limits, depth + 1)
    if merged is not None:
        return max(1, estimate_cost(merged.representative, depth + 1, limits))
    sample = values[: limits.cost_sample_size]
    if not sample:
        return 1
    return max(1, sum(estimate_cost(item, depth + 1, limits) for item in sample) / len(sample))


def dynamic_array_limit(values: list[Any], depth: int = 0, limits: InferenceLimits = DEFAULT_LIMITS) -> int:
    """Default page size for a list so one page stays near the item budget."""
    if not values:
        return limits.max_list_limit
    per_item = item_cost(values, depth, limits)
    limit = math.floor(limits.item_budget / per_item)
    return max(limits.min_list_limit, min(limits.max_list_limit, limit))


def _dominant(samples: list[Any]) -> tuple[str, list[Any]]:
    kinds = Counter(base_type(sample) for sample in samples)
    kind = kinds.most_common(1)[0][0]
    return kind, [sample for sample in samples if base_type(sample) == kind]


def _cost_node(samples: list[Any], depth: int, limits: InferenceLimits) -> dict[str, Any]:
    present = [sample for sample in samples if sample is not None]
    if not present or depth >= limits.max_depth:
        return {"_total": 1}
    kind, typed = _dominant(present)

    if kind == "object":
        node: dict[str, Any] = {}
        keys: dict[str, None] = {}
        for sample in typed:
            keys.update(dict.fromkeys(sample))
        total = 0
        for key in keys:
            child = _cost_node([sample[key] for sample in typed if key in sample], depth + 1, limits)
            node[key] = child
            total += child["_total"]
        node["_total"] = max(1, total)
        return node

    if kind == "array":
        items: list[Any] = []
        for sample in typed:
            items.extend(sample[: limits.cost_sample_size])
        items = items[: limits.sample_size]
        avg_length = sum(len(sample) for sample in typed) / len(typed)
        node = {}
        per_item = 1
        if items:
            per_item = math.ceil(item_cost(items, depth, limits))
            child = _cost_node(items, depth + 1, limits)
            node.update({key: value for key, value in child.items() if not key.startswith("_")})
        node["_perItem"] = per_item
        node["_avgLength"] = round(avg_length, 1)
        node["_total"] = max(1, math.ceil(per_item * avg_length))
        return node

    average = sum(estimate_cost(sample, depth, limits) for sample in typed) / len(typed)
    return {"_total": max(1, math.ceil(average))}


def compute_field_costs(value: Any, depth: int = 0, limits: InferenceLimits = DEFAULT_LIMITS) -> dict[str, Any]:
    """Per-field cost tree mirroring the structure of value.

    Every node has ``_total``; array nodes also carry ``_perItem`` and
    ``_avgLength`` (mean length over the sampled occurrences of that array).
    Element fields of arrays of objects appear as children of the array
    node. Costs of list elements are per element.
    """
    return _cost_node([value], depth, limits)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Report estimated output cost per JSON field.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--item-budget", type=int, default=DEFAULT_LIMITS.item_budget, help="Cost budget per list page.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    limits = InferenceLimits(item_budget=args.item_budget)
    result: dict[str, Any] = {"costs": compute_field_costs(data, limits=limits)}
    if isinstance(data, list):
        result["default_limit"] = dynamic_array_limit(data, limits=limits)
    write_json(result, compact=args.compact)


if __name__ == "__main__":
    main()
