#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Merge sampled array elements into one representative object shape."""

from __future__ import annotations

import argparse
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from common import DEFAULT_LIMITS, InferenceLimits, base_type, configure_logging, load_json, write_json


@dataclass
class MergeResult:
    """Representative object plus the keys whose sampled types disagree.

    Nested conflicts are reported as dotted paths relative to the merged
    object, e.g. ``"owner.id"``.
    """

    representative: dict[str, Any]
    conflicts: set[str] = field(default_factory=set)


def sample_values(values: list[Any], limits: InferenceLimits = DEFAULT_LIMITS) -> list[Any]:
    return values[: limits.sample_size]


def has_mixed_types(values: list[Any], limits: InferenceLimits = DEFAULT_LIMITS) -> bool:
    """True when sampled non-null elements span more than one base type."""
    seen = {base_type(value) for value in sample_values(values, limits)}
    seen.discard("null")
    return len(seen) > 1


def _pick(observations: list[Any], kind: str, limits: InferenceLimits, depth: int) -> tuple[Any, set[str]]:
    """Representative for one key given every non-null observation of one base type."""
    typed = [value for value in observations if base_type(value) == kind]
    if kind == "object":
        if len(typed) == 1:
            return typed[0], set()
        nested = merge_samples(typed, limits, depth + 1)
        return nested.representative, nested.conflicts
    if kind == "array":
        # Arrays are not merged element-wise; the first non-empty one wins.
        for value in typed:
            if value:
                return value, set()
    return typed[0], set()


def merge_samples(
    items: list[dict[str, Any]], limits: InferenceLimits = DEFAULT_LIMITS, depth: int = 0
) -> MergeResult:
    """Merge object samples key by key, resolving type conflicts by majority.

    At or past the depth cap the first sample is returned unmerged; the
    inferencer types anything that deep as raw JSON anyway.
    """
    if depth >= limits.max_depth:
        return MergeResult(items[0] if items else {})
    observed: dict[str, list[Any]] = {}
    for item in items:
        for key, value in item.items():
            bucket = observed.setdefault(key, [])
            if value is not None:
                bucket.append(value)

    representative: dict[str, Any] = {}
    conflicts: set[str] = set()
    for key, values in observed.items():
        if not values:
            representative[key] = None
            continue
        counts = Counter(base_type(value) for value in values)
        if len(counts) == 1:
            winner = base_type(values[0])
        else:
            winner, hits = counts.most_common(1)[0]
            if hits / len(values) < limits.majority_threshold:
                representative[key] = values[0]
                conflicts.add(key)
                continue
        chosen, nested = _pick(values, winner, limits, depth)
        representative[key] = chosen
        conflicts.update(f"{key}.{path}" for path in nested)
    return MergeResult(representative, conflicts)


def merge_array_samples(
    values: list[Any], limits: InferenceLimits = DEFAULT_LIMITS, depth: int = 0
) -> MergeResult | None:
    """Merge the object elements among the first samples, or None if there are none."""
    objects = [value for value in sample_values(values, limits) if isinstance(value, dict)]
    if not objects:
        return None
    return merge_samples(objects, limits, depth)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Merge sampled records of a JSON array into one shape.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--sample-size", type=int, default=DEFAULT_LIMITS.sample_size, help="Records to sample.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    records = data if isinstance(data, list) else [data]
    limits = InferenceLimits(sample_size=args.sample_size)
    merged = merge_array_samples(records, limits)
    if merged is None:
        write_json({"representative": None, "conflicts": []}, compact=args.compact)
        return
    write_json(
        {"representative": merged.representative, "conflicts": sorted(merged.conflicts)},
        compact=args.compact,
    )


if __name__ == "__main__":
    main()
