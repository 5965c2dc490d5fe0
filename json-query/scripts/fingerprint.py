#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Reduce JSON to a canonical shape string and a short hash of it."""

from __future__ import annotations

import argparse
import hashlib
import json
from typing import Any

from common import DEFAULT_LIMITS, InferenceLimits, configure_logging, is_integral, load_json, write_json
from merge import has_mixed_types, merge_array_samples


def shape_fingerprint(value: Any, depth: int = 0, limits: InferenceLimits = DEFAULT_LIMITS) -> str:
    """Canonical shape of value: keys and coarse types, never the values themselves.

    Object keys are sorted and JSON-quoted, so key order does not matter and
    keys containing separators cannot mimic other shapes. Arrays are
    represented by the shape of their merged sample, so two arrays with
    the same element shape match regardless of length.
    """
    if value is None:
        return "n"
    if depth >= limits.max_depth:
        return "J"
    if isinstance(value, list):
        if not value:
            return "[]"
        if has_mixed_types(value, limits):
            return "[J]"
        merged = merge_array_samples(value, limits, depth + 1)
        element = merged.representative if merged is not None else value[0]
        return f"[{shape_fingerprint(element, depth + 1, limits)}]"
    if isinstance(value, dict):
        parts = [
            f"{json.dumps(key, ensure_ascii=False)}:{shape_fingerprint(value[key], depth + 1, limits)}"
            for key in sorted(value)
        ]
        return "{" + ",".join(parts) + "}"
    if isinstance(value, bool):
        return "b"
    if is_integral(value):
        return "i"
    if isinstance(value, float):
        return "f"
    return "s"


def compute_shape_hash(value: Any, limits: InferenceLimits = DEFAULT_LIMITS) -> str:
    """First hex characters of the SHA-256 of the shape fingerprint."""
    digest = hashlib.sha256(shape_fingerprint(value, limits=limits).encode("utf-8")).hexdigest()
    return digest[: limits.hash_length]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print the structural fingerprint and shape hash of JSON.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    write_json({"fingerprint": shape_fingerprint(data), "shape_hash": compute_shape_hash(data)}, compact=args.compact)


if __name__ == "__main__":
    main()
