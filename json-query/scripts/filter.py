#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Pull nested values out of JSON with a dot path."""

from __future__ import annotations

import argparse
from typing import Any

from common import configure_logging, load_json, parse_path, write_json


def walk(data: Any, segments: list[str], index: int = 0) -> Any:
    if index >= len(segments):
        return data
    if data is None:
        return None
    segment = segments[index]
    if segment == "[]":
        if not isinstance(data, list):
            return None
        return [walk(item, segments, index + 1) for item in data]
    if not isinstance(data, dict) or segment not in data:
        return None
    return walk(data[segment], segments, index + 1)


def apply_json_filter(data: Any, expression: str) -> Any:
    """Apply a dot path such as 'data[].name' to data.

    '[]' maps the rest of the path over every element of an array and may
    appear several times; a leading '[]' applies to a top-level array. A
    path that does not match yields None; an empty expression returns the
    data unchanged.
    """
    if not expression:
        return data
    return walk(data, parse_path(expression))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Extract nested values from JSON with a dot path.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--path", required=True, help='Dot path, "[]" maps over arrays. Example: "data[].name"')
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    write_json(apply_json_filter(data, args.path), compact=args.compact)


if __name__ == "__main__":
    main()
