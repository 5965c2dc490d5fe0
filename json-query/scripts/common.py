#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Shared helpers for json-query scripts."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

WRITE_METHODS = frozenset({"POST", "PUT", "DELETE", "PATCH"})


@dataclass(frozen=True)
class InferenceLimits:
    """Tuned heuristics for sampling, inference and cost sizing.

    The values are empirical. They are grouped here so a caller can trade
    output size against schema precision without touching the algorithms.
    """

    sample_size: int = 50
    cost_sample_size: int = 10
    max_depth: int = 8
    max_input_depth: int = 6
    majority_threshold: float = 0.6
    chars_per_unit: int = 4
    char_overhead: int = 10
    item_budget: int = 200
    min_list_limit: int = 3
    max_list_limit: int = 50
    hash_length: int = 12


DEFAULT_LIMITS = InferenceLimits()


def load_json(path: str | None) -> Any:
    """Load JSON from a file path or stdin when path is '-' or None."""
    if not path or path == "-":
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")
    return json.loads(text)


def write_json(data: Any, compact: bool = False) -> None:
    """Write JSON to stdout with deterministic formatting."""
    if compact:
        json.dump(data, sys.stdout, ensure_ascii=False, separators=(",", ":"))
    else:
        json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr so stdout stays machine readable."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def parse_path(path: str) -> list[str]:
    """Split a dot path into keys, with '[]' standing for 'every element'."""
    segments: list[str] = []
    current = ""
    i = 0
    while i < len(path):
        char = path[i]
        if char == "[" and path[i + 1 : i + 2] == "]":
            if current:
                segments.append(current)
                current = ""
            segments.append("[]")
            i += 2
            continue
        if char == ".":
            if current:
                segments.append(current)
                current = ""
        else:
            current += char
        i += 1
    if current:
        segments.append(current)
    return segments


def is_integral(value: Any) -> bool:
    """True for ints and for floats holding a whole number (JSON has one number type)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def type_name(value: Any) -> str:
    """Map python value to a JSON-like type name."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if is_integral(value):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def base_type(value: Any) -> str:
    """Coarse type used for conflict detection; ints and floats are both 'number'."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "string"


def js_string(value: Any) -> str:
    """Render a scalar the way a JavaScript String() call would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_integral(value):
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)
