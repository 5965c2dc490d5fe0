#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Turn arbitrary JSON keys into valid, collision-free schema names."""

from __future__ import annotations

import re

SEPARATOR_RE = re.compile(r"[-. ]")
DISALLOWED_RE = re.compile(r"[^_a-zA-Z0-9]")
LEADING_UNDERSCORES_RE = re.compile(r"^_+")
NON_ALNUM_RUN_RE = re.compile(r"[^a-zA-Z0-9]+")
LEADING_DIGIT_RE = re.compile(r"^[0-9]")


def sanitize_field_name(name: str) -> str:
    """Sanitize a JSON key into a valid field name.

    Dashes, dots and spaces become underscores, a leading digit gets an
    underscore prefix and any other disallowed character becomes an
    underscore. Names starting with the reserved double underscore are
    rewritten to start with ``f_``.
    """
    text = SEPARATOR_RE.sub("_", name)
    if LEADING_DIGIT_RE.match(text):
        text = "_" + text
    text = DISALLOWED_RE.sub("_", text)
    text = LEADING_UNDERSCORES_RE.sub(lambda m: "_" if len(m.group(0)) == 1 else "f_", text)
    return text or "f_empty"


def unique_field_name(name: str, used: set[str]) -> str:
    """Return name, or name_2, name_3, ... whichever is not in used yet. Records the result."""
    candidate = name
    counter = 2
    while candidate in used:
        candidate = f"{name}_{counter}"
        counter += 1
    used.add(candidate)
    return candidate


def derive_type_name(method: str, path_template: str) -> str:
    """Type name for an operation, e.g. GET /api/card/{id} -> GET_api_card_id."""
    name = NON_ALNUM_RUN_RE.sub("_", f"{method}_{path_template}").strip("_")
    if LEADING_DIGIT_RE.match(name):
        name = "_" + name
    return name or "Unknown"


def original_key_note(original_key: str) -> str:
    return f"Maps to JSON key {original_key!r}."
