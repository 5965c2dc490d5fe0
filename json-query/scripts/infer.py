#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Infer type descriptors from JSON values."""

from __future__ import annotations

from typing import Any

from common import DEFAULT_LIMITS, InferenceLimits, is_integral
from cost import dynamic_array_limit
from descriptors import (
    BOOLEAN,
    FLOAT,
    INT,
    JSON,
    STRING,
    FieldDescriptor,
    ListType,
    NamedType,
    TypeDescriptor,
    page_args,
)
from merge import has_mixed_types, merge_array_samples
from sanitize import original_key_note, sanitize_field_name, unique_field_name

CONFLICT_NOTE = "Sampled values disagree on the type of this field; returned as raw JSON."


def infer_scalar_type(value: Any) -> TypeDescriptor:
    if isinstance(value, bool):
        return BOOLEAN
    if is_integral(value):
        return INT
    if isinstance(value, float):
        return FLOAT
    return STRING


def scoped_conflicts(conflicts: set[str] | None, key: str) -> set[str] | None:
    """Conflict paths below key, relative to it ("owner.id" -> "id" for key "owner")."""
    if not conflicts:
        return None
    prefix = f"{key}."
    nested = {path[len(prefix) :] for path in conflicts if path.startswith(prefix)}
    return nested or None


def infer_list_type(
    values: list[Any],
    type_name: str,
    registry: dict[str, NamedType],
    depth: int,
    limits: InferenceLimits = DEFAULT_LIMITS,
) -> TypeDescriptor:
    if not values:
        return ListType(JSON, limits.max_list_limit)
    if has_mixed_types(values, limits):
        return JSON

    item_name = f"{type_name}_Item"
    merged = merge_array_samples(values, limits, depth + 1)
    if merged is not None:
        element = infer_type(merged.representative, item_name, registry, merged.conflicts, depth + 1, limits)
    else:
        first = next((value for value in values if value is not None), None)
        element = infer_type(first, item_name, registry, None, depth + 1, limits)
    return ListType(element, dynamic_array_limit(values, depth, limits))


def infer_object_type(
    value: dict[str, Any],
    type_name: str,
    registry: dict[str, NamedType],
    conflicts: set[str] | None,
    depth: int,
    limits: InferenceLimits = DEFAULT_LIMITS,
) -> NamedType:
    existing = registry.get(type_name)
    if existing is not None:
        return existing

    # Registered before the fields are walked so self-references resolve to it.
    named = NamedType(type_name)
    registry[type_name] = named

    if not value:
        named.fields = {"_empty": FieldDescriptor("_empty", None, STRING, "Placeholder for an empty object.")}
        return named

    used: set[str] = set()
    fields: dict[str, FieldDescriptor] = {}
    for key, child in value.items():
        name = unique_field_name(sanitize_field_name(key), used)
        note = original_key_note(key) if name != key else None
        if conflicts and key in conflicts:
            description = f"{note} {CONFLICT_NOTE}" if note else CONFLICT_NOTE
            fields[name] = FieldDescriptor(name, key, JSON, description, conflict=True)
            continue
        child_type = infer_type(
            child, f"{type_name}_{name}", registry, scoped_conflicts(conflicts, key), depth + 1, limits
        )
        fields[name] = FieldDescriptor(name, key, child_type, note, args=page_args(child_type))
    named.fields = fields
    return named


def infer_type(
    value: Any,
    type_name: str,
    registry: dict[str, NamedType],
    conflicts: set[str] | None = None,
    depth: int = 0,
    limits: InferenceLimits = DEFAULT_LIMITS,
) -> TypeDescriptor:
    """Recursively infer a type descriptor for a JSON value.

    Objects become named types registered under ``type_name``; nested
    objects are named ``<type_name>_<field>`` and list elements
    ``<type_name>_Item``. Anything past ``limits.max_depth``, mixed-type
    arrays and fields listed in ``conflicts`` fall back to opaque JSON.
    Never raises for JSON input.
    """
    if value is None:
        return STRING
    if depth >= limits.max_depth:
        return JSON
    if isinstance(value, list):
        return infer_list_type(value, type_name, registry, depth, limits)
    if isinstance(value, dict):
        return infer_object_type(value, type_name, registry, conflicts, depth, limits)
    return infer_scalar_type(value)
