#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Ready-to-run query suggestions for an inferred schema."""

from __future__ import annotations

from typing import Any

from descriptors import ListType, NamedType, NonNullType, OpaqueType, ScalarType, Schema, TypeDescriptor

MAX_DEPTH = 2
MAX_FIELDS_PER_LEVEL = 8
MAX_ITEM_FIELDS = 6


def strip_non_null(type_: TypeDescriptor) -> TypeDescriptor:
    return type_.of_type if isinstance(type_, NonNullType) else type_


def is_leaf(type_: TypeDescriptor) -> bool:
    return isinstance(strip_non_null(type_), (ScalarType, OpaqueType))


def scalar_field_names(named: NamedType) -> list[str]:
    return [name for name, fdesc in named.fields.items() if is_leaf(fdesc.type)]


def list_element(type_: TypeDescriptor) -> TypeDescriptor | None:
    type_ = strip_non_null(type_)
    if isinstance(type_, ListType):
        return strip_non_null(type_.of_type)
    return None


def depth_limited_query(named: NamedType, max_depth: int, depth: int = 0) -> str | None:
    """Selection of up to MAX_FIELDS_PER_LEVEL fields per level, nesting max_depth deep."""
    parts: list[str] = []
    for name, fdesc in named.fields.items():
        if len(parts) >= MAX_FIELDS_PER_LEVEL:
            break
        type_ = strip_non_null(fdesc.type)
        element = list_element(type_)
        target = element if element is not None else type_
        if is_leaf(target):
            parts.append(name)
        elif isinstance(target, NamedType) and depth < max_depth:
            nested = depth_limited_query(target, max_depth, depth + 1)
            if nested:
                parts.append(f"{name} {nested}")
    return "{ " + " ".join(parts) + " }" if parts else None


def generate_suggestions(schema: Schema) -> list[dict[str, Any]]:
    """Suggested queries: root scalars, list fields, items/_count, a depth-2 query, mutations."""
    suggestions: list[dict[str, Any]] = []
    query = schema.query
    fields = query.fields

    scalars = scalar_field_names(query)[:MAX_FIELDS_PER_LEVEL]
    if scalars:
        suggestions.append(
            {
                "name": "All top-level scalar fields",
                "query": "{ " + " ".join(scalars) + " }",
                "description": f"Returns {', '.join(scalars)}",
            }
        )

    for name, fdesc in fields.items():
        element = list_element(fdesc.type)
        if isinstance(element, NamedType):
            subfields = scalar_field_names(element)[:MAX_FIELDS_PER_LEVEL]
            if subfields:
                suggestions.append(
                    {
                        "name": f"List {name} with basic fields",
                        "query": f"{{ {name} {{ {' '.join(subfields)} }} }}",
                        "description": f"Fetches {', '.join(subfields)} for each item in {name}",
                    }
                )

    if "items" in fields and "_count" in fields:
        element = list_element(fields["items"].type)
        if isinstance(element, NamedType):
            subfields = scalar_field_names(element)[:MAX_ITEM_FIELDS]
            if subfields:
                suggestions.append(
                    {
                        "name": "Items with count",
                        "query": f"{{ items {{ {' '.join(subfields)} }} _count }}",
                        "description": f"Array response: fetches {', '.join(subfields)} with total count",
                    }
                )

    full = depth_limited_query(query, MAX_DEPTH)
    if full:
        suggestions.append(
            {
                "name": f"Full query (depth {MAX_DEPTH})",
                "query": full,
                "description": f"All fields up to {MAX_DEPTH} levels deep, including nested objects",
            }
        )

    if schema.mutation is not None:
        for name, fdesc in schema.mutation.fields.items():
            returned = strip_non_null(fdesc.type)
            selection = None
            if isinstance(returned, NamedType):
                selection = depth_limited_query(returned, 1)
            if not selection:
                continue
            args = "(input: { ... })" if fdesc.args else ""
            suggestions.append(
                {
                    "name": f"Mutation: {name}",
                    "query": f"mutation {{ {name}{args} {selection} }}",
                    "description": f"Write operation returning {selection}",
                }
            )
    return suggestions
