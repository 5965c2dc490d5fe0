#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Build a queryable schema from a JSON response."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from common import (
    DEFAULT_LIMITS,
    WRITE_METHODS,
    InferenceLimits,
    configure_logging,
    js_string,
    load_json,
    write_json,
)
from cost import dynamic_array_limit
from descriptors import (
    BOOLEAN,
    FLOAT,
    INT,
    JSON,
    STRING,
    ArgumentDescriptor,
    FieldDescriptor,
    ListType,
    NamedType,
    NonNullType,
    OpaqueType,
    Schema,
    TypeDescriptor,
    page_args,
    type_ref,
    unwrap,
)
from infer import infer_type
from merge import has_mixed_types
from sanitize import derive_type_name, original_key_note, sanitize_field_name, unique_field_name
from sdl import schema_to_sdl

INPUT_SCALARS: dict[str, TypeDescriptor] = {
    "string": STRING,
    "integer": INT,
    "number": FLOAT,
    "boolean": BOOLEAN,
}


def build_array_root(data: list[Any], base_name: str, registry: dict[str, NamedType], limits: InferenceLimits) -> NamedType:
    if data and has_mixed_types(data, limits):
        items_type: TypeDescriptor = ListType(JSON, dynamic_array_limit(data, limits=limits))
    else:
        # The root list sits one level above its items; start there so items begin at depth 0.
        items_type = infer_type(data, base_name, registry, None, -1, limits)
    return NamedType(
        "Query",
        {
            "items": FieldDescriptor(
                "items",
                None,
                items_type,
                "Elements of the response array.",
                args=page_args(items_type),
                resolver=lambda source: source,
            ),
            "_count": FieldDescriptor("_count", None, INT, "Length of the response array before paging.", resolver=len),
        },
    )


def build_input_type(
    properties: dict[str, Any],
    type_name: str,
    registry: dict[str, NamedType],
    depth: int = 0,
    limits: InferenceLimits = DEFAULT_LIMITS,
) -> NamedType:
    """Input object type from request-body property descriptors.

    A name already taken by an output type gets a numeric suffix.
    """
    type_name = unique_field_name(type_name, set(registry))
    named = NamedType(type_name, is_input=True)
    registry[type_name] = named
    used: set[str] = set()
    for key, prop in properties.items():
        prop = prop if isinstance(prop, dict) else {}
        name = unique_field_name(sanitize_field_name(key), used)
        input_type = input_property_type(prop, f"{type_name}_{name}", registry, depth + 1, limits)
        if prop.get("required"):
            input_type = NonNullType(input_type)
        notes = [text for text in (prop.get("description"), original_key_note(key) if name != key else None) if text]
        named.fields[name] = FieldDescriptor(name, key, input_type, " ".join(notes) or None)
    return named


def input_property_type(
    prop: dict[str, Any],
    type_name: str,
    registry: dict[str, NamedType],
    depth: int,
    limits: InferenceLimits = DEFAULT_LIMITS,
) -> TypeDescriptor:
    kind = prop.get("type")
    if kind in INPUT_SCALARS:
        return INPUT_SCALARS[kind]
    if depth >= limits.max_input_depth:
        return JSON
    if kind == "object":
        nested = prop.get("properties")
        if isinstance(nested, dict) and nested:
            return build_input_type(nested, type_name, registry, depth, limits)
        return JSON
    if kind == "array":
        items = prop.get("items")
        if isinstance(items, dict) and items.get("type"):
            return ListType(input_property_type(items, f"{type_name}_Item", registry, depth, limits))
        return ListType(JSON)
    return STRING


def build_mutation_root(
    method: str,
    base_name: str,
    request_body: dict[str, Any],
    query: NamedType,
    registry: dict[str, NamedType],
    limits: InferenceLimits,
) -> NamedType:
    properties = request_body.get("properties") or {}
    args: dict[str, ArgumentDescriptor] = {}
    if properties:
        input_type = build_input_type(properties, f"{base_name}_Input", registry, 0, limits)
        args["input"] = ArgumentDescriptor("input", input_type)
    name = f"{method.lower()}_{base_name}"
    return NamedType(
        "Mutation",
        {name: FieldDescriptor(name, None, query, args=args, resolver=lambda source: source)},
    )


def build_schema(
    data: Any,
    method: str,
    path_template: str,
    request_body: dict[str, Any] | None = None,
    limits: InferenceLimits = DEFAULT_LIMITS,
) -> Schema:
    """Infer a schema for one response.

    Object responses expose their fields at the root, array responses are
    wrapped as ``items``/``_count`` and scalars as ``value``. Write methods
    with a request body shape also get a ``Mutation`` root whose single
    field returns the query root.
    """
    method = method.upper()
    base_name = derive_type_name(method, path_template)
    registry: dict[str, NamedType] = {}

    if isinstance(data, list):
        query = build_array_root(data, base_name, registry, limits)
    elif isinstance(data, dict):
        response_type = infer_type(data, base_name, registry, None, 0, limits)
        query = NamedType("Query", dict(response_type.fields) if isinstance(response_type, NamedType) else {})
        if not query.fields:
            query.fields["value"] = FieldDescriptor("value", None, JSON, resolver=lambda source: source)
    else:
        query = NamedType("Query", {"value": FieldDescriptor("value", None, STRING, resolver=js_string)})
    registry["Query"] = query

    mutation = None
    if method in WRITE_METHODS and request_body is not None:
        mutation = build_mutation_root(method, base_name, request_body, query, registry, limits)
        registry["Mutation"] = mutation
    return Schema(query, mutation, registry, base_name, method, path_template)


def collect_opaque_fields(schema: Schema) -> list[str]:
    """Dotted paths of every raw-JSON field reachable from the query root."""
    paths: list[str] = []

    def walk(named: NamedType, prefix: str, seen: frozenset[str]) -> None:
        for fdesc in named.fields.values():
            path = f"{prefix}.{fdesc.name}" if prefix else fdesc.name
            inner = unwrap(fdesc.type)
            if isinstance(inner, OpaqueType):
                paths.append(path)
            elif isinstance(inner, NamedType) and inner.name not in seen:
                walk(inner, path, seen | {inner.name})

    walk(schema.query, "", frozenset({schema.query.name}))
    return paths


def describe(schema: Schema) -> dict[str, Any]:
    """JSON-friendly summary of the types in a schema."""
    types: dict[str, Any] = {}
    for name, named in schema.types.items():
        types[name] = {
            "kind": "input" if named.is_input else "object",
            "fields": {
                fname: {"type": type_ref(fdesc.type), "key": fdesc.original_key}
                for fname, fdesc in named.fields.items()
            },
        }
    return {
        "base_name": schema.base_name,
        "has_mutation": schema.mutation is not None,
        "types": types,
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Show the inferred schema for a JSON response.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--method", default="GET", help="HTTP method the response came from.")
    parser.add_argument("--path", default="/", help="Path template the response came from.")
    parser.add_argument("--body-shape", help="JSON file describing the request body properties.")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_LIMITS.max_depth, help="Maximum nesting depth to type.")
    parser.add_argument("--sample-size", type=int, default=DEFAULT_LIMITS.sample_size, help="Array elements to sample.")
    parser.add_argument("--json", action="store_true", help="Emit a JSON summary instead of SDL.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    body = json.loads(Path(args.body_shape).read_text(encoding="utf-8")) if args.body_shape else None
    limits = InferenceLimits(max_depth=args.max_depth, sample_size=args.sample_size)
    schema = build_schema(data, args.method, args.path, body, limits)
    if args.json:
        write_json(describe(schema), compact=args.compact)
    else:
        sys.stdout.write(schema_to_sdl(schema))


if __name__ == "__main__":
    main()
