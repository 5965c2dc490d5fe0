#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Type descriptors for schemas inferred from JSON data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Union


@dataclass(frozen=True)
class ScalarType:
    name: str


@dataclass(frozen=True)
class OpaqueType:
    """Arbitrary JSON passed through untouched."""

    name: str = "JSON"


@dataclass(frozen=True)
class ListType:
    of_type: "TypeDescriptor"
    # Page size used when the query gives no explicit limit; None for input lists.
    default_limit: int | None = None


@dataclass(frozen=True)
class NonNullType:
    of_type: "TypeDescriptor"


@dataclass(frozen=True)
class ArgumentDescriptor:
    name: str
    type: "TypeDescriptor"
    default: Any = None


@dataclass(eq=False)
class FieldDescriptor:
    """One exposed field and the JSON key it reads from."""

    name: str
    original_key: str | None
    type: "TypeDescriptor"
    description: str | None = None
    conflict: bool = False
    args: dict[str, ArgumentDescriptor] = field(default_factory=dict)
    resolver: Callable[[Any], Any] | None = None

    def resolve(self, source: Any) -> Any:
        if self.resolver is not None:
            return self.resolver(source)
        if isinstance(source, dict):
            return source.get(self.original_key)
        return None


@dataclass(eq=False)
class NamedType:
    """Object (or input object) type, interned by name in a registry."""

    name: str
    fields: dict[str, FieldDescriptor] = field(default_factory=dict)
    description: str | None = None
    is_input: bool = False


TypeDescriptor = Union[ScalarType, OpaqueType, ListType, NonNullType, NamedType]

STRING = ScalarType("String")
INT = ScalarType("Int")
FLOAT = ScalarType("Float")
BOOLEAN = ScalarType("Boolean")
JSON = OpaqueType()

OPAQUE_DESCRIPTION = "Arbitrary JSON value (mixed types, deep nesting, or heterogeneous structures)"


def unwrap(type_: TypeDescriptor) -> TypeDescriptor:
    """Strip non-null and list wrappers down to the innermost type."""
    while isinstance(type_, (ListType, NonNullType)):
        type_ = type_.of_type
    return type_


def type_ref(type_: TypeDescriptor) -> str:
    """Render a type reference the way it appears in SDL, e.g. [Item]!."""
    if isinstance(type_, NonNullType):
        return f"{type_ref(type_.of_type)}!"
    if isinstance(type_, ListType):
        return f"[{type_ref(type_.of_type)}]"
    return type_.name


@dataclass(frozen=True, eq=False)
class Schema:
    """Inferred schema for one operation and response shape. Read-only once built."""

    query: NamedType
    mutation: NamedType | None
    types: dict[str, NamedType]
    base_name: str
    method: str
    path_template: str


def page_args(type_: TypeDescriptor) -> dict[str, ArgumentDescriptor]:
    """limit/offset arguments for output list fields; nothing for other types."""
    if not isinstance(type_, ListType):
        return {}
    return {
        "limit": ArgumentDescriptor("limit", INT, type_.default_limit),
        "offset": ArgumentDescriptor("offset", INT, 0),
    }
