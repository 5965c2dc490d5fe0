#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Print inferred schemas in GraphQL schema definition language."""

from __future__ import annotations

import json
from typing import Any

from descriptors import (
    OPAQUE_DESCRIPTION,
    ArgumentDescriptor,
    FieldDescriptor,
    NamedType,
    OpaqueType,
    Schema,
    type_ref,
    unwrap,
)


def format_description(text: str | None, indent: str = "") -> list[str]:
    if not text:
        return []
    body = text.replace('"""', '\\"""')
    if "\n" not in body and not body.endswith('"'):
        return [f'{indent}"""{body}"""']
    lines = [f'{indent}"""']
    lines.extend(f"{indent}{line}" if line else "" for line in body.split("\n"))
    lines.append(f'{indent}"""')
    return lines


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


def format_argument(arg: ArgumentDescriptor) -> str:
    text = f"{arg.name}: {type_ref(arg.type)}"
    if arg.default is not None:
        text += f" = {format_value(arg.default)}"
    return text


def format_field(fdesc: FieldDescriptor) -> list[str]:
    lines = format_description(fdesc.description, "  ")
    args = ""
    if fdesc.args:
        args = "(" + ", ".join(format_argument(arg) for arg in fdesc.args.values()) + ")"
    lines.append(f"  {fdesc.name}{args}: {type_ref(fdesc.type)}")
    return lines


def reachable_types(schema: Schema) -> list[NamedType]:
    """Named types reachable from the roots, in discovery order."""
    ordered: list[NamedType] = []
    seen: set[str] = set()
    pending = [schema.query] + ([schema.mutation] if schema.mutation is not None else [])
    while pending:
        named = pending.pop(0)
        if named.name in seen:
            continue
        seen.add(named.name)
        ordered.append(named)
        for fdesc in named.fields.values():
            refs = [fdesc.type] + [arg.type for arg in fdesc.args.values()]
            for ref in refs:
                inner = unwrap(ref)
                if isinstance(inner, NamedType) and inner.name not in seen:
                    pending.append(inner)
    return ordered


def uses_opaque(types: list[NamedType]) -> bool:
    for named in types:
        for fdesc in named.fields.values():
            if isinstance(unwrap(fdesc.type), OpaqueType):
                return True
    return False


def schema_to_sdl(schema: Schema) -> str:
    """Render a schema as SDL text, roots first."""
    types = reachable_types(schema)
    blocks: list[str] = []
    if uses_opaque(types):
        blocks.append("\n".join(format_description(OPAQUE_DESCRIPTION) + ["scalar JSON"]))
    for named in types:
        keyword = "input" if named.is_input else "type"
        lines = format_description(named.description)
        lines.append(f"{keyword} {named.name} {{")
        for fdesc in named.fields.values():
            lines.extend(format_field(fdesc))
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"
