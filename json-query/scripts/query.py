#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Run field-selection queries against JSON through its inferred schema."""

from __future__ import annotations

import argparse
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from budget import DEFAULT_ARRAY_LIMIT, DEFAULT_BUDGET, build_status_message, truncate_if_array
from cache import SchemaCache
from common import DEFAULT_LIMITS, InferenceLimits, configure_logging, is_integral, js_string, load_json, write_json
from descriptors import (
    FieldDescriptor,
    ListType,
    NamedType,
    NonNullType,
    OpaqueType,
    ScalarType,
    Schema,
    TypeDescriptor,
    type_ref,
    unwrap,
)
from filter import apply_json_filter

OPERATION_RE = re.compile(r"^(query|mutation|subscription|fragment)\b")
TOKEN_RE = re.compile(
    r"""
    (?P<skip>[\s,\ufeff]+|\#[^\n\r]*)
    | (?P<spread>\.\.\.)
    | (?P<punct>[{}()\[\]:!$=@|&])
    | (?P<number>-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?)
    | (?P<string>"(?:[^"\\\n\r]|\\.)*")
    | (?P<name>[_A-Za-z][_0-9A-Za-z]*)
    """,
    re.VERBOSE,
)
MAX_NESTING = 64


class QueryError(ValueError):
    """A selection that cannot be parsed or resolved against the schema."""

    def __init__(self, message: str, path: tuple[str, ...] = (), available: list[str] | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.available = available or []


@dataclass
class Token:
    kind: str
    text: str
    pos: int


@dataclass
class Selection:
    name: str
    alias: str | None = None
    arguments: dict[str, Any] = field(default_factory=dict)
    selections: list["Selection"] | None = None

    @property
    def response_key(self) -> str:
        return self.alias or self.name


@dataclass
class Operation:
    kind: str
    name: str | None
    selections: list[Selection]


def normalize_query(text: str) -> str:
    """Wrap a bare selection like 'id name' in braces."""
    stripped = text.strip()
    if OPERATION_RE.match(stripped) or stripped.startswith("{"):
        return stripped
    return f"{{ {stripped} }}"


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if not match:
            raise QueryError(f"Syntax error: unexpected character {text[pos]!r} at position {pos}.")
        kind = match.lastgroup or "skip"
        if kind != "skip":
            tokens.append(Token(kind, match.group(0), pos))
        pos = match.end()
    return tokens


class Parser:
    """Recursive-descent parser for a single query or mutation operation.

    Supports aliases, arguments with literal values and nested selection
    sets. Fragments, variables and directives are rejected, and so is
    nesting (selection sets or literal lists/objects) deeper than
    MAX_NESTING levels.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0
        self.depth = 0

    def peek(self) -> Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def at(self, text: str) -> bool:
        token = self.peek()
        return token is not None and token.text == text and token.kind in ("punct", "name")

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise QueryError("Syntax error: unexpected end of query.")
        self.index += 1
        return token

    def expect(self, text: str) -> Token:
        token = self.advance()
        if token.text != text:
            raise QueryError(f"Syntax error: expected {text!r} but found {token.text!r} at position {token.pos}.")
        return token

    def expect_name(self) -> str:
        token = self.advance()
        if token.kind != "name":
            raise QueryError(f"Syntax error: expected a field name but found {token.text!r} at position {token.pos}.")
        return token.text

    def descend(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise QueryError("Syntax error: selection nested too deeply.")

    def reject_unsupported(self) -> None:
        token = self.peek()
        if token is None:
            return
        if token.kind == "spread":
            raise QueryError("Fragments are not supported; list the fields explicitly.")
        if token.text == "@":
            raise QueryError("Directives are not supported.")
        if token.text == "$":
            raise QueryError("Variables are not supported; inline argument values instead.")

    def parse(self) -> Operation:
        kind, name = "query", None
        token = self.peek()
        if token is not None and token.kind == "name":
            if token.text == "fragment":
                raise QueryError("Fragments are not supported; list the fields explicitly.")
            if token.text == "subscription":
                raise QueryError("Subscriptions are not supported.")
            kind = self.advance().text
            next_token = self.peek()
            if next_token is not None and next_token.kind == "name":
                name = self.advance().text
            if self.at("("):
                raise QueryError("Variables are not supported; inline argument values instead.")
            self.reject_unsupported()
        selections = self.parse_selection_set()
        if self.peek() is not None:
            trailing = self.peek()
            if trailing is not None and trailing.text == "fragment":
                raise QueryError("Fragments are not supported; list the fields explicitly.")
            raise QueryError("Only a single operation per query is supported.")
        return Operation(kind, name, selections)

    def parse_selection_set(self) -> list[Selection]:
        self.expect("{")
        self.descend()
        selections: list[Selection] = []
        while not self.at("}"):
            if self.peek() is None:
                raise QueryError("Syntax error: unclosed '{' in query.")
            selections.append(self.parse_selection())
        self.expect("}")
        self.depth -= 1
        if not selections:
            raise QueryError("Syntax error: empty selection set '{ }'.")
        return selections

    def parse_selection(self) -> Selection:
        self.reject_unsupported()
        name = self.expect_name()
        selection = Selection(name)
        if self.at(":"):
            self.advance()
            selection.alias = name
            selection.name = self.expect_name()
        if self.at("("):
            selection.arguments = self.parse_arguments()
        self.reject_unsupported()
        if self.at("{"):
            selection.selections = self.parse_selection_set()
        return selection

    def parse_arguments(self) -> dict[str, Any]:
        self.expect("(")
        arguments: dict[str, Any] = {}
        while not self.at(")"):
            self.reject_unsupported()
            name = self.expect_name()
            if name in arguments:
                raise QueryError(f"Argument {name!r} given more than once.")
            self.expect(":")
            arguments[name] = self.parse_value()
        self.expect(")")
        return arguments

    def parse_value(self) -> Any:
        self.reject_unsupported()
        token = self.advance()
        if token.kind == "number":
            return float(token.text) if any(c in token.text for c in ".eE") else int(token.text)
        if token.kind == "string":
            try:
                return json.loads(token.text)
            except json.JSONDecodeError as err:
                raise QueryError(f"Syntax error: invalid string literal at position {token.pos}: {err.msg}.") from err
        if token.kind == "name":
            return {"true": True, "false": False, "null": None}.get(token.text, token.text)
        if token.text == "[":
            self.descend()
            items = []
            while not self.at("]"):
                if self.peek() is None:
                    raise QueryError("Syntax error: unclosed '[' in argument value.")
                items.append(self.parse_value())
            self.expect("]")
            self.depth -= 1
            return items
        if token.text == "{":
            self.descend()
            fields: dict[str, Any] = {}
            while not self.at("}"):
                key = self.expect_name()
                self.expect(":")
                fields[key] = self.parse_value()
            self.expect("}")
            self.depth -= 1
            return fields
        raise QueryError(f"Syntax error: unexpected {token.text!r} at position {token.pos}.")


def parse_query(text: str) -> Operation:
    return Parser(normalize_query(text)).parse()


def dotted(path: tuple[str, ...]) -> str:
    return ".".join(path) or "<root>"


def serialize_scalar(scalar: ScalarType, value: Any) -> Any:
    """Coerce a raw value to its field's scalar type where that is lossless.

    Values whose observed type differs from the sampled one (objects in a
    String field, say) are passed through unchanged.
    """
    if value is None or isinstance(value, (dict, list)):
        return value
    if scalar.name == "String":
        return value if isinstance(value, str) else js_string(value)
    if scalar.name == "Int" and (isinstance(value, bool) or is_integral(value)):
        return int(value)
    if scalar.name == "Boolean" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return value


def coerce_input(value: Any, type_: TypeDescriptor, path: tuple[str, ...]) -> Any:
    """Check an argument literal against an input type."""
    if isinstance(type_, NonNullType):
        if value is None:
            raise QueryError(f"Argument {dotted(path)} of type {type_ref(type_)} must not be null.", path)
        return coerce_input(value, type_.of_type, path)
    if value is None or isinstance(type_, OpaqueType):
        return value
    if isinstance(type_, ListType):
        items = value if isinstance(value, list) else [value]
        return [coerce_input(item, type_.of_type, path) for item in items]
    if isinstance(type_, NamedType):
        if not isinstance(value, dict):
            raise QueryError(f"Argument {dotted(path)} expects an object of type {type_.name}.", path)
        unknown = [key for key in value if key not in type_.fields]
        if unknown:
            raise QueryError(
                f"Field {unknown[0]!r} is not defined by input type {type_.name}.",
                path,
                list(type_.fields),
            )
        coerced: dict[str, Any] = {}
        for name, fdesc in type_.fields.items():
            if name in value:
                coerced[fdesc.original_key or name] = coerce_input(value[name], fdesc.type, path + (name,))
            elif isinstance(fdesc.type, NonNullType):
                raise QueryError(f"Required input field {name!r} of {type_.name} was not provided.", path + (name,))
        return coerced
    valid = {
        "String": isinstance(value, str),
        "Int": is_integral(value) and not isinstance(value, float),
        "Float": isinstance(value, (int, float)) and not isinstance(value, bool),
        "Boolean": isinstance(value, bool),
    }.get(type_.name, True)
    if not valid:
        raise QueryError(f"Argument {dotted(path)} expects {type_.name}, got {value!r}.", path)
    return value


def resolve_arguments(owner: NamedType, fdesc: FieldDescriptor, selection: Selection, path: tuple[str, ...]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name, raw in selection.arguments.items():
        arg = fdesc.args.get(name)
        if arg is None:
            raise QueryError(
                f'Unknown argument "{name}" on field "{owner.name}.{fdesc.name}".',
                path,
                list(fdesc.args),
            )
        values[name] = coerce_input(raw, arg.type, path + (name,))
    for name, arg in fdesc.args.items():
        if values.get(name) is None and arg.default is not None:
            values[name] = arg.default
    for name in ("limit", "offset"):
        if name in values and values[name] < 0:
            raise QueryError(f"Argument {name} on {dotted(path)} must not be negative.", path)
    return values


def check_selection(type_: TypeDescriptor, selection: Selection, path: tuple[str, ...]) -> None:
    inner = unwrap(type_)
    if isinstance(inner, OpaqueType) and selection.selections is not None:
        raise QueryError(
            f"Field {dotted(path)} is raw JSON ({type_ref(type_)}) and cannot have a selection of subfields; "
            "request it without braces.",
            path,
        )
    if isinstance(inner, ScalarType) and selection.selections is not None:
        raise QueryError(f"Field {dotted(path)} of type {type_ref(type_)} must not have a selection of subfields.", path)
    if isinstance(inner, NamedType) and selection.selections is None:
        raise QueryError(
            f"Field {dotted(path)} of type {type_ref(type_)} must have a selection of subfields, "
            f"e.g. {selection.name} {{ {' '.join(list(inner.fields)[:3])} }}.",
            path,
            list(inner.fields),
        )


def complete_value(
    type_: TypeDescriptor,
    value: Any,
    selection: Selection,
    path: tuple[str, ...],
    page: tuple[int | None, int] | None = None,
) -> Any:
    if isinstance(type_, NonNullType):
        type_ = type_.of_type
    if value is None or isinstance(type_, OpaqueType):
        return value
    if isinstance(type_, ListType):
        items = value if isinstance(value, list) else [value]
        limit, offset = page if page is not None else (type_.default_limit, 0)
        window = items[offset : offset + limit] if limit is not None else items[offset:]
        return [complete_value(type_.of_type, item, selection, path) for item in window]
    if isinstance(type_, NamedType):
        return execute_selections(type_, value, selection.selections or [], path)
    return serialize_scalar(type_, value)


def execute_selections(named: NamedType, source: Any, selections: list[Selection], path: tuple[str, ...]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for selection in selections:
        child_path = path + (selection.response_key,)
        if selection.name == "__typename":
            result[selection.response_key] = named.name
            continue
        fdesc = named.fields.get(selection.name)
        if fdesc is None:
            raise QueryError(
                f'Cannot query field "{selection.name}" on type "{named.name}". '
                f"Available fields: {', '.join(named.fields)}.",
                child_path,
                list(named.fields),
            )
        check_selection(fdesc.type, selection, child_path)
        args = resolve_arguments(named, fdesc, selection, child_path)
        page = None
        if isinstance(fdesc.type, ListType):
            page = (args.get("limit", fdesc.type.default_limit), args.get("offset", 0))
        result[selection.response_key] = complete_value(fdesc.type, fdesc.resolve(source), selection, child_path, page)
    return result


def execute_query(schema: Schema, data: Any, query_text: str) -> dict[str, Any]:
    """Resolve a selection query against raw data through its inferred schema.

    Bare selections (``id name``) are wrapped in braces. List fields are
    paged by their ``limit``/``offset`` arguments, defaulting to the page
    size inferred for that list. Raises ``QueryError`` on malformed text,
    unknown fields or selections beneath raw-JSON fields; the input data is
    never modified.
    """
    operation = parse_query(query_text)
    root = schema.query
    if operation.kind == "mutation":
        if schema.mutation is None:
            raise QueryError(
                "This operation has no mutation type; use a plain selection query instead.",
                available=list(schema.query.fields),
            )
        root = schema.mutation
    return execute_selections(root, data, operation.selections, ())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Select fields from JSON with a GraphQL-style query.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--query", required=True, help='Selection query. Example: "{ items { id name } _count }"')
    parser.add_argument("--method", default="GET", help="HTTP method the response came from.")
    parser.add_argument("--path", default="/", help="Path template the response came from.")
    parser.add_argument("--body-shape", help="JSON file describing the request body properties.")
    parser.add_argument("--limit", type=int, help="Slice a top-level array to this many elements before querying.")
    parser.add_argument("--offset", type=int, help="Elements of a top-level array to skip before querying.")
    parser.add_argument("--json-filter", help='Dot path applied to the query result. Example: "items[].id"')
    parser.add_argument("--max-tokens", type=int, default=DEFAULT_BUDGET, help="Approximate token budget for the result.")
    parser.add_argument("--item-budget", type=int, default=DEFAULT_LIMITS.item_budget, help="Cost budget per list page.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    body = json.loads(Path(args.body_shape).read_text(encoding="utf-8")) if args.body_shape else None
    cache = SchemaCache(InferenceLimits(item_budget=args.item_budget))
    lookup = cache.get(data, args.method, args.path, body)

    sliced: dict[str, Any] = {"data": data, "truncated": False, "total": None}
    if args.limit is not None or args.offset is not None:
        sliced = truncate_if_array(data, args.limit, args.offset)
    try:
        result: Any = execute_query(lookup.schema, sliced["data"], args.query)
    except QueryError as err:
        write_json({"error": str(err), "path": list(err.path), "available": err.available}, compact=args.compact)
        raise SystemExit(1) from err
    if sliced["truncated"]:
        result["_meta"] = {
            "total": sliced["total"],
            "offset": args.offset or 0,
            "limit": args.limit if args.limit is not None else DEFAULT_ARRAY_LIMIT,
            "hasMore": (args.offset or 0) + len(sliced["data"]) < sliced["total"],
        }
    if args.json_filter:
        result = apply_json_filter(result, args.json_filter)
    status, budgeted = build_status_message(result, args.max_tokens)
    write_json({"_status": status, "_shapeHash": lookup.shape_hash, "data": budgeted}, compact=args.compact)


if __name__ == "__main__":
    main()
