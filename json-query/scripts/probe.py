#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Discovery report for a JSON response: schema, costs, suggested queries and paging hints."""

from __future__ import annotations

import argparse
import json
import math
from pathlib import Path
from typing import Any

from budget import DEFAULT_BUDGET
from cache import SchemaCache, default_cache
from common import WRITE_METHODS, configure_logging, load_json, type_name, write_json
from cost import compute_field_costs
from fingerprint import compute_shape_hash
from pagination import PAGINATION_PARAM_NAMES, detect_pagination
from schema import collect_opaque_fields
from sdl import schema_to_sdl
from suggest import generate_suggestions

OPAQUE_HINT = (
    "These fields contain heterogeneous or deeply nested data that cannot be queried "
    "with field selection. Query them as-is and parse the returned JSON directly."
)


def budget_examples(data: Any, field_costs: dict[str, Any], budget: int = DEFAULT_BUDGET) -> list[str]:
    if isinstance(data, list) and data and field_costs.get("_perItem"):
        per_item = field_costs["_perItem"]
        fit = math.floor(budget / per_item)
        return [f"All fields: ~{per_item} tokens/item, ~{fit} items fit in default budget ({budget})"]
    if isinstance(data, (dict, list)):
        return [f"All fields: ~{field_costs['_total']} tokens total"]
    return []


def build_report(
    data: Any,
    method: str = "GET",
    path_template: str = "/",
    request_body: dict[str, Any] | None = None,
    cache: SchemaCache | None = None,
    body: Any = None,
    query_params: list[str] | None = None,
) -> dict[str, Any]:
    """Everything a caller needs to write a good first query against ``data``.

    ``request_body`` is the declared body shape used for mutation inputs;
    ``body`` is the body actually sent, whose shape hash keeps schemas for
    different write payloads apart in the cache.
    """
    cache = cache or default_cache
    method = method.upper()
    body_hash = compute_shape_hash(body, cache.limits) if method in WRITE_METHODS and body is not None else None
    lookup = cache.get(data, method, path_template, request_body, body_hash)

    report: dict[str, Any] = {
        "schema": schema_to_sdl(lookup.schema),
        "shapeHash": lookup.shape_hash,
        "fromCache": lookup.from_cache,
        "topLevelType": type_name(data),
    }
    if body_hash:
        report["bodyHash"] = body_hash

    paging_params = [name for name in query_params or [] if name in PAGINATION_PARAM_NAMES]
    if paging_params:
        report["paginationParams"] = paging_params

    suggestions = generate_suggestions(lookup.schema)
    if suggestions:
        report["suggestedQueries"] = suggestions

    costs = compute_field_costs(data, limits=cache.limits)
    report["fieldTokenCosts"] = costs
    examples = budget_examples(data, costs)
    if examples:
        report["budgetExamples"] = examples

    opaque = collect_opaque_fields(lookup.schema)
    if opaque:
        report["jsonFields"] = opaque
        report["jsonFieldsHint"] = OPAQUE_HINT

    pagination = detect_pagination(data, query_params)
    if pagination:
        report["_pagination"] = pagination

    if isinstance(data, list):
        report["totalItems"] = len(data)
        report["hint"] = "Array response: query it as '{ items { ... } _count }'."
    else:
        report["hint"] = "Select fields by the names in the schema above."
    return report


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Discovery report for a JSON response.")
    parser.add_argument("input", nargs="?", default="-", help="Input JSON file path or '-' for stdin.")
    parser.add_argument("--method", default="GET", help="HTTP method the response came from.")
    parser.add_argument("--path", default="/", help="Path template the response came from.")
    parser.add_argument("--body-shape", help="JSON file describing the request body properties.")
    parser.add_argument("--body", help="JSON file holding the request body that was sent.")
    parser.add_argument(
        "--query-param",
        action="append",
        default=[],
        help="Query parameter name the endpoint accepts. Repeatable.",
    )
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    data = load_json(args.input)
    body_shape = json.loads(Path(args.body_shape).read_text(encoding="utf-8")) if args.body_shape else None
    body = load_json(args.body) if args.body else None
    report = build_report(
        data,
        args.method,
        args.path,
        body_shape,
        SchemaCache(),
        body=body,
        query_params=args.query_param,
    )
    write_json(report, compact=args.compact)


if __name__ == "__main__":
    main()
