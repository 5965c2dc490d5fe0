from __future__ import annotations

from query import execute_query
from schema import build_schema
from suggest import generate_suggestions


def by_name(suggestions):
    return {suggestion["name"]: suggestion["query"] for suggestion in suggestions}


def test_object_response_suggestions() -> None:
    data = {"id": 1, "name": "a", "users": [{"id": 1, "email": "e"}], "meta": {"page": {"n": 1}}}
    schema = build_schema(data, "GET", "/team")
    queries = by_name(generate_suggestions(schema))
    assert queries["All top-level scalar fields"] == "{ id name }"
    assert queries["List users with basic fields"] == "{ users { id email } }"
    assert queries["Full query (depth 2)"] == "{ id name users { id email } meta { page { n } } }"
    for query in queries.values():
        execute_query(schema, data, query)


def test_array_response_suggestions() -> None:
    data = [{"id": 1, "title": "t"}]
    schema = build_schema(data, "GET", "/posts")
    queries = by_name(generate_suggestions(schema))
    assert queries["Items with count"] == "{ items { id title } _count }"
    assert queries["List items with basic fields"] == "{ items { id title } }"
    for query in queries.values():
        execute_query(schema, data, query)


def test_mutation_suggestion() -> None:
    body = {"properties": {"name": {"type": "string"}}}
    schema = build_schema({"id": 1}, "POST", "/api/users", body)
    queries = by_name(generate_suggestions(schema))
    assert queries["Mutation: post_POST_api_users"] == "mutation { post_POST_api_users(input: { ... }) { id } }"


def test_fields_per_level_are_capped() -> None:
    data = {f"f{i}": i for i in range(12)}
    queries = by_name(generate_suggestions(build_schema(data, "GET", "/wide")))
    assert queries["All top-level scalar fields"] == "{ " + " ".join(f"f{i}" for i in range(8)) + " }"
