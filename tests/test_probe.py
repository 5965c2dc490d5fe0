from __future__ import annotations

import json
from pathlib import Path

import pytest

import probe
from cache import SchemaCache

POSTS = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


def test_report_for_array_response() -> None:
    cache = SchemaCache()
    report = probe.build_report(POSTS, "get", "/posts", cache=cache)
    assert "type Query {" in report["schema"]
    assert report["fromCache"] is False
    assert report["topLevelType"] == "array"
    assert report["totalItems"] == 2
    assert report["fieldTokenCosts"]["_perItem"] == 4
    assert report["budgetExamples"] == ["All fields: ~4 tokens/item, ~1000 items fit in default budget (4000)"]
    assert any(s["query"] == "{ items { id name } _count }" for s in report["suggestedQueries"])
    assert "jsonFields" not in report
    assert "_pagination" not in report

    assert probe.build_report(POSTS, "GET", "/posts", cache=cache)["fromCache"] is True


def test_report_for_object_response() -> None:
    data = {"results": [{"id": 1}], "mixed": [1, "a"], "next_cursor": "c1"}
    report = probe.build_report(data, "GET", "/search", cache=SchemaCache(), query_params=["cursor", "q"])
    assert report["jsonFields"] == ["mixed"]
    assert report["_pagination"]["nextParams"] == {"cursor": "c1"}
    assert report["paginationParams"] == ["cursor"]
    assert report["budgetExamples"][0].startswith("All fields: ~")
    assert "totalItems" not in report


def test_write_report_includes_body_hash() -> None:
    body_shape = {"properties": {"name": {"type": "string"}}}
    cache = SchemaCache()
    first = probe.build_report({"id": 1}, "POST", "/users", body_shape, cache, body={"name": "a"})
    other = probe.build_report({"id": 1}, "POST", "/users", body_shape, cache, body={"name": "a", "x": 1})
    assert first["bodyHash"] != other["bodyHash"]
    assert other["fromCache"] is False
    assert "type Mutation {" in first["schema"]
    assert "bodyHash" not in probe.build_report({"id": 1}, "GET", "/users", cache=cache, body={"name": "a"})


def test_cli(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "posts.json"
    source.write_text(json.dumps(POSTS), encoding="utf-8")
    probe.main([str(source), "--path", "/posts", "--compact"])
    report = json.loads(capsys.readouterr().out)
    assert report["totalItems"] == 2
    assert report["shapeHash"]
