from __future__ import annotations

import logging

import pytest

from cache import SchemaCache, default_cache, get_or_build_schema


def test_second_lookup_is_served_from_cache() -> None:
    cache = SchemaCache()
    first = cache.get({"id": 1}, "GET", "/users/{id}")
    second = cache.get({"id": 2}, "GET", "/users/{id}")
    assert first.from_cache is False
    assert second.from_cache is True
    assert second.schema is first.schema
    assert second.shape_hash == first.shape_hash
    assert len(cache) == 1


def test_shape_method_and_path_separate_entries() -> None:
    cache = SchemaCache()
    cache.get({"id": 1}, "GET", "/users")
    assert cache.get({"id": "x"}, "GET", "/users").from_cache is False
    assert cache.get({"id": 1}, "GET", "/people").from_cache is False
    assert cache.get({"id": 1}, "POST", "/users").from_cache is False
    assert len(cache) == 4


def test_override_hash_replaces_shape_in_key() -> None:
    cache = SchemaCache()
    body = {"properties": {"name": {"type": "string"}}}
    first = cache.get({"id": 1}, "POST", "/users", body, override_hash="aaa")
    other = cache.get({"id": 1}, "POST", "/users", body, override_hash="bbb")
    again = cache.get({"id": 1}, "POST", "/users", body, override_hash="aaa")
    assert not first.from_cache
    assert not other.from_cache
    assert again.from_cache
    assert again.shape_hash == first.shape_hash


def test_clear_empties_the_cache() -> None:
    cache = SchemaCache()
    cache.get([1, 2], "GET", "/n")
    cache.clear()
    assert len(cache) == 0
    assert cache.get([1, 2], "GET", "/n").from_cache is False


def test_default_cache_helper() -> None:
    default_cache.clear()
    try:
        assert get_or_build_schema({"a": 1}, "GET", "/a").from_cache is False
        assert get_or_build_schema({"a": 1}, "GET", "/a").from_cache is True
    finally:
        default_cache.clear()


def test_cache_logs_hits_and_misses(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="cache")
    cache = SchemaCache()
    cache.get({"id": 1}, "GET", "/users")
    cache.get({"id": 1}, "GET", "/users")
    messages = [record.getMessage() for record in caplog.records]
    assert any("schema cache miss for GET /users" in message for message in messages)
    assert any("schema cache hit for GET /users" in message for message in messages)


def test_method_case_shares_one_entry() -> None:
    cache = SchemaCache()
    assert cache.get({"id": 1}, "get", "/users").from_cache is False
    assert cache.get({"id": 1}, "GET", "/users").from_cache is True
    assert len(cache) == 1


def test_empty_override_hash_is_still_an_override() -> None:
    cache = SchemaCache()
    cache.get({"id": 1}, "POST", "/users", override_hash="")
    assert cache.get({"id": 1}, "POST", "/users").from_cache is False
    assert cache.get({"id": 1}, "POST", "/users", override_hash="").from_cache is True
    assert len(cache) == 2
