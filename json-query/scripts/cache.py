#!/usr/bin/env python3
# Copyright 2026 Yevgeniy Zaremba
# SPDX-License-Identifier: Apache-2.0

"""Memoize inferred schemas per operation and response shape."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from common import DEFAULT_LIMITS, InferenceLimits
from descriptors import Schema
from fingerprint import compute_shape_hash
from schema import build_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheLookup:
    schema: Schema
    shape_hash: str
    from_cache: bool


class SchemaCache:
    """Schemas keyed by (method, path template, shape or override hash).

    Entries live until ``clear()``; there is no eviction. Two threads that
    miss on the same key both build, and the later insert wins.
    """

    def __init__(self, limits: InferenceLimits = DEFAULT_LIMITS) -> None:
        self.limits = limits
        self._entries: dict[tuple[str, str, str], Schema] = {}
        self._lock = threading.Lock()

    def get(
        self,
        data: Any,
        method: str,
        path_template: str,
        request_body: dict[str, Any] | None = None,
        override_hash: str | None = None,
    ) -> CacheLookup:
        method = method.upper()
        shape_hash = compute_shape_hash(data, self.limits)
        key = (method, path_template, override_hash if override_hash is not None else shape_hash)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            logger.debug("schema cache hit for %s %s (%s)", method, path_template, key[2])
            return CacheLookup(cached, shape_hash, True)

        logger.debug("schema cache miss for %s %s (%s), building", method, path_template, key[2])
        schema = build_schema(data, method, path_template, request_body, self.limits)
        with self._lock:
            self._entries[key] = schema
        return CacheLookup(schema, shape_hash, False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


default_cache = SchemaCache()


def get_or_build_schema(
    data: Any,
    method: str,
    path_template: str,
    request_body: dict[str, Any] | None = None,
    override_hash: str | None = None,
) -> CacheLookup:
    """Look up (or build and remember) a schema in the process-wide cache."""
    return default_cache.get(data, method, path_template, request_body, override_hash)
