"""Expiring in-process cache and durable JSON-file cache."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Generic, Iterator, TypeVar

from property_finder.common.errors import DatasetError
from property_finder.common.fs import read_json, write_json_atomic

V = TypeVar("V")


class TtlCache(Generic[V]):
    """Entries are valid for ``ttl_seconds`` from the moment they were stored."""

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, tuple[V, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self.clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (value, self.clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class JsonFileCache:
    """Append-only key/value cache persisted to a JSON object on disk.

    Every ``set`` rewrites the file, so an interrupted batch keeps everything
    stored before the interruption. Entries never expire.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._entries: dict[str, dict] = self._load()

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            payload = read_json(self.path)
        except ValueError as exc:
            raise DatasetError(f"Cache file is not valid JSON: {self.path}") from exc
        if not isinstance(payload, dict):
            raise DatasetError(f"Cache file must hold a JSON object: {self.path}")
        return payload

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, key: str) -> dict | None:
        return self._entries.get(key)

    def set(self, key: str, value: dict) -> None:
        if key in self._entries:
            return
        self._entries[key] = value
        self.flush()

    def items(self):
        return self._entries.items()

    def flush(self) -> None:
        write_json_atomic(self.path, self._entries)
