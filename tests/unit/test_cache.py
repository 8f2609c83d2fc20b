import json
from pathlib import Path

import pytest

from property_finder.common.cache import JsonFileCache, TtlCache
from property_finder.common.errors import DatasetError


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_ttl_cache_serves_until_expiry():
    clock = Clock()
    cache = TtlCache(300, clock=clock)
    cache.set("geelong", 1)

    clock.now = 299
    assert cache.get("geelong") == 1
    clock.now = 300
    assert cache.get("geelong") is None
    assert len(cache) == 0


def test_json_file_cache_persists_each_entry(tmp_path: Path):
    path = tmp_path / "geocode-cache.json"
    cache = JsonFileCache(path)
    cache.set("Geelong", {"lat": -38.15, "lon": 144.36})

    reloaded = JsonFileCache(path)
    assert "Geelong" in reloaded
    assert json.loads(path.read_text(encoding="utf-8")) == {"Geelong": {"lat": -38.15, "lon": 144.36}}


def test_json_file_cache_never_overwrites_existing_entry(tmp_path: Path):
    cache = JsonFileCache(tmp_path / "cache.json")
    cache.set("Geelong", {"lat": 1, "lon": 2})
    cache.set("Geelong", {"lat": 3, "lon": 4})

    assert cache.get("Geelong") == {"lat": 1, "lon": 2}


def test_json_file_cache_rejects_corrupt_file(tmp_path: Path):
    path = tmp_path / "cache.json"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(DatasetError):
        JsonFileCache(path)
