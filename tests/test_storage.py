from __future__ import annotations

import json
from pathlib import Path

from pyiterate.storage import JsonFileStorage, MemoryStorage, StorageKey


def test_memory_storage_returns_default_for_missing_key() -> None:
    storage = MemoryStorage()

    assert storage.get(StorageKey.AUTH_TOKEN) is None
    assert storage.get(StorageKey.AUTH_TOKEN, "fallback") == "fallback"


def test_memory_storage_isolates_stored_values() -> None:
    storage = MemoryStorage()
    traits = {"a": 1}

    storage.set(StorageKey.USER_TRAITS, traits)
    traits["a"] = 2

    assert storage.get(StorageKey.USER_TRAITS) == {"a": 1}


def test_json_file_storage_survives_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "iterate.json"
    JsonFileStorage(path).set(StorageKey.AUTH_TOKEN, "tok")
    JsonFileStorage(path).set(StorageKey.LAST_UPDATED, 99)

    reloaded = JsonFileStorage(path)

    assert reloaded.get(StorageKey.AUTH_TOKEN) == "tok"
    assert reloaded.get(StorageKey.LAST_UPDATED) == 99
    assert json.loads(path.read_text(encoding="utf-8")) == {"authToken": "tok", "lastUpdated": 99}


def test_json_file_storage_ignores_non_object_file(tmp_path: Path) -> None:
    path = tmp_path / "iterate.json"
    path.write_text("[1, 2]", encoding="utf-8")

    storage = JsonFileStorage(path)

    assert storage.get(StorageKey.USER_TRAITS) is None
    storage.set(StorageKey.USER_TRAITS, {"a": 1})
    assert json.loads(path.read_text(encoding="utf-8")) == {"userTraits": {"a": 1}}
