from __future__ import annotations

import dataclasses

import pytest

from pyiterate.config import _ENV_CONFIG_MAP, IterateConfig


def test_defaults() -> None:
    config = IterateConfig()

    assert config.api_key is None
    assert config.api_base_url == "https://iteratehq.com/api/v1"
    assert config.storage_path is None


def test_from_env_reads_iterate_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITERATE_API_KEY", "env-key")
    monkeypatch.setenv("ITERATE_API_HOST", "https://staging.example.com")
    monkeypatch.setenv("ITERATE_STORAGE_PATH", "/tmp/iterate.json")
    monkeypatch.delenv("ITERATE_API_VERSION", raising=False)

    config = IterateConfig.from_env()

    assert config.api_key == "env-key"
    assert config.api_base_url == "https://staging.example.com/api/v1"
    assert config.storage_path == "/tmp/iterate.json"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITERATE_API_KEY", "env-key")

    config = IterateConfig.from_env(api_key="explicit")

    assert config.api_key == "explicit"


def test_from_env_ignores_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITERATE_API_KEY", "   ")

    assert IterateConfig.from_env().api_key is None


def test_env_map_targets_config_fields() -> None:
    field_names = {field.name for field in dataclasses.fields(IterateConfig)}

    assert set(_ENV_CONFIG_MAP.values()) <= field_names
    assert all(key.startswith("ITERATE_") for key in _ENV_CONFIG_MAP)
