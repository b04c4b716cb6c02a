from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from pyiterate.client import IterateClient
from pyiterate.config import IterateConfig
from pyiterate.exceptions import IterateApiError
from pyiterate.state.reducer import DisplayKind


@dataclass
class FakeIterateBackend:
    calls: list[str] = field(default_factory=list)
    contexts: list[dict[str, Any]] = field(default_factory=list)
    reject_events: set[str] = field(default_factory=set)

    async def post(self, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        self.calls.append(endpoint)

        if endpoint == "/surveys/embed":
            assert payload is not None
            self.contexts.append(payload)
            name = payload["event"]["name"]
            if name in self.reject_events:
                raise IterateApiError(f"{endpoint} failed: rejected", endpoint=endpoint)
            if name == "signup":
                return {"auth": {"token": "user-token"}, "tracking": {"last_updated": 1700000000}}
            if name == "purchase":
                return {
                    "survey": {"id": "s1", "title": "Purchase NPS", "prompt": {"message": "Quick question?"}},
                    "triggers": [{"type": "immediately"}],
                }
            return {}

        if endpoint.startswith("/surveys/") and endpoint.endswith("/displayed"):
            return None

        raise AssertionError(f"Unexpected endpoint in fake backend: {endpoint}")


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeIterateBackend:
    fake_backend = FakeIterateBackend()

    async def fake_post(_self: Any, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        return await fake_backend.post(endpoint, payload)

    monkeypatch.setattr("pyiterate._transport.ApiClient._post", fake_post)
    return fake_backend


@pytest.fixture
def config(tmp_path: Path) -> IterateConfig:
    return IterateConfig(api_key="company-key", storage_path=str(tmp_path / "iterate.json"))


async def _settle() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_client_happy_path(config: IterateConfig, backend: FakeIterateBackend) -> None:
    async with IterateClient(config) as client:
        client.restore_persisted_state()
        client.identify({"email": "user@example.com"}, {"screen": "onboarding"})
        assert client.send_event("signup") is None

        client.init()
        await _settle()
        assert client.store.get_state().auth_token == "user-token"

        task = client.send_event("purchase")
        assert task is not None
        response = await task
        await _settle()

        assert response.survey is not None
        state = client.store.get_state()
        assert state.display.kind == DisplayKind.PROMPT
        assert backend.contexts[1]["tracking"] == {"last_updated": 1700000000}
        assert backend.contexts[1]["user_traits"] == {"email": "user@example.com"}

    assert backend.calls == ["/surveys/embed", "/surveys/embed", "/surveys/s1/displayed"]
    stored = json.loads(Path(config.storage_path or "").read_text(encoding="utf-8"))
    assert stored == {
        "userTraits": {"email": "user@example.com"},
        "authToken": "user-token",
        "lastUpdated": 1700000000,
    }

    async with IterateClient(config) as restarted:
        restarted.restore_persisted_state()
        state = restarted.store.get_state()
        assert state.auth_token == "user-token"
        assert state.last_updated == 1700000000
        assert state.user_traits == {"email": "user@example.com"}


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_api_error_reaches_caller_and_later_events_still_work(
    config: IterateConfig,
    backend: FakeIterateBackend,
) -> None:
    backend.reject_events.add("broken")

    async with IterateClient(config) as client:
        client.init()

        broken = client.send_event("broken")
        assert broken is not None
        with pytest.raises(IterateApiError, match="rejected"):
            await broken

        ok = client.send_event("signup")
        assert ok is not None
        await ok

        assert client.store.get_state().auth_token == "user-token"
