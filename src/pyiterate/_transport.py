"""HTTP transport to the survey service."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp
from pydantic import ValidationError

from pyiterate._constants import DISPLAYED_ENDPOINT, EMBED_ENDPOINT
from pyiterate._redact import redact_for_log
from pyiterate.config import IterateConfig
from pyiterate.exceptions import (
    IterateApiError,
    IterateConfigError,
    IterateResponseError,
    IterateTransportError,
)
from pyiterate.models.context import EmbedContext
from pyiterate.models.response import EmbedResponse, Survey

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the dispatcher.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`ApiClient`) concrete.
    """

    async def embed(self, context: EmbedContext) -> EmbedResponse:
        ...

    async def displayed(self, survey: Survey) -> None:
        ...


class ApiClient:
    """aiohttp client scoped to one company API key.

    When no ``http_session`` is passed, one is created on the first request
    and closed by :meth:`close`.
    """

    def __init__(
        self,
        api_key: str,
        config: IterateConfig | None = None,
        *,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise IterateConfigError("api_key must be non-empty")
        self._api_key = api_key.strip()
        self._config = config or IterateConfig()
        self._http = http_session
        self._owns_session = http_session is None

    @property
    def api_key(self) -> str:
        return self._api_key

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "authorization": f"Bearer {self._api_key}",
            "user-agent": self._config.user_agent,
        }

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession()
            self._owns_session = True
        return self._http

    async def close(self) -> None:
        if self._owns_session and self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None

    async def _post(self, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        """POST *payload* and return the ``results`` member of the reply.

        1. JSON-encode the payload
        2. POST with the bearer API key
        3. Decode the ``{"results": ..., "error": ...}`` envelope
        """
        url = f"{self._config.api_base_url}{endpoint}"
        body = json.dumps(payload if payload is not None else {}, separators=(",", ":"))

        _logger.debug("POST %s body=%s", url, redact_for_log(payload))

        try:
            async with self._session().post(url, data=body, headers=self._headers()) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise IterateTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except IterateTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise IterateTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return None

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise IterateTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body_json, dict):
            raise IterateResponseError(f"Unexpected reply shape from {endpoint}", endpoint=endpoint)

        error = body_json.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise IterateApiError(f"{endpoint} failed: {message}", endpoint=endpoint)

        _logger.debug("Reply from %s: %s", endpoint, redact_for_log(body_json))
        return body_json.get("results")

    async def embed(self, context: EmbedContext) -> EmbedResponse:
        """Send *context* and return the validated embed response."""
        results = await self._post(EMBED_ENDPOINT, context.to_payload())
        if results is None:
            return EmbedResponse()
        try:
            return EmbedResponse.model_validate(results)
        except ValidationError as exc:
            raise IterateResponseError(
                f"Malformed embed response: {exc.error_count()} invalid field(s)",
                endpoint=EMBED_ENDPOINT,
            ) from exc

    async def displayed(self, survey: Survey) -> None:
        """Tell the service *survey* was shown to the user."""
        if survey.id is None:
            _logger.debug("Survey without id; skipping displayed notification")
            return
        await self._post(DISPLAYED_ENDPOINT.format(survey_id=survey.id))
