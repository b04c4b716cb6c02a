"""Event dispatcher: buffers events, sends them, and surfaces surveys."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping, Sequence
from typing import Any

import aiohttp

from pyiterate._transport import ApiClient, Transport
from pyiterate.config import IterateConfig
from pyiterate.exceptions import IterateConfigError
from pyiterate.models.context import EmbedContext
from pyiterate.models.response import EmbedResponse, Survey, Trigger
from pyiterate.state.actions import (
    set_auth_token,
    set_event_traits,
    set_last_updated,
    set_user_traits,
    show_prompt,
    show_survey,
)
from pyiterate.state.reducer import DisplayKind
from pyiterate.state.store import IterateStore
from pyiterate.storage import JsonFileStorage, MemoryStorage, Storage, StorageKey
from pyiterate.triggers import display_kind_for, resolve_display_delay

_logger = logging.getLogger(__name__)

TransportFactory = Callable[[str], Transport]


class IterateClient:
    """Collects events, forwards them to the survey service, shows surveys.

    Usage::

        async with IterateClient(IterateConfig(api_key="...")) as client:
            client.identify({"email": "user@example.com"})
            client.init()
            response = await client.send_event("purchase")

    Events sent before :meth:`init` are queued and flushed, in order, by
    :meth:`init`. After that every :meth:`send_event` returns an
    :class:`asyncio.Task` resolving to the :class:`EmbedResponse`.
    """

    def __init__(
        self,
        config: IterateConfig | None = None,
        *,
        store: IterateStore | None = None,
        storage: Storage | None = None,
        http_session: aiohttp.ClientSession | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._config = config or IterateConfig()
        self._store = store if store is not None else IterateStore()
        if storage is None:
            storage = JsonFileStorage(self._config.storage_path) if self._config.storage_path else MemoryStorage()
        self._storage = storage
        self._http_session = http_session
        self._transport_factory = transport_factory
        self._transport: Transport | None = None
        self._retired_transports: list[Transport] = []

        self._initialized = False
        self._pending_events: list[str] = []
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._delayed_displays: set[asyncio.TimerHandle] = set()

        if self._config.api_key:
            self.configure(self._config.api_key)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> IterateClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel pending delayed displays and background work, close transports."""
        for handle in self._delayed_displays:
            handle.cancel()
        if self._delayed_displays:
            _logger.debug("Cancelled %d delayed display(s)", len(self._delayed_displays))
        self._delayed_displays.clear()

        tasks = [task for task in self._background_tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._background_tasks.clear()

        transports = [*self._retired_transports]
        if self._transport is not None:
            transports.append(self._transport)
        for transport in transports:
            close = getattr(transport, "close", None)
            if close is not None:
                await close()
        self._retired_transports.clear()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def store(self) -> IterateStore:
        return self._store

    @property
    def storage(self) -> Storage:
        return self._storage

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def pending_events(self) -> tuple[str, ...]:
        return tuple(self._pending_events)

    @property
    def pending_display_count(self) -> int:
        """Number of delayed displays still waiting on their timer."""
        return len(self._delayed_displays)

    def configure(self, api_key: str) -> None:
        """Bind a transport scoped to *api_key*, replacing any earlier one."""
        transport: Transport
        if self._transport_factory is not None:
            transport = self._transport_factory(api_key)
        else:
            transport = ApiClient(api_key, self._config, http_session=self._http_session)
        if self._transport is not None:
            self._retired_transports.append(self._transport)
        self._transport = transport
        _logger.debug("Transport configured")

    def init(self) -> None:
        """Mark the client ready and flush queued events in insertion order.

        Must run inside an event loop when events are queued. Everything that
        can fail (bound transport, running loop, context building) is checked
        before the client is marked ready, so a failing ``init()`` leaves the
        queue intact and can simply be retried.
        """
        if not self._pending_events:
            self._initialized = True
            return

        transport = self._require_transport()
        loop = asyncio.get_running_loop()
        contexts = [self._build_context(event_name) for event_name in self._pending_events]

        self._initialized = True
        self._pending_events = []
        _logger.debug("Flushing %d queued event(s)", len(contexts))
        for context in contexts:
            self._track(self._start_embed(loop, transport, context))

    def identify(
        self,
        user_traits: Mapping[str, Any] | None = None,
        event_traits: Mapping[str, Any] | None = None,
    ) -> None:
        """Replace user and/or event traits.

        ``None`` leaves the matching traits untouched; any mapping, including
        an empty one, replaces them. User traits are also persisted.
        """
        if user_traits is not None:
            self._store.dispatch(set_user_traits(user_traits))
            self._storage.set(StorageKey.USER_TRAITS, dict(user_traits))

        if event_traits is not None:
            self._store.dispatch(set_event_traits(event_traits))

    def send_event(self, event_name: str) -> asyncio.Task[EmbedResponse] | None:
        """Send *event_name*, or queue it when :meth:`init` has not run yet.

        Returns ``None`` while queueing. Otherwise the context is built from
        the current state right away and the returned task resolves to the
        service response (or raises the transport failure).
        """
        # Still loading persisted state; init() will flush these in order.
        if not self._initialized:
            self._pending_events.append(event_name)
            _logger.debug("Queued event %s until init()", event_name)
            return None

        transport = self._require_transport()
        context = self._build_context(event_name)
        return self._start_embed(asyncio.get_running_loop(), transport, context)

    def restore_persisted_state(self) -> None:
        """Load traits, auth token and tracking marker from storage into the store.

        Meant to run once at startup, before :meth:`init`. Values are not
        written back to storage.
        """
        user_traits = self._storage.get(StorageKey.USER_TRAITS)
        if isinstance(user_traits, dict):
            self._store.dispatch(set_user_traits(user_traits))

        token = self._storage.get(StorageKey.AUTH_TOKEN)
        if isinstance(token, str) and token:
            self._store.dispatch(set_auth_token(token))

        last_updated = self._storage.get(StorageKey.LAST_UPDATED)
        if last_updated is not None:
            self._store.dispatch(set_last_updated(last_updated))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise IterateConfigError("Client not configured. Call configure(api_key) before sending events.")
        return self._transport

    def _build_context(self, event_name: str) -> EmbedContext:
        state = self._store.get_state()
        return EmbedContext.for_event(
            event_name,
            user_traits=state.user_traits,
            last_updated=state.last_updated,
        )

    def _start_embed(
        self,
        loop: asyncio.AbstractEventLoop,
        transport: Transport,
        context: EmbedContext,
    ) -> asyncio.Task[EmbedResponse]:
        return loop.create_task(self._embed(transport, context), name=f"pyiterate-event-{context.event.name}")

    def _track(self, task: asyncio.Task[Any]) -> None:
        """Keep a reference to fire-and-forget work and log its failure."""
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.warning("Background task %s failed: %s", task.get_name(), exc, exc_info=exc)

    def _spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> None:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._track(task)

    async def _embed(self, transport: Transport, context: EmbedContext) -> EmbedResponse:
        response = await transport.embed(context)
        self._apply_response(response)
        return response

    def _apply_response(self, response: EmbedResponse) -> None:
        token = response.auth_token
        if token is not None:
            self._store.dispatch(set_auth_token(token))
            self._storage.set(StorageKey.AUTH_TOKEN, token)

        last_updated = response.last_updated
        if last_updated is not None:
            self._store.dispatch(set_last_updated(last_updated))
            self._storage.set(StorageKey.LAST_UPDATED, last_updated)

        if response.survey is not None:
            self._schedule_display(response.survey, response.triggers)

    def _schedule_display(self, survey: Survey, triggers: Sequence[Trigger]) -> None:
        delay = resolve_display_delay(triggers)
        if delay is None:
            self._show_survey_or_prompt(survey)
            return

        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def _fire() -> None:
            self._delayed_displays.discard(handle)
            self._show_survey_or_prompt(survey)

        handle = loop.call_later(delay, _fire)
        self._delayed_displays.add(handle)
        _logger.debug("Survey %s scheduled for display in %.1fs", survey.id, delay)

    def _show_survey_or_prompt(self, survey: Survey) -> None:
        if display_kind_for(survey) is DisplayKind.PROMPT:
            self._store.dispatch(show_prompt(survey))
        else:
            self._store.dispatch(show_survey(survey))

        transport = self._require_transport()
        self._spawn(transport.displayed(survey), name=f"pyiterate-displayed-{survey.id}")
