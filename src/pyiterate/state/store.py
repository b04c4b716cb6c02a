"""In-memory observable state store.

This is the only component that holds the current :class:`IterateState`.
Each client owns its own instance; nothing here is process-global.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable

from pyiterate.state.actions import StoreAction
from pyiterate.state.reducer import IterateState, reduce

_logger = logging.getLogger(__name__)

Listener = Callable[[IterateState], None]


class IterateStore:
    """Holds state, applies actions through the reducer, notifies listeners."""

    def __init__(self, initial: IterateState | None = None) -> None:
        self._state = initial if initial is not None else IterateState()
        self._listeners: list[Listener] = []

    def get_state(self) -> IterateState:
        return self._state

    def dispatch(self, action: StoreAction) -> None:
        """Apply *action* and notify subscribers with the new state."""
        self._state = reduce(self._state, action)
        _logger.debug("Dispatched %s", action.type)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                _logger.warning("Store listener failed for %s", action.type, exc_info=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe
