"""State/store layer.

A small observable store: actions describe a change, a pure reducer
produces the next immutable :class:`IterateState`, and the store is the
only component that holds the current snapshot.
"""

from pyiterate.state.actions import (
    ActionType,
    StoreAction,
    set_auth_token,
    set_event_traits,
    set_last_updated,
    set_user_traits,
    show_prompt,
    show_survey,
)
from pyiterate.state.reducer import DisplayKind, DisplayState, IterateState, reduce
from pyiterate.state.store import IterateStore

__all__ = [
    "ActionType",
    "DisplayKind",
    "DisplayState",
    "IterateState",
    "IterateStore",
    "StoreAction",
    "reduce",
    "set_auth_token",
    "set_event_traits",
    "set_last_updated",
    "set_user_traits",
    "show_prompt",
    "show_survey",
]
