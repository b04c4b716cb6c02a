"""Pure reducer for :class:`IterateState`.

This module contains no I/O and never mutates its input; persistence of
traits and tokens is the dispatcher's job.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyiterate.models.response import Survey
from pyiterate.state.actions import ActionType, StoreAction


class DisplayKind(StrEnum):
    PROMPT = "prompt"
    SURVEY = "survey"


class DisplayState(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DisplayKind | None = None
    survey: Survey | None = None


class IterateState(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    user_traits: dict[str, Any] = Field(default_factory=dict)
    event_traits: dict[str, Any] = Field(default_factory=dict)
    auth_token: str | None = None
    last_updated: Any = None
    display: DisplayState = Field(default_factory=DisplayState)


_FIELD_ACTIONS: dict[ActionType, str] = {
    ActionType.SET_USER_TRAITS: "user_traits",
    ActionType.SET_EVENT_TRAITS: "event_traits",
    ActionType.SET_AUTH_TOKEN: "auth_token",
    ActionType.SET_LAST_UPDATED: "last_updated",
}

_DISPLAY_ACTIONS: dict[ActionType, DisplayKind] = {
    ActionType.SHOW_PROMPT: DisplayKind.PROMPT,
    ActionType.SHOW_SURVEY: DisplayKind.SURVEY,
}


def reduce(state: IterateState, action: StoreAction) -> IterateState:
    """Return the state that results from applying *action* to *state*."""
    field_name = _FIELD_ACTIONS.get(action.type)
    if field_name is not None:
        value = dict(action.payload) if field_name.endswith("_traits") else action.payload
        return state.model_copy(update={field_name: value})

    display_kind = _DISPLAY_ACTIONS.get(action.type)
    if display_kind is not None:
        return state.model_copy(update={"display": DisplayState(kind=display_kind, survey=action.payload)})

    return state
