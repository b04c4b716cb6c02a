"""Store actions and their constructors."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyiterate.models.response import Survey


class ActionType(StrEnum):
    SET_USER_TRAITS = "set_user_traits"
    SET_EVENT_TRAITS = "set_event_traits"
    SET_AUTH_TOKEN = "set_auth_token"
    SET_LAST_UPDATED = "set_last_updated"
    SHOW_PROMPT = "show_prompt"
    SHOW_SURVEY = "show_survey"


class StoreAction(BaseModel):
    """A single state change request."""

    model_config = ConfigDict(frozen=True)

    type: ActionType
    payload: Any = None


def set_user_traits(traits: Mapping[str, Any]) -> StoreAction:
    return StoreAction(type=ActionType.SET_USER_TRAITS, payload=copy.deepcopy(dict(traits)))


def set_event_traits(traits: Mapping[str, Any]) -> StoreAction:
    return StoreAction(type=ActionType.SET_EVENT_TRAITS, payload=copy.deepcopy(dict(traits)))


def set_auth_token(token: str) -> StoreAction:
    return StoreAction(type=ActionType.SET_AUTH_TOKEN, payload=token)


def set_last_updated(last_updated: Any) -> StoreAction:
    return StoreAction(type=ActionType.SET_LAST_UPDATED, payload=last_updated)


def show_prompt(survey: Survey) -> StoreAction:
    return StoreAction(type=ActionType.SHOW_PROMPT, payload=survey)


def show_survey(survey: Survey) -> StoreAction:
    return StoreAction(type=ActionType.SHOW_SURVEY, payload=survey)
