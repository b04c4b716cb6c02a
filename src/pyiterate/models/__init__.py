"""Data models for survey service payloads."""

from pyiterate.models._base import IterateBaseModel
from pyiterate.models.context import AppContext, EmbedContext, EventContext, TrackingContext
from pyiterate.models.response import (
    AuthInfo,
    EmbedResponse,
    Prompt,
    Survey,
    TrackingInfo,
    Trigger,
    TriggerOptions,
    TriggerType,
)

__all__ = [
    "AppContext",
    "AuthInfo",
    "EmbedContext",
    "EmbedResponse",
    "EventContext",
    "IterateBaseModel",
    "Prompt",
    "Survey",
    "TrackingContext",
    "TrackingInfo",
    "Trigger",
    "TriggerOptions",
    "TriggerType",
]
