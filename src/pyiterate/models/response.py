"""Embed response models.

The service replies to ``/surveys/embed`` with any combination of an auth
token, a tracking marker, a survey and the triggers that gate it. Every
section is optional; a missing section only means the matching side effect
is skipped.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from pyiterate.models._base import IterateBaseModel


class TriggerType(StrEnum):
    """Known trigger kinds. Only ``SECONDS`` delays the display."""

    IMMEDIATELY = "immediately"
    SECONDS = "seconds"


class TriggerOptions(IterateBaseModel):
    seconds: float | None = None
    """Delay before display for ``seconds`` triggers."""


class Trigger(IterateBaseModel):
    """A server-specified condition controlling when a survey becomes visible."""

    type: str = ""
    options: TriggerOptions = Field(default_factory=TriggerOptions)

    @property
    def is_timed(self) -> bool:
        return self.type == TriggerType.SECONDS


class Prompt(IterateBaseModel):
    """Lightweight variant shown before the full survey."""

    message: str | None = None
    button_text: str | None = None


class Survey(IterateBaseModel):
    """A survey returned by the service.

    Only ``id`` and ``prompt`` matter to the dispatcher; everything else the
    service sends is kept in ``raw`` for the rendering layer.
    """

    id: str | None = None
    prompt: Prompt | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("prompt", mode="before")
    @classmethod
    def _coerce_prompt(cls, value: Any) -> Any:
        # Any truthy non-object still means "show the prompt first"; the
        # original value stays available in ``raw``.
        if value is None or isinstance(value, (dict, Prompt)):
            return value
        return {} if value else None


class AuthInfo(IterateBaseModel):
    token: str | None = None


class TrackingInfo(IterateBaseModel):
    last_updated: Any = None
    """Opaque marker echoed back in later embed contexts verbatim."""


class EmbedResponse(IterateBaseModel):
    """Validated ``results`` body of an embed call."""

    auth: AuthInfo | None = None
    tracking: TrackingInfo | None = None
    survey: Survey | None = None
    triggers: list[Trigger] = Field(default_factory=list)

    @property
    def auth_token(self) -> str | None:
        return self.auth.token if self.auth is not None else None

    @property
    def last_updated(self) -> Any:
        return self.tracking.last_updated if self.tracking is not None else None
