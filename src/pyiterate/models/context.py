"""Embed context sent with every event."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from pyiterate._constants import EMBED_TYPE, SDK_VERSION


class AppContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str = SDK_VERSION


class EventContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class TrackingContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_updated: Any


class EmbedContext(BaseModel):
    """Payload describing app, event and user state for one event.

    Built fresh per ``send_event`` and never persisted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    app: AppContext = Field(default_factory=AppContext)
    event: EventContext
    type: Literal["mobile"] = EMBED_TYPE
    user_traits: dict[str, Any] | None = None
    tracking: TrackingContext | None = None

    @classmethod
    def for_event(
        cls,
        event_name: str,
        *,
        user_traits: dict[str, Any] | None = None,
        last_updated: Any = None,
    ) -> EmbedContext:
        """Build a context, omitting empty traits and an unset tracking marker."""
        return cls(
            event=EventContext(name=event_name),
            user_traits=dict(user_traits) if user_traits else None,
            tracking=TrackingContext(last_updated=last_updated) if last_updated is not None else None,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the embed request; absent sections are left out."""
        payload: dict[str, Any] = {
            "app": {"version": self.app.version},
            "event": {"name": self.event.name},
            "type": self.type,
        }
        if self.user_traits is not None:
            payload["user_traits"] = dict(self.user_traits)
        if self.tracking is not None:
            payload["tracking"] = {"last_updated": self.tracking.last_updated}
        return payload
