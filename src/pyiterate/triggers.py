"""Trigger resolution policy.

Pure functions only: the dispatcher decides *how* to schedule, this module
decides *whether* to wait and which display variant to use.
"""

from __future__ import annotations

from collections.abc import Sequence

from pyiterate.models.response import Survey, Trigger
from pyiterate.state.reducer import DisplayKind


def resolve_display_delay(triggers: Sequence[Trigger]) -> float | None:
    """Seconds to wait before display, or ``None`` to display immediately.

    Only the first trigger is consulted. A ``seconds`` trigger without a
    usable ``options.seconds`` waits 0 seconds but is still deferred.
    """
    if not triggers:
        return None
    first = triggers[0]
    if not first.is_timed:
        return None
    seconds = first.options.seconds or 0
    return max(float(seconds), 0.0)


def display_kind_for(survey: Survey) -> DisplayKind:
    """Prompt when the survey carries one, otherwise the full survey."""
    if survey.prompt is not None:
        return DisplayKind.PROMPT
    return DisplayKind.SURVEY
