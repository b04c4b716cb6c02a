"""Base model for survey service payloads.

Every response model inherits from :class:`IterateBaseModel` which
provides:

* ``extra="ignore"`` so new server-side keys never break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IterateBaseModel(BaseModel):
    """Base for survey service response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls_and_stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicitly provided raw (kwargs construction).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
