"""Custom exception hierarchy for pyiterate."""

from __future__ import annotations


class IterateError(Exception):
    """Base exception for all pyiterate errors."""


class IterateConfigError(IterateError):
    """Invalid or missing configuration (e.g. no API key bound yet)."""


class IterateTransportError(IterateError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class IterateApiError(IterateError):
    """The service answered with an ``error`` payload."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class IterateResponseError(IterateError):
    """The reply body did not match the expected response schema.

    Missing optional fields are *not* an error; this is raised only when a
    field is present with an unusable shape (e.g. ``triggers`` not a list).
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
