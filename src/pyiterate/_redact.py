"""Helpers for safe debug logging.

Embed contexts carry user traits (emails, names, ids) and replies carry
auth tokens. Before either reaches a DEBUG log, trait values are hidden
(trait keys stay visible, they are useful when debugging targeting) and
credentials are shortened to their last few characters.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "<redacted>"

# Mappings whose keys are kept but whose values identify the user.
_TRAIT_KEYS: frozenset[str] = frozenset({"user_traits", "usertraits", "event_traits", "eventtraits"})

# Credentials: shown as a short suffix so two tokens can still be told apart.
_SECRET_KEYS: frozenset[str] = frozenset({"token", "auth_token", "authtoken", "api_key", "apikey", "password", "cookie"})

_VISIBLE_SUFFIX = 4
_MAX_DEPTH = 16


def mask_secret(secret: str) -> str:
    """``"…wxyz"`` for long secrets, :data:`REDACTED` for short ones."""
    if len(secret) <= _VISIBLE_SUFFIX * 2:
        return REDACTED
    return f"…{secret[-_VISIBLE_SUFFIX:]}"


def mask_authorization(header: str) -> str:
    """Keep the auth scheme, mask the credential: ``"Bearer …wxyz"``."""
    scheme, sep, credential = header.partition(" ")
    if not sep:
        return mask_secret(header)
    return f"{scheme} {mask_secret(credential.strip())}"


def _redact_traits(traits: Any) -> Any:
    if isinstance(traits, Mapping):
        return {str(key): REDACTED for key in traits}
    return REDACTED


def _redact_field(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _TRAIT_KEYS:
        return _redact_traits(value)
    if lowered == "authorization":
        return mask_authorization(value) if isinstance(value, str) else REDACTED
    if lowered in _SECRET_KEYS:
        return mask_secret(value) if isinstance(value, str) else REDACTED
    return _redact(value, max_string, depth + 1)


def _redact(value: Any, max_string: int, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {str(k): _redact_field(str(k), v, max_string, depth) for k, v in value.items()}
    if isinstance(value, Sequence):
        return [_redact(item, max_string, depth + 1) for item in value]
    return repr(value)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* (an embed payload, reply or header map) safe for debug logs."""
    return _redact(value, max_string, 0)
