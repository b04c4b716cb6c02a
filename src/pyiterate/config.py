"""Client configuration for pyiterate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyiterate._constants import API_HOST, API_VERSION, USER_AGENT

_ENV_CONFIG_MAP: dict[str, str] = {
    "ITERATE_API_KEY": "api_key",
    "ITERATE_API_HOST": "api_host",
    "ITERATE_API_VERSION": "api_version",
    "ITERATE_STORAGE_PATH": "storage_path",
}


@dataclasses.dataclass(frozen=True)
class IterateConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str or None
        Company API key. When set, :class:`pyiterate.client.IterateClient`
        configures its transport on construction; otherwise call
        ``configure(api_key)`` explicitly.
    api_host : str
        Base host of the survey service.
    api_version : str
        API version path segment (``/api/<version>``).
    storage_path : str or None
        Path of a JSON file used to persist user traits, auth token and
        last-updated marker. ``None`` keeps them in memory only.
    user_agent : str
        User agent sent with every request.
    """

    api_key: str | None = None
    api_host: str = API_HOST
    api_version: str = API_VERSION
    storage_path: str | None = None
    user_agent: str = USER_AGENT

    @property
    def api_base_url(self) -> str:
        return f"{self.api_host.rstrip('/')}/api/{self.api_version}"

    @classmethod
    def from_env(cls, **overrides: Any) -> IterateConfig:
        """Create configuration from environment variables.

        Reads ``ITERATE_API_KEY``, ``ITERATE_API_HOST``,
        ``ITERATE_API_VERSION`` and ``ITERATE_STORAGE_PATH``. Explicit
        keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip():
                config_kwargs[field_name] = val.strip()

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
