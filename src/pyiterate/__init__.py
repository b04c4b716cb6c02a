"""pyiterate - Async Python client for in-app surveys driven by user events."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyiterate")
except PackageNotFoundError:
    __version__ = "0+local"
from pyiterate._transport import ApiClient, Transport
from pyiterate.client import IterateClient
from pyiterate.config import IterateConfig
from pyiterate.exceptions import (
    IterateApiError,
    IterateConfigError,
    IterateError,
    IterateResponseError,
    IterateTransportError,
)
from pyiterate.models import (
    EmbedContext,
    EmbedResponse,
    Prompt,
    Survey,
    Trigger,
    TriggerType,
)
from pyiterate.state import DisplayKind, IterateState, IterateStore
from pyiterate.storage import JsonFileStorage, MemoryStorage, Storage, StorageKey

__all__ = [
    "__version__",
    "ApiClient",
    "DisplayKind",
    "EmbedContext",
    "EmbedResponse",
    "IterateApiError",
    "IterateClient",
    "IterateConfig",
    "IterateConfigError",
    "IterateError",
    "IterateResponseError",
    "IterateState",
    "IterateStore",
    "IterateTransportError",
    "JsonFileStorage",
    "MemoryStorage",
    "Prompt",
    "Storage",
    "StorageKey",
    "Survey",
    "Transport",
    "Trigger",
    "TriggerType",
]
