"""k1s0 flags library."""

from .breaker import CircuitBreaker
from .builder import ClientBuilder
from .cache import FlagCache
from .client import Flag, FlagsClient
from .config import ClientConfig, load_config
from .exceptions import (
    ApiError,
    AuthError,
    CacheError,
    ConfigError,
    FlagError,
    FlagErrorCodes,
    TransportError,
)
from .http_client import FlagsTransport, HttpFlagsTransport
from .local import build_local
from .memory import InMemoryFlagCache
from .models import Auth, FeatureFlag, FlagDetails, FlagsResponse
from .normalizer import expand, normalize
from .refresh import RefreshCoordinator, merge_flags

Flags = FlagsClient

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "Auth",
    "AuthError",
    "CacheError",
    "CircuitBreaker",
    "ClientBuilder",
    "ClientConfig",
    "ConfigError",
    "FeatureFlag",
    "Flag",
    "FlagCache",
    "FlagDetails",
    "FlagError",
    "FlagErrorCodes",
    "Flags",
    "FlagsClient",
    "FlagsResponse",
    "FlagsTransport",
    "HttpFlagsTransport",
    "InMemoryFlagCache",
    "RefreshCoordinator",
    "TransportError",
    "build_local",
    "expand",
    "load_config",
    "merge_flags",
    "normalize",
]
