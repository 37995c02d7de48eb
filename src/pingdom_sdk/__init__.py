"""pingdom_sdk package exports."""

from .client import (
    PingdomAPIError,
    PingdomClient,
    PingdomClientError,
    PingdomDecodeError,
    PingdomHTTPError,
    PingdomNonAPIError,
    PingdomProtocolError,
    ResponseEnvelope,
    UnsupportedMethodError,
    create_client_from_env,
)
from .config import PingdomConfig, load_env_config, merge_config
from .models import apply_overrides
from .query import Query, encode_query, query_values

__version__ = "0.1.0"

__all__ = [
    # Client
    "PingdomClient",
    "ResponseEnvelope",
    "create_client_from_env",
    # Config
    "PingdomConfig",
    "load_env_config",
    "merge_config",
    "apply_overrides",
    # Query encoding
    "Query",
    "encode_query",
    "query_values",
    # Exceptions
    "PingdomClientError",
    "UnsupportedMethodError",
    "PingdomProtocolError",
    "PingdomDecodeError",
    "PingdomHTTPError",
    "PingdomAPIError",
    "PingdomNonAPIError",
]
