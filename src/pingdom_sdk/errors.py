from .client import (
    PingdomAPIError,
    PingdomClientError,
    PingdomDecodeError,
    PingdomHTTPError,
    PingdomNonAPIError,
    PingdomProtocolError,
    UnsupportedMethodError,
)

__all__ = [
    "PingdomClientError",
    "UnsupportedMethodError",
    "PingdomProtocolError",
    "PingdomDecodeError",
    "PingdomHTTPError",
    "PingdomAPIError",
    "PingdomNonAPIError",
]
