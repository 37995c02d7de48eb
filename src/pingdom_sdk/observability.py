from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Union

OBSERVABILITY_LOGGER = "pingdom_sdk.observability"

# Attribute names set by LogRecord itself; an extra with one of these
# names makes logging raise KeyError.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def log_event(event: str, logger: logging.Logger | None = None, **fields: Any) -> None:
    """Log ``event`` at INFO with ``fields`` attached as record attributes."""
    log = logger or logging.getLogger(OBSERVABILITY_LOGGER)
    extra: Dict[str, Any] = {k: v for k, v in fields.items() if k not in _RESERVED}
    extra["event"] = event
    log.info(event, extra=extra)


def elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def log_api_call(
    *,
    method: str,
    endpoint: str,
    status: Union[int, str],
    start: float,
    request_id: Optional[str] = None,
    error_type: Optional[str] = None,
) -> None:
    """
    One record per Pingdom request. ``status`` is the HTTP status code, or
    "exception" when no response arrived. Only the path is logged, never
    the query string or body, so check settings and credentials stay out.
    """
    log_event(
        "api_call",
        request_id=request_id,
        method=method,
        endpoint=endpoint,
        status=status,
        duration_ms=elapsed_ms(start),
        error_type=error_type,
    )


__all__ = ["log_event", "log_api_call", "elapsed_ms", "OBSERVABILITY_LOGGER"]
