import logging
import os
from typing import Any, Iterable, Optional

LOG_LEVEL_ENV = "PINGDOM_LOG_LEVEL"

# Order in which api_call attributes appear on a logfmt line.
API_CALL_FIELDS = (
    "request_id",
    "method",
    "endpoint",
    "status",
    "duration_ms",
    "error_type",
)

# Never printed even if a caller passes them as extras.
REDACTED_FIELDS = frozenset({"password", "app_key", "authorization"})


class LogfmtFormatter(logging.Formatter):
    """
    One ``key=value`` line per record:

        level=info logger=pingdom_sdk.observability event=api_call method=GET ...

    Only the attributes named in ``fields`` are printed, in that order, and
    attributes missing from the record (or set to None) are left out.
    """

    def __init__(self, fields: Iterable[str] = API_CALL_FIELDS) -> None:
        super().__init__()
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        parts = [f"level={record.levelname.lower()}", f"logger={record.name}"]

        message = record.getMessage()
        if message:
            parts.append(f"event={self._fmt_val(message)}")

        for key in self.fields:
            value = getattr(record, key, None)
            if value is None:
                continue
            if key in REDACTED_FIELDS:
                value = "***"
            parts.append(f"{key}={self._fmt_val(value)}")

        if record.exc_info and record.exc_info[0] is not None:
            parts.append(f"exc_type={record.exc_info[0].__name__}")
        return " ".join(parts)

    @staticmethod
    def _fmt_val(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        text = str(value)
        if text == "" or any(ch in text for ch in ' ="'):
            return '"' + text.replace('"', '\\"') + '"'
        return text


def setup_logging(level: Optional[str] = None) -> None:
    """
    Route all logging through a single logfmt handler on the root logger.

    ``level`` falls back to $PINGDOM_LOG_LEVEL, then INFO. httpx's own
    per-request INFO lines are muted unless running at DEBUG since
    ``api_call`` records already cover them.
    """
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    numeric = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(numeric)

    logging.getLogger("httpx").setLevel(
        logging.DEBUG if numeric <= logging.DEBUG else logging.WARNING
    )


__all__ = [
    "setup_logging",
    "LogfmtFormatter",
    "API_CALL_FIELDS",
    "LOG_LEVEL_ENV",
]
