from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel

LIST_STYLES = ("comma", "semicolon", "numbered")

_JOINERS = {"comma": ",", "semicolon": ";"}


@dataclass(frozen=True)
class Query:
    """
    Per-field encoding rule, attached with ``typing.Annotated``:

        tags: Annotated[List[str], Query("tags", omitempty=True, style="comma")]

    - name: key used on the wire (defaults to the Python field name)
    - omitempty: drop the key when the value is empty/zero
    - style: None (repeat the key), "comma", "semicolon" or "numbered"
    - omitnone: drop the key only when the value is None, so an explicit
      False or 0 is still sent
    - exclude: never encode this field
    - skip_keys: keys a nested model must not contribute
    """

    name: Optional[str] = None
    omitempty: bool = False
    omitnone: bool = False
    style: Optional[str] = None
    exclude: bool = False
    skip_keys: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.style is not None and self.style not in LIST_STYLES:
            raise ValueError(f"Unknown list style {self.style!r}")


_PLAIN = Query()


def field_rule(model: type[BaseModel], field_name: str) -> Query:
    """Return the Query rule for a model field (plain key=value if none)."""
    info = model.model_fields[field_name]
    for meta in info.metadata:
        if isinstance(meta, Query):
            return meta
    return _PLAIN


def is_empty(value: Any) -> bool:
    """Zero-value test used by omitempty."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, set, frozenset)):
        return len(value) == 0
    if isinstance(value, Mapping):
        return len(value) == 0
    return False


def format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return format_scalar(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, BaseModel) or isinstance(value, Mapping):
        raise TypeError(f"Cannot encode {type(value).__name__} as a scalar value")
    return str(value)


def _add(values: Dict[str, List[str]], key: str, value: str) -> None:
    values.setdefault(key, []).append(value)


def _encode_list(
    values: Dict[str, List[str]], key: str, items: List[Any], style: Optional[str]
) -> None:
    if not items:
        _add(values, key, "")
        return

    formatted = [format_scalar(item) for item in items]
    if style in _JOINERS:
        _add(values, key, _JOINERS[style].join(formatted))
    elif style == "numbered":
        for idx, item in enumerate(formatted):
            _add(values, f"{key}{idx}", item)
    else:
        for item in formatted:
            _add(values, key, item)


def _reflect(
    model: BaseModel,
    values: Dict[str, List[str]],
    skip_keys: Tuple[str, ...] = (),
) -> None:
    cls = type(model)
    for field_name in cls.model_fields:
        rule = field_rule(cls, field_name)
        if rule.exclude:
            continue

        value = getattr(model, field_name)

        # Nested models share the parent's key space.
        if isinstance(value, BaseModel):
            _reflect(value, values, rule.skip_keys)
            continue

        if rule.omitempty and is_empty(value):
            continue
        if rule.omitnone and value is None:
            continue

        key = rule.name or field_name
        if key in skip_keys:
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            _encode_list(values, key, list(value), rule.style)
        else:
            _add(values, key, format_scalar(value))


def query_values(value: Optional[BaseModel]) -> Dict[str, List[str]]:
    """
    Flatten a model into a key -> values multi-map.

    Raises TypeError when given anything other than a pydantic model (or None);
    that is a caller bug, not an API failure.
    """
    values: Dict[str, List[str]] = {}
    if value is None:
        return values
    if not isinstance(value, BaseModel):
        raise TypeError(
            f"Query input must be a pydantic model, got {type(value).__name__}"
        )
    _reflect(value, values)
    return values


def encode_query(value: Optional[BaseModel]) -> str:
    """
    Encode a model as application/x-www-form-urlencoded text.

    Keys are sorted; values under one key keep their order.
    Example: GetCheckListInput(limit=10, tags=["apache", "nginx"])
        -> "limit=10&tags=apache%2Cnginx"
    """
    values = query_values(value)
    pairs: List[Tuple[str, str]] = []
    for key in sorted(values):
        for item in values[key]:
            pairs.append((key, item))
    return urlencode(pairs)


__all__ = [
    "Query",
    "LIST_STYLES",
    "field_rule",
    "is_empty",
    "format_scalar",
    "query_values",
    "encode_query",
]
