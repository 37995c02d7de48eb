"""Per-resource operations; each takes a PingdomClient as its first argument."""

from . import checks, contacts

__all__ = ["checks", "contacts"]
