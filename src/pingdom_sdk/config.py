from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from dotenv import load_dotenv

DEFAULT_ENDPOINT = "https://api.pingdom.com"

EMAIL_ADDRESS_ENV = "PINGDOM_EMAIL_ADDRESS"
PASSWORD_ENV = "PINGDOM_PASSWORD"
APP_KEY_ENV = "PINGDOM_APP_KEY"


@dataclass(frozen=True)
class PingdomConfig:
    """Connection settings for the Pingdom API."""

    email_address: str = ""
    password: str = ""
    app_key: str = ""
    # Changing the endpoint is only recommended for testing.
    endpoint: str = DEFAULT_ENDPOINT
    proxy: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.email_address and self.password and self.app_key)

    def __repr__(self) -> str:
        return (
            f"PingdomConfig(email_address={self.email_address!r}, "
            f"password='***', app_key='***', endpoint={self.endpoint!r}, "
            f"proxy={self.proxy!r})"
        )


def load_env_config(*, use_dotenv: bool = True) -> PingdomConfig:
    """Build a config from PINGDOM_* environment variables (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return PingdomConfig(
        email_address=os.getenv(EMAIL_ADDRESS_ENV, "").strip(),
        password=os.getenv(PASSWORD_ENV, "").strip(),
        app_key=os.getenv(APP_KEY_ENV, "").strip(),
    )


def merge_config(base: PingdomConfig, *overrides: PingdomConfig) -> PingdomConfig:
    """
    Apply overrides on top of base, left to right.
    Only non-empty override values replace what is already set, so a
    PingdomConfig(app_key="k") changes the app key and nothing else.
    """
    merged = base
    for override in overrides:
        changes = {}
        for f in fields(PingdomConfig):
            value = getattr(override, f.name)
            if value in (None, ""):
                continue
            if f.name == "endpoint" and value == DEFAULT_ENDPOINT:
                # The dataclass default never wins over an explicit base endpoint.
                continue
            changes[f.name] = value
        merged = replace(merged, **changes)
    return merged


__all__ = [
    "DEFAULT_ENDPOINT",
    "EMAIL_ADDRESS_ENV",
    "PASSWORD_ENV",
    "APP_KEY_ENV",
    "PingdomConfig",
    "load_env_config",
    "merge_config",
]
