from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import (
    APP_KEY_ENV,
    EMAIL_ADDRESS_ENV,
    PASSWORD_ENV,
    PingdomConfig,
    load_env_config,
    merge_config,
)
from .observability import log_api_call
from .query import encode_query

T = TypeVar("T", bound=BaseModel)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
APP_KEY_HEADER = "App-Key"


class PingdomClientError(Exception):
    """Base error for client failures."""


class UnsupportedMethodError(PingdomClientError, ValueError):
    def __init__(self, method: str):
        super().__init__(f"API request method {method} not supported by Pingdom")
        self.method = method


class PingdomProtocolError(PingdomClientError):
    """The request never got an HTTP response (DNS, connect, TLS, timeout)."""


class PingdomDecodeError(PingdomClientError):
    """A 200 response whose body did not decode into the expected shape."""


class PingdomHTTPError(PingdomClientError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        status: str,
        method: str,
        url: str,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status = status
        self.method = method
        self.url = url
        self.response_text = response_text


class PingdomAPIError(PingdomHTTPError):
    """Non-200 response carrying Pingdom's JSON error body."""

    def __init__(
        self,
        message: str,
        *,
        status_desc: str,
        error_message: str,
        error_code: int,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.status_desc = status_desc
        self.error_message = error_message
        # The nested "statuscode" field; the message uses the HTTP status.
        self.error_code = error_code


class PingdomNonAPIError(PingdomHTTPError):
    """Non-200 response whose body is not a Pingdom error (proxy pages etc)."""


class ErrorDetail(BaseModel):
    status_code: int = Field(default=0, alias="statuscode")
    status_desc: str = Field(default="", alias="statusdesc")
    error_message: str = Field(default="", alias="errormessage")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ErrorEnvelope(BaseModel):
    error: ErrorDetail

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class ResponseEnvelope:
    """Status and full body of a response, readable after the connection is gone."""

    status_code: int
    status: str
    body: bytes

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "ResponseEnvelope":
        reason = resp.reason_phrase or ""
        return cls(
            status_code=resp.status_code,
            status=f"{resp.status_code} {reason}".strip(),
            body=resp.content,
        )

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


class PingdomClient:
    """
    Async HTTP client for the Pingdom REST API (2.0).
    - Encodes input models as form/query strings
    - Handles basic auth plus the App-Key header
    - Classifies responses: 200 decodes, anything else raises
    - One attempt per call; no retries
    """

    def __init__(
        self,
        config: PingdomConfig,
        *,
        timeout_seconds: float = 10.0,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
        request_id: Optional[str] = None,
    ):
        endpoint = (config.endpoint or "").rstrip("/")
        if not endpoint:
            raise ValueError("endpoint must be provided.")
        if not config.email_address:
            raise ValueError("email_address must be provided.")
        if not config.password:
            raise ValueError("password must be provided.")
        if not config.app_key:
            raise ValueError("app_key must be provided.")

        self.config = config
        self.base_url = endpoint
        self.timeout_seconds = timeout_seconds
        self.request_id = request_id
        self.log = logger or logging.getLogger("pingdom_sdk.client")

        # Sent on every request so an injected AsyncClient is authenticated too.
        self._auth = httpx.BasicAuth(config.email_address, config.password)
        self._headers = {
            APP_KEY_HEADER: config.app_key,
            "Accept": "application/json",
        }

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            timeout=timeout_seconds,
            proxy=config.proxy or None,
        )

    @classmethod
    def from_env(cls, *overrides: PingdomConfig, **kwargs: Any) -> "PingdomClient":
        config = merge_config(load_env_config(), *overrides)
        return cls(config, **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "PingdomClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        data: Optional[BaseModel] = None,
        model: Optional[Type[T]] = None,
    ) -> Any:
        """
        Core request method.
        - Raises UnsupportedMethodError for anything but GET/POST/PUT/DELETE
        - Raises PingdomProtocolError when no response was received
        - Raises PingdomAPIError / PingdomNonAPIError on non-200 responses
        - Raises PingdomDecodeError if a 200 body isn't JSON (or doesn't fit model)
        - Returns the decoded JSON, validated into ``model`` when given
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(method)

        qs = encode_query(data)
        url = f"{self.base_url}{path}"
        headers = dict(self._headers)
        content: Optional[bytes] = None

        if method == "GET":
            if qs:
                url = f"{url}?{qs}"
        else:
            headers["Content-Type"] = FORM_CONTENT_TYPE
            content = qs.encode("ascii")

        start = time.perf_counter()
        try:
            resp = await self.http.request(
                method, url, content=content, headers=headers, auth=self._auth
            )
        except httpx.HTTPError as exc:
            log_api_call(
                request_id=self.request_id,
                method=method,
                endpoint=path,
                status="exception",
                error_type=type(exc).__name__,
                start=start,
            )
            raise PingdomProtocolError(f"HTTP protocol error: {exc}") from exc

        envelope = ResponseEnvelope.from_response(resp)
        self.log.debug(
            "%s %s -> %s (%d bytes)", method, path, envelope.status, len(envelope.body)
        )
        log_api_call(
            request_id=self.request_id,
            method=method,
            endpoint=path,
            status=envelope.status_code,
            start=start,
        )

        # Pingdom answers 200 on every success; anything else is an error.
        if envelope.status_code != 200:
            raise self._to_error(envelope, method=method, url=url)

        return self._decode(envelope, model)

    def _decode(self, envelope: ResponseEnvelope, model: Optional[Type[T]]) -> Any:
        try:
            payload = envelope.json()
        except ValueError as exc:
            raise PingdomDecodeError(f"JSON parsing error: {exc}") from exc

        if model is None:
            return payload
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise PingdomDecodeError(f"JSON parsing error: {exc}") from exc

    @staticmethod
    def _to_error(
        envelope: ResponseEnvelope, *, method: str, url: str
    ) -> PingdomHTTPError:
        common = {
            "status_code": envelope.status_code,
            "status": envelope.status,
            "method": method,
            "url": url,
            "response_text": envelope.text,
        }
        try:
            parsed = ErrorEnvelope.model_validate_json(envelope.body)
        except ValidationError:
            # Most likely HTML from a load balancer; hand the body back verbatim.
            return PingdomNonAPIError(
                f"Non-API error ({envelope.status}): {envelope.text}", **common
            )

        err = parsed.error
        return PingdomAPIError(
            f"{err.status_desc} ({envelope.status_code}): {err.error_message}",
            status_desc=err.status_desc,
            error_message=err.error_message,
            error_code=err.status_code,
            **common,
        )

    async def get(
        self,
        path: str,
        *,
        data: Optional[BaseModel] = None,
        model: Optional[Type[T]] = None,
    ) -> Any:
        return await self.request("GET", path, data=data, model=model)

    async def post(
        self,
        path: str,
        *,
        data: Optional[BaseModel] = None,
        model: Optional[Type[T]] = None,
    ) -> Any:
        return await self.request("POST", path, data=data, model=model)

    async def put(
        self,
        path: str,
        *,
        data: Optional[BaseModel] = None,
        model: Optional[Type[T]] = None,
    ) -> Any:
        return await self.request("PUT", path, data=data, model=model)

    async def delete(
        self,
        path: str,
        *,
        data: Optional[BaseModel] = None,
        model: Optional[Type[T]] = None,
    ) -> Any:
        return await self.request("DELETE", path, data=data, model=model)


def create_client_from_env(*overrides: PingdomConfig, **kwargs: Any) -> PingdomClient:
    """Create a PingdomClient from PINGDOM_* environment variables plus overrides."""
    config = merge_config(load_env_config(), *overrides)
    if not config.has_credentials:
        raise ValueError(
            f"Missing {EMAIL_ADDRESS_ENV}, {PASSWORD_ENV} or {APP_KEY_ENV} "
            "in environment."
        )
    return PingdomClient(config, **kwargs)


__all__ = [
    "PingdomClient",
    "create_client_from_env",
    "ResponseEnvelope",
    "ErrorEnvelope",
    "ErrorDetail",
    "SUPPORTED_METHODS",
    "FORM_CONTENT_TYPE",
    "APP_KEY_HEADER",
    "PingdomClientError",
    "UnsupportedMethodError",
    "PingdomProtocolError",
    "PingdomDecodeError",
    "PingdomHTTPError",
    "PingdomAPIError",
    "PingdomNonAPIError",
]
