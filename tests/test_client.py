import base64
import json
from pathlib import Path

import httpx
import pytest
import respx
from httpx import Response
from pingdom_sdk.client import (
    FORM_CONTENT_TYPE,
    PingdomAPIError,
    PingdomClient,
    PingdomClientError,
    PingdomDecodeError,
    PingdomNonAPIError,
    PingdomProtocolError,
    ResponseEnvelope,
    UnsupportedMethodError,
)
from pingdom_sdk.config import PingdomConfig
from pingdom_sdk.models import CreateCheckOutput, GetCheckListInput
from pydantic import BaseModel

ENDPOINT = "https://api.pingdom.test"
CHECKS_URL = f"{ENDPOINT}/api/2.0/checks"

OK_BODY = {"check": {"id": 138631, "name": "My new HTTP check"}}


def load_fixture(name: str) -> str:
    return (Path(__file__).parent / "fixtures" / name).read_text(encoding="utf-8")


class BasicInput(BaseModel):
    id: int
    name: str


@pytest.fixture
def config():
    return PingdomConfig(
        email_address="nobody@example.com",
        password="changeit",
        app_key="0123456789abcdefgh",
        endpoint=ENDPOINT,
    )


@pytest.fixture
def client(config):
    return PingdomClient(config)


@pytest.mark.asyncio
@respx.mock
async def test_post_success_decodes_into_model(client):
    route = respx.post(CHECKS_URL).mock(return_value=Response(200, json=OK_BODY))

    async with client:
        out = await client.post(
            "/api/2.0/checks",
            data=BasicInput(id=1234, name="My new HTTP check"),
            model=CreateCheckOutput,
        )

    assert out.check.id == 138631
    assert out.check.name == "My new HTTP check"

    req = route.calls[0].request
    assert req.headers["Content-Type"] == FORM_CONTENT_TYPE
    assert req.content == b"id=1234&name=My+new+HTTP+check"
    assert req.url.query == b""


@pytest.mark.asyncio
@respx.mock
async def test_get_success_sends_query_string_and_no_body(client):
    route = respx.get(CHECKS_URL).mock(return_value=Response(200, json=OK_BODY))

    async with client:
        out = await client.get(
            "/api/2.0/checks",
            data=GetCheckListInput(limit=10, include_tags=True, tags=["a", "b"]),
        )

    assert out == OK_BODY
    req = route.calls[0].request
    assert req.url.query == b"include_tags=true&limit=10&tags=a%2Cb"
    assert req.content == b""
    assert "Content-Type" not in req.headers


@pytest.mark.asyncio
@respx.mock
async def test_get_without_input_has_no_query(client):
    route = respx.get(f"{CHECKS_URL}/85975").mock(
        return_value=Response(200, json={"check": {"id": 85975}})
    )

    async with client:
        await client.get("/api/2.0/checks/85975")

    assert str(route.calls[0].request.url) == f"{CHECKS_URL}/85975"


@pytest.mark.asyncio
@respx.mock
async def test_auth_and_app_key_headers(client):
    route = respx.get(CHECKS_URL).mock(return_value=Response(200, json={}))

    async with client:
        await client.get("/api/2.0/checks")

    sent = route.calls[0].request.headers
    expected = "Basic " + base64.b64encode(b"nobody@example.com:changeit").decode()
    assert sent.get("Authorization") == expected
    assert sent.get("App-Key") == "0123456789abcdefgh"


@pytest.mark.asyncio
@respx.mock
async def test_injected_http_client_is_still_authenticated(config):
    route = respx.delete(f"{CHECKS_URL}/1").mock(
        return_value=Response(200, json={"message": "ok"})
    )

    async with httpx.AsyncClient() as http:
        client = PingdomClient(config, http=http)
        await client.delete("/api/2.0/checks/1")
        await client.aclose()
        # Not owned by PingdomClient; still usable.
        assert not http.is_closed

    sent = route.calls[0].request.headers
    assert sent.get("App-Key") == "0123456789abcdefgh"
    assert sent.get("Authorization", "").startswith("Basic ")
    assert sent["Content-Type"] == FORM_CONTENT_TYPE


@pytest.mark.asyncio
@respx.mock
async def test_put_sends_form_body(client):
    route = respx.put(f"{CHECKS_URL}/7").mock(
        return_value=Response(
            200, json={"message": "Modification of check was successful!"}
        )
    )

    async with client:
        out = await client.request(
            "put", "/api/2.0/checks/7", data=BasicInput(id=7, name="a b")
        )

    assert out["message"] == "Modification of check was successful!"
    assert route.calls[0].request.content == b"id=7&name=a+b"


@pytest.mark.asyncio
@respx.mock
async def test_api_error_message_uses_http_status(client):
    respx.post(CHECKS_URL).mock(
        return_value=Response(403, text=load_fixture("error_forbidden.json"))
    )

    async with client:
        with pytest.raises(PingdomAPIError) as exc:
            await client.post("/api/2.0/checks", data=BasicInput(id=1, name="x"))

    assert (
        str(exc.value)
        == "Forbidden (403): Something went wrong! This string describes what happened."
    )
    assert exc.value.status_code == 403
    assert exc.value.status_desc == "Forbidden"
    assert exc.value.method == "POST"


@pytest.mark.asyncio
@respx.mock
async def test_api_error_ignores_nested_statuscode_in_message(client):
    body = {
        "error": {
            "statuscode": 999,
            "statusdesc": "Bad Request",
            "errormessage": "Invalid parameter value: resolution",
        }
    }
    respx.get(CHECKS_URL).mock(return_value=Response(400, json=body))

    async with client:
        with pytest.raises(PingdomAPIError) as exc:
            await client.get("/api/2.0/checks")

    assert str(exc.value) == "Bad Request (400): Invalid parameter value: resolution"
    assert exc.value.error_code == 999


@pytest.mark.asyncio
@respx.mock
async def test_non_json_error_body_is_returned_verbatim(client):
    html = load_fixture("service_unavailable.html")
    respx.post(CHECKS_URL).mock(return_value=Response(503, text=html))

    async with client:
        with pytest.raises(PingdomNonAPIError) as exc:
            await client.post("/api/2.0/checks", data=BasicInput(id=1, name="x"))

    assert str(exc.value) == f"Non-API error (503 Service Unavailable): {html}"
    assert exc.value.response_text == html
    assert exc.value.status == "503 Service Unavailable"


@pytest.mark.asyncio
@respx.mock
async def test_json_error_body_of_wrong_shape_is_non_api(client):
    respx.get(CHECKS_URL).mock(
        return_value=Response(502, text='{"detail": "nope"}')
    )

    async with client:
        with pytest.raises(PingdomNonAPIError) as exc:
            await client.get("/api/2.0/checks")

    assert str(exc.value) == 'Non-API error (502 Bad Gateway): {"detail": "nope"}'


@pytest.mark.asyncio
@respx.mock
async def test_only_200_is_success(client):
    respx.post(CHECKS_URL).mock(return_value=Response(201, json=OK_BODY))

    async with client:
        with pytest.raises(PingdomNonAPIError):
            await client.post("/api/2.0/checks")


@pytest.mark.asyncio
@respx.mock
async def test_non_json_success_raises_decode_error(client):
    respx.get(CHECKS_URL).mock(return_value=Response(200, text="<html>Not JSON</html>"))

    async with client:
        with pytest.raises(PingdomDecodeError) as exc:
            await client.get("/api/2.0/checks")

    assert str(exc.value).startswith("JSON parsing error: ")
    assert isinstance(exc.value.__cause__, ValueError)


@pytest.mark.asyncio
@respx.mock
async def test_success_body_not_matching_model_raises_decode_error(client):
    respx.post(CHECKS_URL).mock(
        return_value=Response(200, json={"check": {"name": "missing id"}})
    )

    async with client:
        with pytest.raises(PingdomDecodeError):
            await client.post("/api/2.0/checks", model=CreateCheckOutput)


@pytest.mark.asyncio
@respx.mock
async def test_connect_failure_is_protocol_error(client):
    respx.get(CHECKS_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    async with client:
        with pytest.raises(PingdomProtocolError) as exc:
            await client.get("/api/2.0/checks")

    assert str(exc.value) == "HTTP protocol error: connection refused"
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
@respx.mock
async def test_timeout_is_protocol_error_and_not_retried(client):
    route = respx.post(CHECKS_URL).mock(side_effect=httpx.ReadTimeout("slow"))

    async with client:
        with pytest.raises(PingdomProtocolError):
            await client.post("/api/2.0/checks")

    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_server_errors_are_not_retried(client):
    route = respx.get(CHECKS_URL).mock(
        side_effect=[Response(503, text="busy"), Response(200, json={})]
    )

    async with client:
        with pytest.raises(PingdomNonAPIError):
            await client.get("/api/2.0/checks")

    assert route.call_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["OPTIONS", "PATCH", "HEAD", "TRACE"])
@respx.mock
async def test_unsupported_method_rejected_before_io(client, method):
    route = respx.route().mock(return_value=Response(200, json={}))

    async with client:
        with pytest.raises(UnsupportedMethodError) as exc:
            await client.request(
                method, "/api/2.0/checks", data=BasicInput(id=1, name="x")
            )

    assert str(exc.value) == f"API request method {method} not supported by Pingdom"
    assert isinstance(exc.value, PingdomClientError)
    assert not route.called


@pytest.mark.asyncio
async def test_unsupported_method_checked_before_encoding(client):
    async with client:
        with pytest.raises(UnsupportedMethodError):
            await client.request("OPTIONS", "/api/2.0/checks", data={"not": "a model"})


@pytest.mark.asyncio
async def test_non_model_input_is_a_type_error(client):
    async with client:
        with pytest.raises(TypeError):
            await client.post("/api/2.0/checks", data={"id": 1})


@pytest.mark.parametrize(
    "field", ["email_address", "password", "app_key", "endpoint"]
)
def test_constructor_requires_credentials_and_endpoint(config, field):
    values = {
        "email_address": config.email_address,
        "password": config.password,
        "app_key": config.app_key,
        "endpoint": config.endpoint,
    }
    values[field] = ""
    with pytest.raises(ValueError):
        PingdomClient(PingdomConfig(**values))


def test_trailing_slash_endpoint_is_normalised(config):
    client = PingdomClient(
        PingdomConfig(
            email_address=config.email_address,
            password=config.password,
            app_key=config.app_key,
            endpoint=ENDPOINT + "/",
        )
    )
    assert client.base_url == ENDPOINT


def test_response_envelope_keeps_body_after_close():
    resp = Response(418, content=json.dumps({"a": 1}).encode())
    envelope = ResponseEnvelope.from_response(resp)
    resp.close()

    assert envelope.status_code == 418
    assert envelope.status == "418 I'm a teapot"
    assert envelope.json() == {"a": 1}
    assert envelope.text == '{"a": 1}'
