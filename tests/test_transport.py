"""HttpClient / PlayerAPI: envelope parsing and failure synthesis."""

import httpx
import pytest

from uncharted_reach import ApiStatus, PlayerAPI, ResourceType
from uncharted_reach.errors import JSON_PARSE_ERROR_CODE, TRANSPORT_ERROR_CODE, UNEXPECTED_DATA_CODE
from uncharted_reach.transport.http import HttpClient

from conftest import BASE_URL, PROFILE_BODY, RecordingBackend

TOKEN = "id-token-abc"


def make_api(backend) -> PlayerAPI:
    transport = backend.transport() if isinstance(backend, RecordingBackend) else httpx.MockTransport(backend)
    return PlayerAPI(HttpClient(BASE_URL + "/", transport=transport))


@pytest.mark.asyncio
async def test_fetch_profile_success():
    backend = RecordingBackend()
    envelope = await make_api(backend).fetch_profile(TOKEN)

    assert envelope.ok
    assert envelope.code == "PLAYER_PROFILE_OK"
    assert envelope.request_id == "req-123"
    profile = envelope.data
    assert profile.player_id == 42
    assert profile.external_uid == "uid-pilot"
    assert profile.display_name == "Nova"
    assert [r.type for r in profile.resources] == [ResourceType.WATER, ResourceType.ASTERITE]
    assert profile.resource(ResourceType.ASTERITE) == 7
    assert profile.resource(ResourceType.VOLTARIS) == 0

    [request] = backend.requests
    assert str(request.url) == f"{BASE_URL}/api/v1/player/profile"
    assert request.headers["Authorization"] == f"Bearer {TOKEN}"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["Content-Type"] == "application/json"
    assert request.content == b""


@pytest.mark.asyncio
async def test_server_error_with_empty_body():
    envelope = await make_api(RecordingBackend(status_code=500, body="")).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.FAIL
    assert envelope.code == "500"
    assert envelope.data is None
    assert envelope.message == "HTTP 500 Internal Server Error"
    assert envelope.timestamp


@pytest.mark.asyncio
async def test_error_body_envelope_is_preserved():
    body = {
        "status": "ERROR",
        "message": "Token expired",
        "code": "AUTH_TOKEN_EXPIRED",
        "requestId": "req-401",
        "timestamp": "2025-03-02T00:00:00Z",
        "data": None,
    }
    envelope = await make_api(RecordingBackend(status_code=401, body=body)).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.ERROR
    assert envelope.code == "AUTH_TOKEN_EXPIRED"
    assert envelope.message == "Token expired"
    assert envelope.request_id == "req-401"
    assert envelope.timestamp == "2025-03-02T00:00:00Z"
    assert envelope.data is None


@pytest.mark.asyncio
async def test_malformed_json_success_body():
    envelope = await make_api(RecordingBackend(status_code=200, body="{")).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.FAIL
    assert envelope.code == JSON_PARSE_ERROR_CODE == "JSON_PARSE_ERROR"
    assert envelope.data is None
    assert "JSON parsing failed" in envelope.message


@pytest.mark.asyncio
async def test_non_success_envelope_on_200_keeps_fields():
    body = {"status": "fail", "message": "Profile locked", "code": "PLAYER_LOCKED", "requestId": "req-7", "data": None}
    envelope = await make_api(RecordingBackend(body=body)).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.FAIL
    assert envelope.code == "PLAYER_LOCKED"
    assert envelope.message == "Profile locked"
    assert envelope.request_id == "req-7"
    assert envelope.data is None


@pytest.mark.asyncio
async def test_success_without_data_is_downgraded():
    body = {"status": "SUCCESS", "message": "", "data": None, "requestId": "req-8"}
    envelope = await make_api(RecordingBackend(body=body)).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.FAIL
    assert envelope.code == UNEXPECTED_DATA_CODE
    assert envelope.request_id == "req-8"
    assert "unexpected data format" in envelope.message


@pytest.mark.asyncio
async def test_success_with_wrong_shape():
    body = dict(PROFILE_BODY, data={"displayName": "no id"})
    envelope = await make_api(RecordingBackend(body=body)).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.FAIL
    assert envelope.code == "PLAYER_PROFILE_OK"
    assert envelope.data is None


@pytest.mark.asyncio
async def test_json_array_body():
    envelope = await make_api(RecordingBackend(body=[1, 2])).fetch_profile(TOKEN)

    assert envelope.code == UNEXPECTED_DATA_CODE
    assert envelope.data is None


@pytest.mark.asyncio
async def test_connection_failure():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    envelope = await make_api(refuse).fetch_profile(TOKEN)

    assert envelope.status == ApiStatus.FAIL
    assert envelope.code == TRANSPORT_ERROR_CODE
    assert envelope.message == "connection refused"
    assert envelope.data is None


@pytest.mark.asyncio
async def test_empty_token_is_refused():
    backend = RecordingBackend()
    with pytest.raises(ValueError):
        await make_api(backend).fetch_profile("")
    assert backend.requests == []
