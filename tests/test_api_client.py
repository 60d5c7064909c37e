"""Tests for the backend API client."""

import httpx
import pytest

from nvr_exports.schemas.export import CreateExportRequest, ExportMode
from nvr_exports.services.api_client import ExportAPIClient, ExportAPIError, encode_path_segment


def test_encode_path_segment_matches_encode_uri_component():
    assert encode_path_segment("Front Door (evening)") == "Front%20Door%20(evening)"
    assert encode_path_segment("a/b?c") == "a%2Fb%3Fc"
    assert encode_path_segment("café") == "caf%C3%A9"


async def test_get_exports(api_client: ExportAPIClient):
    exports = await api_client.get_exports()
    assert [e.id for e in exports] == ["42", "43", "44"]
    assert exports[0].name == "Front_Door"


async def test_get_config(api_client: ExportAPIClient):
    config = await api_client.get_config()
    assert config.camera_names == ["front_door", "garage", "backyard"]


async def test_start_export_posts_playback_and_name(api_client, backend):
    request = CreateExportRequest(
        camera="garage", name="Delivery", start=1704099600, end=1704103200,
        mode=ExportMode.TIMELAPSE_25X,
    )
    response = await api_client.start_export(request)
    assert response.status_code == 200
    assert backend.created == [
        {
            "camera": "garage",
            "start": 1704099600,
            "end": 1704103200,
            "playback": "timelapse_25x",
            "name": "Delivery",
        }
    ]


async def test_rename_sends_decoded_name(api_client, backend):
    response = await api_client.rename_export("43", "Garage (morning)")
    assert response.status_code == 200
    assert backend.exports[1]["name"] == "Garage (morning)"


async def test_error_body_message_is_kept(api_client, backend):
    backend.fail("delete", status_code=400, message="Export is still in progress")

    with pytest.raises(ExportAPIError) as exc_info:
        await api_client.delete_export("42")

    assert exc_info.value.status_code == 400
    assert exc_info.value.user_message == "Export is still in progress"


async def test_error_without_body_uses_status_text(api_client, backend):
    backend.fail("delete", status_code=500)

    with pytest.raises(ExportAPIError) as exc_info:
        await api_client.delete_export("42")

    assert exc_info.value.backend_message is None
    assert exc_info.value.user_message == "Request failed with status code 500"


async def test_http_errors_are_not_retried(api_client, backend):
    backend.fail("list", status_code=503)

    with pytest.raises(ExportAPIError):
        await api_client.get_exports()

    assert len(backend.calls_for("list")) == 1


async def test_reads_retry_transport_errors(settings):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        if len(attempts) < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=[])

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=settings.api_url)
    client = ExportAPIClient(settings, http_client=http_client)

    assert await client.get_exports() == []
    assert attempts == ["/api/exports"] * 3
    await client.close()


async def test_mutations_are_not_retried(settings):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=settings.api_url)
    client = ExportAPIClient(settings, http_client=http_client)

    with pytest.raises(ExportAPIError) as exc_info:
        await client.delete_export("42")

    assert attempts == ["DELETE"]
    assert exc_info.value.status_code is None
    assert "connection refused" in exc_info.value.user_message
    await client.close()


async def test_malformed_exports_payload(settings):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"oops": True})),
        base_url=settings.api_url,
    )
    client = ExportAPIClient(settings, http_client=http_client)

    with pytest.raises(ExportAPIError, match="Malformed exports response"):
        await client.get_exports()
    await client.close()


async def test_client_created_lazily_from_settings(settings):
    client = ExportAPIClient(settings)
    http_client = await client._get_http_client()
    assert str(http_client.base_url) == "http://testserver/api/"
    await client.close()
    assert http_client.is_closed
