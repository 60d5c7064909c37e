import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from nvr_exports.core.config import Settings, get_settings
from nvr_exports.core.retry import with_retry
from nvr_exports.schemas.config import CameraConfig
from nvr_exports.schemas.export import CreateExportRequest, ErrorResponse, Export

logger = logging.getLogger(__name__)


def encode_path_segment(value: str) -> str:
    """Quote a path segment the way encodeURIComponent does."""
    return quote(value, safe="!~*'()")


class ExportAPIError(Exception):
    """A backend call failed, either in transport or with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        backend_message: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.backend_message = backend_message

    @property
    def user_message(self) -> str:
        """Backend-supplied message when present, else the transport error."""
        return self.backend_message or str(self)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ExportAPIError":
        backend_message = None
        try:
            backend_message = ErrorResponse.model_validate(response.json()).message
        except (ValueError, ValidationError):
            pass
        return cls(
            f"Request failed with status code {response.status_code}",
            status_code=response.status_code,
            backend_message=backend_message,
        )


class ExportAPIClient:
    """Async client for the export endpoints of the recording backend."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._http_client = http_client
        self._read_retry = with_retry(
            max_attempts=self.settings.fetch_retry_attempts,
            min_wait=self.settings.fetch_retry_min_wait,
            max_wait=self.settings.fetch_retry_max_wait,
        )

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                base_url=self.settings.api_url,
                timeout=httpx.Timeout(self.settings.request_timeout_seconds),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            )
        return self._http_client

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = await self._get_http_client()
        logger.debug("%s %s", method, path)
        response = await client.request(method, path, **kwargs)
        if response.is_error:
            raise ExportAPIError.from_response(response)
        return response

    async def _call(self, method: str, path: str, retry: bool = False, **kwargs) -> httpx.Response:
        send = self._read_retry(self._send) if retry else self._send
        try:
            return await send(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ExportAPIError(str(e) or e.__class__.__name__) from e

    async def get_exports(self) -> list[Export]:
        response = await self._call("GET", "exports", retry=True)
        try:
            return [Export.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            raise ExportAPIError(f"Malformed exports response: {e}") from e

    async def get_config(self) -> CameraConfig:
        response = await self._call("GET", "config", retry=True)
        try:
            return CameraConfig.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ExportAPIError(f"Malformed config response: {e}") from e

    async def start_export(self, request: CreateExportRequest) -> httpx.Response:
        path = (
            f"export/{encode_path_segment(request.camera)}"
            f"/start/{request.start}/end/{request.end}"
        )
        logger.info(
            "Starting %s export for %s (%d -> %d)",
            request.mode.value,
            request.camera,
            request.start,
            request.end,
        )
        return await self._call("POST", path, json=request.payload())

    async def rename_export(self, export_id: str, new_name: str) -> httpx.Response:
        logger.info("Renaming export %s to %r", export_id, new_name)
        path = f"export/{encode_path_segment(export_id)}/{encode_path_segment(new_name)}"
        return await self._call("PATCH", path)

    async def delete_export(self, file: str) -> httpx.Response:
        logger.info("Deleting export %s", file)
        return await self._call("DELETE", f"export/{encode_path_segment(file)}")

    async def close(self):
        """Clean up resources."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
