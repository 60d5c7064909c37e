import httpx
import pytest

from nvr_exports.controller import ExportsController
from nvr_exports.core.config import Settings
from nvr_exports.services.api_client import ExportAPIClient
from nvr_exports.services.external_state import SearchParams
from nvr_exports.services.notifications import NotificationCenter
from nvr_exports.services.registry import ExportRegistry
from tests.fake_backend import FakeBackend


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        base_url="http://testserver/",
        timezone="UTC",
        fetch_retry_attempts=3,
        fetch_retry_min_wait=0,
        fetch_retry_max_wait=0,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def http_client(backend: FakeBackend, settings: Settings):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=backend.app),
        base_url=settings.api_url,
    ) as client:
        yield client


@pytest.fixture
def api_client(settings: Settings, http_client: httpx.AsyncClient) -> ExportAPIClient:
    return ExportAPIClient(settings, http_client=http_client)


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def registry(api_client: ExportAPIClient) -> ExportRegistry:
    return ExportRegistry(api_client)


@pytest.fixture
def params() -> SearchParams:
    return SearchParams()


@pytest.fixture
def controller(settings, api_client, notifications, params) -> ExportsController:
    return ExportsController(
        settings=settings,
        api_client=api_client,
        notifier=notifications,
        params=params,
    )
