import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from core.config import AppConfig, BackendConfig, SessionConfig
from core.gateway import FormsGateway
from tests.helpers.fake_backend import FakeBackend


BACKEND_URL = "http://backend.test/api"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def http_client(backend):
    async with httpx.AsyncClient(base_url=BACKEND_URL, transport=backend.transport) as client:
        yield client


@pytest.fixture
def gateway(http_client) -> FormsGateway:
    return FormsGateway(http_client, access_token="access-test")


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        backend=BackendConfig(base_url=BACKEND_URL),
        session=SessionConfig(secure_cookie=False),
    )


@pytest.fixture
def api(backend, app_config):
    from app import create_app

    app = create_app(config=app_config, transport=backend.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def logged_in(api):
    response = api.post("/api/auth/login", json={"username": "encoder", "password": "secret"})
    assert response.status_code == 200
    return api
