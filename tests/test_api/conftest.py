import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_rate_source
from api.main import create_app
from config.settings import Settings
from infrastructure.providers import InMemoryRateSource

FIXED_TIME = 1_700_000_000_000


@pytest.fixture
def settings():
    return Settings(_env_file=None, ENVIRONMENT='test', USE_MOCK_RATES=True)


@pytest.fixture
def rate_source():
    return InMemoryRateSource(clock=lambda: FIXED_TIME)


@pytest.fixture
def app(settings, rate_source):
    app = create_app(settings)
    app.dependency_overrides[get_rate_source] = lambda: rate_source
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
