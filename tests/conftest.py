"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import app
from src.ss_balance.domain.cache import SharedCache
from src.ss_supply.application.service import SupplyApplicationService
from tests.fakes import SCENARIO_BALANCES, FakeFetcher, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(SCENARIO_BALANCES)


@pytest.fixture
def cache() -> SharedCache:
    return SharedCache()


@pytest.fixture
def supply_service(
    settings: Settings, fetcher: FakeFetcher, cache: SharedCache
) -> SupplyApplicationService:
    """Wired service with schedulers NOT started; tests drive refresh_once() by hand."""
    return SupplyApplicationService(settings, fetcher=fetcher, cache=cache)


@pytest.fixture
async def client(supply_service: SupplyApplicationService) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints.

    ASGITransport does not run the lifespan, so the service is attached to
    app.state directly.
    """
    app.state.supply_service = supply_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.supply_service = None
