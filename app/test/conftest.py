"""
Pytest configuration and fixtures.
"""
import logging

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import ConfigFile, get_config
from app.create_app import get_app
from app.services.calculators.emission_calculator import EmissionCalculationService
from app.services.calculators.registry import StrategyRegistry
from app.services.factors.provider import StaticFactorProvider

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@pytest.fixture(scope="session")
def test_config():
    """
    Get test configuration.

    Returns configuration with the static factor catalogue.
    """
    return get_config(ConfigFile.TEST)


@pytest.fixture
def strategy_registry():
    return StrategyRegistry.default()


@pytest.fixture
def empty_factor_provider():
    """Provider that never finds a factor, so defaults always apply."""
    return StaticFactorProvider()


@pytest.fixture
def catalogue_factor_provider(test_config):
    return StaticFactorProvider.from_config(
        test_config.section("factors").get("catalogue", [])
    )


@pytest.fixture
def calculation_service(strategy_registry, empty_factor_provider):
    """Sequential service backed by an empty catalogue."""
    return EmissionCalculationService(
        registry=strategy_registry,
        factor_provider=empty_factor_provider,
        batch_concurrency=1,
    )


@pytest_asyncio.fixture(scope="function")
async def test_app(test_config):
    """
    Create FastAPI application with test configuration.

    Returns configured FastAPI app instance for testing.
    """
    app = get_app(ConfigFile.TEST)
    app.state.config = test_config

    yield app


@pytest_asyncio.fixture(scope="function")
async def test_async_client(test_app):
    """
    Create async HTTP client for API testing.

    Uses httpx AsyncClient with ASGITransport for testing FastAPI endpoints.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://localhost:8000", follow_redirects=True
    ) as ac:
        yield ac
