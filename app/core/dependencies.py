"""
FastAPI dependencies.

The calculation service is assembled per request from objects the
application factory placed on app.state.
"""
import logging
from typing import AsyncGenerator

from fastapi import Depends, Request

from app.core.config import Config
from app.database.session_manager.db_session import Database
from app.services.calculators.emission_calculator import EmissionCalculationService
from app.services.factors.database_provider import SQLAlchemyFactorProvider
from app.services.factors.provider import FactorProvider

logger = logging.getLogger(__name__)


def get_app_config(request: Request) -> Config:
    return request.app.state.config


async def get_factor_provider(request: Request) -> AsyncGenerator[FactorProvider, None]:
    """
    Yield the configured factor provider.

    "database" opens a session per request; anything else uses the static
    catalogue loaded at startup.
    """
    provider_name = request.app.state.config.section("factors").get("provider", "static")

    if provider_name == "database":
        async with Database() as session:
            yield SQLAlchemyFactorProvider(session)
    else:
        yield request.app.state.static_factor_provider


async def get_calculation_service(
    request: Request,
    provider: FactorProvider = Depends(get_factor_provider),
) -> EmissionCalculationService:
    config = request.app.state.config
    concurrency = config.section("emission_calculation").get("batch_concurrency", 1)

    return EmissionCalculationService(
        registry=request.app.state.strategy_registry,
        factor_provider=provider,
        batch_concurrency=max(int(concurrency), 1),
    )
