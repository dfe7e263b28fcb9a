"""
Service tests for emission factor providers and default fallback.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.database.schemas import EmissionFactorDBModel
from app.pydantic_models.calculation import CalculationOptions
from app.pydantic_models.emission_factor import EmissionFactorOverride
from app.services.calculators.emission_calculator import EmissionCalculationService
from app.services.calculators.pipeline import resolve_factor, run_pipeline
from app.services.factors.database_provider import SQLAlchemyFactorProvider
from app.services.factors.default_factors import (
    list_default_factors,
    road_default_factor,
    road_default_load_factor,
    wtw_ratio,
)
from app.services.factors.provider import (
    FactorLookupError,
    FactorProvider,
    StaticFactorProvider,
)
from app.test.factory.activity import (
    ActivityDataFactory,
    CalculationRequestFactory,
    RailActivityDataFactory,
)
from app.test.factory.emission_factor import (
    EmissionFactorFactory,
    RailEmissionFactorFactory,
)
from app.utils.constants import FactorSource, FuelType, TransportMode


def make_factor_row(**overrides):
    values = {
        "id": uuid.uuid4(),
        "transport_mode": "rail",
        "vehicle_type": "freight_train",
        "fuel_type": "electric",
        "co2_factor": Decimal("0.025"),
        "ch4_factor": None,
        "n2o_factor": None,
        "unit": "tkm",
        "scope": "wtw",
        "source": "Rail operator data",
        "version": "3.1",
        "region": "EU",
        "updated_at": datetime(2024, 3, 1),
    }
    values.update(overrides)
    return EmissionFactorDBModel(**values)


def mock_session_returning(rows):
    session = AsyncMock()
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    session.execute.return_value = result
    return session


@pytest.mark.asyncio
async def test_static_provider_matches_mode_vehicle_and_fuel():
    provider = StaticFactorProvider(
        [
            EmissionFactorFactory(id="truck-diesel"),
            EmissionFactorFactory(id="truck-electric", fuel_type=FuelType.ELECTRIC),
            EmissionFactorFactory(id="van-diesel", vehicle_type="van"),
        ]
    )

    factors = await provider.lookup(TransportMode.ROAD, "TRUCK", FuelType.DIESEL)

    assert [f.id for f in factors] == ["truck-diesel"]


@pytest.mark.asyncio
async def test_static_provider_treats_missing_keys_as_wildcards():
    provider = StaticFactorProvider(
        [RailEmissionFactorFactory(id="rail-1"), EmissionFactorFactory(id="road-1")]
    )

    factors = await provider.lookup(TransportMode.RAIL, None, None)

    assert [f.id for f in factors] == ["rail-1"]


def test_static_provider_satisfies_protocol(catalogue_factor_provider):
    assert isinstance(catalogue_factor_provider, FactorProvider)
    assert catalogue_factor_provider.factors[0].region == "UK"


@pytest.mark.asyncio
async def test_most_recently_updated_factor_wins(strategy_registry):
    provider = StaticFactorProvider(
        [
            EmissionFactorFactory(id="old", updated_at=datetime(2022, 1, 1)),
            EmissionFactorFactory(id="new", updated_at=datetime(2024, 6, 1)),
        ]
    )

    factor, source, note = await resolve_factor(
        strategy_registry.get("road"), ActivityDataFactory(), provider
    )

    assert factor.id == "new"
    assert source == FactorSource.PROVIDER
    assert note is None


@pytest.mark.asyncio
async def test_catalogue_mixing_naive_and_aware_timestamps(strategy_registry):
    entry = {
        "transport_mode": "road",
        "vehicle_type": "truck",
        "fuel_type": "diesel",
        "co2_factor": "0.1",
        "unit": "km",
        "source": "Fleet telematics",
        "version": "3.1",
    }
    provider = StaticFactorProvider.from_config(
        [
            {**entry, "id": "naive", "updated_at": datetime(2024, 1, 1)},
            {
                **entry,
                "id": "aware",
                "updated_at": datetime(2024, 6, 1, tzinfo=timezone.utc),
            },
        ]
    )
    service = EmissionCalculationService(strategy_registry, provider, batch_concurrency=1)

    result = await service.calculate_single(CalculationRequestFactory())

    assert result.input.emission_factor.id == "aware"
    assert result.metadata.factor_source == FactorSource.PROVIDER
    assert provider.factors[0].updated_at.tzinfo == timezone.utc


@pytest.mark.asyncio
async def test_lookup_failure_falls_back_to_default(strategy_registry, caplog):
    provider = AsyncMock()
    provider.lookup.side_effect = FactorLookupError("connection refused")
    request = CalculationRequestFactory()

    with caplog.at_level(logging.WARNING):
        result = await run_pipeline(strategy_registry.get("road"), request, provider)

    assert result.input.emission_factor.id == "default_road"
    assert result.metadata.factor_source == FactorSource.DEFAULT_LOOKUP_FAILED
    assert any("lookup failed" in a for a in result.metadata.assumptions)
    assert any(
        r.levelno == logging.ERROR and "connection refused" in r.getMessage()
        for r in caplog.records
    )


@pytest.mark.asyncio
async def test_empty_lookup_falls_back_to_default(strategy_registry, caplog):
    with caplog.at_level(logging.WARNING):
        result = await run_pipeline(
            strategy_registry.get("road"), CalculationRequestFactory(), StaticFactorProvider()
        )

    assert result.metadata.factor_source == FactorSource.DEFAULT_NOT_FOUND
    assert not any("lookup failed" in a for a in result.metadata.assumptions)
    assert any(
        r.levelno == logging.WARNING and "No emission factor found" in r.getMessage()
        for r in caplog.records
    )


@pytest.mark.asyncio
async def test_custom_emission_factor_overrides_resolved_factor(calculation_service):
    request = CalculationRequestFactory(
        activity_data=ActivityDataFactory(distance=Decimal("100"), load_factor=Decimal("0.5")),
        options=CalculationOptions(
            custom_emission_factor=EmissionFactorOverride(co2_factor=Decimal("0.2"))
        ),
    )

    result = await calculation_service.calculate_single(request)

    assert result.input.emission_factor.id == "default_road"
    assert result.input.emission_factor.co2_factor == Decimal("0.2")
    assert result.emissions.co2 == Decimal("40")
    assert "Custom emission factor override applied: co2_factor" in result.metadata.assumptions


@pytest.mark.asyncio
async def test_scope_flags_are_echoed_as_assumptions(calculation_service):
    plain = await calculation_service.calculate_single(CalculationRequestFactory())
    flagged = await calculation_service.calculate_single(
        CalculationRequestFactory(
            options=CalculationOptions(include_indirect_emissions=False, include_biogenic=False)
        )
    )

    assert flagged.emissions.total == plain.emissions.total
    assert len(flagged.metadata.assumptions) == len(plain.metadata.assumptions) + 2


@pytest.mark.asyncio
async def test_database_provider_maps_rows():
    session = mock_session_returning([make_factor_row(ch4_factor=Decimal("0.00001"))])
    provider = SQLAlchemyFactorProvider(session)

    factors = await provider.lookup(TransportMode.RAIL, None, FuelType.ELECTRIC)

    assert len(factors) == 1
    factor = factors[0]
    assert factor.transport_mode == TransportMode.RAIL
    assert factor.fuel_type == FuelType.ELECTRIC
    assert factor.co2_factor == Decimal("0.025")
    assert factor.ch4_factor == Decimal("0.00001")
    assert factor.n2o_factor is None
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_database_provider_wraps_query_errors():
    session = AsyncMock()
    session.execute.side_effect = SQLAlchemyError("relation does not exist")
    provider = SQLAlchemyFactorProvider(session)

    with pytest.raises(FactorLookupError):
        await provider.lookup(TransportMode.RAIL, None, FuelType.ELECTRIC)


@pytest.mark.asyncio
async def test_database_provider_factor_used_for_rail(strategy_registry):
    provider = SQLAlchemyFactorProvider(mock_session_returning([make_factor_row()]))
    request = CalculationRequestFactory(activity_data=RailActivityDataFactory())

    result = await run_pipeline(strategy_registry.get("rail"), request, provider)

    # 15000 tkm * 0.025 / 0.8
    assert result.emissions.co2 == Decimal("468.75")
    assert result.metadata.factor_source == FactorSource.PROVIDER


@pytest.mark.asyncio
async def test_database_outage_degrades_to_default(strategy_registry):
    session = AsyncMock()
    session.execute.side_effect = SQLAlchemyError("server closed the connection")
    provider = SQLAlchemyFactorProvider(session)
    request = CalculationRequestFactory(activity_data=RailActivityDataFactory())

    result = await run_pipeline(strategy_registry.get("rail"), request, provider)

    assert result.emissions.co2 == Decimal("525")
    assert result.metadata.factor_source == FactorSource.DEFAULT_LOOKUP_FAILED


def test_default_factor_tables():
    factors = list_default_factors()

    assert len(factors) == 9
    assert {f.id for f in list_default_factors(TransportMode.AIR)} == {"default_air"}
    assert road_default_factor("zeppelin", FuelType.DIESEL).co2_factor == Decimal("0.079")
    assert road_default_factor("van", FuelType.PETROL).co2_factor == Decimal("0.195")
    assert road_default_load_factor("van") == Decimal("0.6")
    assert road_default_load_factor(None) == Decimal("0.7")


def test_wtw_ratio_unknown_fuel_uses_diesel_split():
    assert wtw_ratio(FuelType.ELECTRIC) == (Decimal("0"), Decimal("1"))
    assert wtw_ratio("kerosene") == wtw_ratio(FuelType.DIESEL)
    assert wtw_ratio(None) == (Decimal("0.74"), Decimal("0.26"))


@pytest.mark.asyncio
async def test_database_provider_skips_invalid_rows(caplog):
    valid = make_factor_row()
    session = mock_session_returning(
        [make_factor_row(fuel_type="kerosene"), make_factor_row(scope="WTW"), valid]
    )
    provider = SQLAlchemyFactorProvider(session)

    with caplog.at_level(logging.WARNING):
        factors = await provider.lookup(TransportMode.RAIL, None, FuelType.ELECTRIC)

    assert [f.id for f in factors] == [str(valid.id)]
    assert (
        sum("Skipping invalid emission factor row" in r.getMessage() for r in caplog.records)
        == 2
    )
