"""
API tests for calculations endpoints.
"""

from decimal import Decimal

import pytest

from app.services.calculators.registry import StrategyRegistry
from app.services.calculators.road_calculator import build_road_strategy
from app.utils.constants import TransportMode

SCENARIO_A = {
    "activity_data": {
        "transport_mode": "road",
        "vehicle": {"type": "truck", "fuel_type": "diesel"},
        "distance": 500,
        "weight": 25,
    }
}


@pytest.mark.asyncio
async def test_calculate_road_leg(test_async_client):
    """Configured default precision applies when the request has none."""
    response = await test_async_client.post(
        "/api/v1/calculations/calculate", json=SCENARIO_A
    )
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["glec_version"] == "3.1"
    assert data["calculation_id"] == data["result"]["metadata"]["calculation_id"]
    assert data["calculation_id"].startswith("road_")

    result = data["result"]
    assert Decimal(result["emissions"]["co2"]) == Decimal("56.43")
    assert Decimal(result["breakdown"]["direct_emissions"]) == Decimal("41.76")
    assert Decimal(result["breakdown"]["indirect_emissions"]) == Decimal("14.67")
    assert result["metadata"]["confidence"] == "medium"
    assert result["metadata"]["factor_source"] == "default_not_found"
    assert result["input"]["calculation_method"] == "GLEC_ROAD_v3.1"


@pytest.mark.asyncio
async def test_calculate_uses_catalogue_factor(test_async_client):
    payload = {
        "activity_data": {
            "transport_mode": "road",
            "vehicle": {"type": "van", "fuel_type": "diesel"},
            "distance": 100,
            "load_factor": 0.5,
        }
    }

    response = await test_async_client.post("/api/v1/calculations/calculate", json=payload)
    assert response.status_code == 200

    result = response.json()["result"]
    assert result["input"]["emission_factor"]["id"] == "test-road-van-diesel-uk"
    assert result["metadata"]["factor_source"] == "provider"
    assert Decimal(result["emissions"]["total"]) == Decimal("40")


@pytest.mark.asyncio
async def test_calculate_air_with_explicit_precision(test_async_client):
    payload = {
        "activity_data": {
            "transport_mode": "air",
            "vehicle": {"type": "cargo_plane", "fuel_type": "jet_fuel"},
            "distance": 2000,
            "weight": 5,
        },
        "options": {"rounding_precision": 1},
    }

    response = await test_async_client.post("/api/v1/calculations/calculate", json=payload)
    assert response.status_code == 200

    breakdown = response.json()["result"]["breakdown"]
    assert Decimal(breakdown["direct_emissions"]) == Decimal("10723.1")
    assert Decimal(breakdown["indirect_emissions"]) == Decimal("3574.4")


@pytest.mark.asyncio
async def test_calculate_validation_error_returns_400(test_async_client):
    payload = {
        "activity_data": {
            "transport_mode": "road",
            "vehicle": {"fuel_type": "diesel"},
            "distance": 500,
        }
    }

    response = await test_async_client.post("/api/v1/calculations/calculate", json=payload)
    assert response.status_code == 400

    detail = response.json()["detail"]
    assert [e["code"] for e in detail["errors"]] == ["INVALID_VEHICLE"]
    assert detail["errors"][0]["field"] == "vehicle.type"


@pytest.mark.asyncio
async def test_calculate_unknown_mode_is_rejected(test_async_client):
    payload = {"activity_data": {"transport_mode": "pipeline", "distance": 10}}

    response = await test_async_client.post("/api/v1/calculations/calculate", json=payload)
    assert response.status_code == 422
    assert response.json()["message"] == "Validation error"


@pytest.mark.asyncio
async def test_calculate_rejects_out_of_range_precision(test_async_client):
    payload = {**SCENARIO_A, "options": {"rounding_precision": 9}}

    response = await test_async_client.post("/api/v1/calculations/calculate", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_batch_endpoint(test_async_client):
    invalid = {"activity_data": {"transport_mode": "rail", "distance": 300}}
    rail = {
        "activity_data": {
            "transport_mode": "rail",
            "vehicle": {"fuel_type": "electric"},
            "distance": 300,
            "weight": 50,
        }
    }
    payload = {
        "calculations": [SCENARIO_A, invalid, rail],
        "options": {"aggregate_results": True},
    }

    response = await test_async_client.post("/api/v1/calculations/batch", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["summary"] == {"total_requests": 3, "successful": 2, "failed": 1}
    assert data["errors"][0]["index"] == 1
    assert data["errors"][0]["details"][0]["code"] == "INVALID_WEIGHT"
    assert Decimal(data["aggregate"]["total_emissions"]) == Decimal("581.43")
    assert data["aggregate"]["calculation_count"] == 2


@pytest.mark.asyncio
async def test_batch_endpoint_rejects_oversized_batch(test_async_client):
    payload = {"calculations": [SCENARIO_A] * 101}

    response = await test_async_client.post("/api/v1/calculations/batch", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_calculate_mode_without_strategy_returns_400(test_app, test_async_client):
    test_app.state.strategy_registry = StrategyRegistry(
        {TransportMode.ROAD: build_road_strategy}
    )
    payload = {"activity_data": {"transport_mode": "sea", "distance": 100, "weight": 1}}

    response = await test_async_client.post("/api/v1/calculations/calculate", json=payload)
    assert response.status_code == 400

    detail = response.json()["detail"]
    assert detail["message"] == "Unsupported transport mode: sea"
    assert detail["errors"][0]["code"] == "UNSUPPORTED_TRANSPORT_MODE"
    assert detail["errors"][0]["suggestion"] == "Use one of: road"
