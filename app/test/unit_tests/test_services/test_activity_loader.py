"""
Service tests for loading transport legs from files.
"""

import json
from decimal import Decimal

import pytest

from app.services.activity_loader import (
    ActivityFileError,
    load_batch_request,
    row_to_request,
)
from app.utils.constants import FuelType, TransportMode

CSV_HEADER = "transport_mode,distance,weight,load_factor,vehicle_type,fuel_type,empty_return\n"


def test_row_to_request_skips_empty_cells():
    request = row_to_request(
        {
            "transport_mode": "rail",
            "distance": "300",
            "weight": " 50 ",
            "load_factor": "",
            "vehicle_type": "",
            "fuel_type": "electric",
        }
    )

    data = request.activity_data
    assert data.transport_mode == TransportMode.RAIL
    assert data.weight == Decimal("50")
    assert data.load_factor is None
    assert data.vehicle.type is None
    assert data.vehicle.fuel_type == FuelType.ELECTRIC
    assert request.options is None


def test_load_csv_batch(tmp_path):
    path = tmp_path / "legs.csv"
    path.write_text(
        CSV_HEADER
        + "road,500,25,,truck,diesel,no\n"
        + "road,120,3,0.6,van,diesel,yes\n"
    )

    batch = load_batch_request(path, rounding_precision=2)

    assert len(batch.calculations) == 2
    assert batch.options.aggregate_results is True
    first, second = batch.calculations
    assert first.activity_data.empty_return is False
    assert second.activity_data.empty_return is True
    assert second.activity_data.vehicle.type == "van"
    assert second.options.rounding_precision == 2


def test_load_csv_reports_bad_row(tmp_path):
    path = tmp_path / "legs.csv"
    path.write_text(CSV_HEADER + "road,500,25,,truck,diesel,\n" + "hovercraft,10,1,,,,\n")

    with pytest.raises(ActivityFileError) as exc_info:
        load_batch_request(path)

    assert "legs.csv:3" in str(exc_info.value)


def test_load_json_list(tmp_path):
    path = tmp_path / "legs.json"
    path.write_text(
        json.dumps(
            [
                {
                    "activity_data": {
                        "transport_mode": "air",
                        "distance": 2000,
                        "weight": 5,
                    },
                    "options": {"include_biogenic": False},
                }
            ]
        )
    )

    batch = load_batch_request(path, aggregate=False, rounding_precision=1)

    request = batch.calculations[0]
    assert request.activity_data.transport_mode == TransportMode.AIR
    assert request.options.rounding_precision == 1
    assert request.options.include_biogenic is False
    assert batch.options.aggregate_results is False


def test_load_json_batch_keeps_its_options(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps(
            {
                "calculations": [
                    {"activity_data": {"transport_mode": "sea", "distance": 100, "weight": 1}}
                ],
                "options": {"aggregate_results": False},
            }
        )
    )

    batch = load_batch_request(path)

    assert batch.options.aggregate_results is False


@pytest.mark.parametrize("name", ["missing.csv", "legs.txt"])
def test_load_rejects_missing_or_unknown_files(tmp_path, name):
    if name.endswith(".txt"):
        (tmp_path / name).write_text("road,1,1")

    with pytest.raises(ActivityFileError):
        load_batch_request(tmp_path / name)


@pytest.mark.asyncio
async def test_loaded_batch_runs_through_service(tmp_path, calculation_service):
    path = tmp_path / "legs.csv"
    path.write_text(CSV_HEADER + "road,500,25,,truck,diesel,\n" + "rail,300,50,,,electric,\n")

    result = await calculation_service.calculate_batch(
        load_batch_request(path, rounding_precision=2)
    )

    assert result.summary.successful == 2
    assert result.aggregate.total_emissions == Decimal("581.43")
