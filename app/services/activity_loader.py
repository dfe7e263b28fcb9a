"""
Load transport legs from CSV or JSON files into batch requests.

Usage:
    from app.services.activity_loader import load_batch_request

    batch_request = load_batch_request("legs.csv", aggregate=True)

CSV columns (header names, all but transport_mode optional):
    transport_mode, distance, weight, volume, load_factor, vehicle_type,
    vehicle_sub_type, fuel_type, empty_return, origin, destination,
    route_type, fuel_consumed, energy_unit
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.pydantic_models.calculation import (
    BatchCalculationRequest,
    BatchOptions,
    CalculationRequest,
)

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = (
    "transport_mode",
    "distance",
    "weight",
    "volume",
    "load_factor",
    "origin",
    "destination",
    "route_type",
    "fuel_consumed",
    "energy_unit",
)

TRUE_VALUES = {"true", "yes", "1", "y"}


class ActivityFileError(ValueError):
    """Raised when an activity file cannot be read into calculation requests."""


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def row_to_request(
    row: dict[str, str], rounding_precision: int | None = None
) -> CalculationRequest:
    """
    Build a calculation request from one CSV row.

    Empty cells are treated as omitted fields.

    Raises:
        pydantic.ValidationError: If the row does not describe a valid leg
    """
    activity: dict[str, Any] = {
        column: _clean(row.get(column))
        for column in ACTIVITY_COLUMNS
        if _clean(row.get(column)) is not None
    }

    empty_return = _clean(row.get("empty_return"))
    if empty_return is not None:
        activity["empty_return"] = empty_return.lower() in TRUE_VALUES

    vehicle = {
        "type": _clean(row.get("vehicle_type")),
        "sub_type": _clean(row.get("vehicle_sub_type")),
        "fuel_type": _clean(row.get("fuel_type")),
    }
    if any(vehicle.values()):
        activity["vehicle"] = {k: v for k, v in vehicle.items() if v is not None}

    request = CalculationRequest.model_validate({"activity_data": activity})
    if rounding_precision is not None:
        request = request.with_rounding_precision(rounding_precision)
    return request


def load_csv_requests(
    path: Path, rounding_precision: int | None = None
) -> list[CalculationRequest]:
    """
    Read one calculation request per CSV row.

    Raises:
        ActivityFileError: If a row is invalid, naming its line number
    """
    requests = []
    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for line_number, row in enumerate(reader, start=2):
            try:
                requests.append(row_to_request(row, rounding_precision))
            except ValidationError as e:
                raise ActivityFileError(f"{path.name}:{line_number}: {e}") from e

    logger.info(f"Loaded {len(requests)} transport legs from {path}")
    return requests


def load_json_requests(
    path: Path, rounding_precision: int | None = None
) -> tuple[list[CalculationRequest], BatchOptions | None]:
    """
    Read requests from JSON.

    Accepts either a batch body ({"calculations": [...], "options": {...}})
    or a bare list of calculation requests.
    """
    with open(path, "r") as f:
        payload = json.load(f)

    if isinstance(payload, list):
        payload = {"calculations": payload}

    try:
        batch = BatchCalculationRequest.model_validate(payload)
    except ValidationError as e:
        raise ActivityFileError(f"{path.name}: {e}") from e

    requests = list(batch.calculations)
    if rounding_precision is not None:
        requests = [r.with_rounding_precision(rounding_precision) for r in requests]

    logger.info(f"Loaded {len(requests)} transport legs from {path}")
    return requests, batch.options


def load_batch_request(
    path: str | Path,
    aggregate: bool = True,
    rounding_precision: int | None = None,
) -> BatchCalculationRequest:
    """
    Load a batch request from a .csv or .json file.

    Args:
        path: File to read
        aggregate: Request an aggregate unless the JSON file sets its own options
        rounding_precision: Applied to every leg when given

    Raises:
        ActivityFileError: If the file is missing, has an unknown suffix,
            or holds an invalid leg
    """
    path = Path(path)
    if not path.exists():
        raise ActivityFileError(f"Activity file not found: {path}")

    options = None
    suffix = path.suffix.lower()
    if suffix == ".csv":
        requests = load_csv_requests(path, rounding_precision)
    elif suffix == ".json":
        requests, options = load_json_requests(path, rounding_precision)
    else:
        raise ActivityFileError(f"Unsupported activity file type: {path.suffix}")

    try:
        return BatchCalculationRequest(
            calculations=requests,
            options=options or BatchOptions(aggregate_results=aggregate),
        )
    except ValidationError as e:
        raise ActivityFileError(f"{path.name}: {e}") from e
