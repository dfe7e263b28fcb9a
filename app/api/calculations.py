"""
Emissions Calculations API router.

Calculate GLEC emissions for single transport legs and batches.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.config import Config
from app.core.dependencies import get_app_config, get_calculation_service
from app.pydantic_models.calculation import (
    BatchCalculationRequest,
    BatchCalculationResult,
    CalculationRequest,
    CalculationResponse,
)
from app.services.calculators.emission_calculator import EmissionCalculationService
from app.services.calculators.exceptions import (
    CalculationValidationError,
    UnsupportedTransportModeError,
)

router = APIRouter(
    prefix="/api/v1/calculations",
    tags=["Calculations"],
)

logger = logging.getLogger(__name__)


def with_default_precision(request: CalculationRequest, config: Config) -> CalculationRequest:
    """Fill in the configured rounding precision when the request has none."""
    precision = config.section("emission_calculation").get("default_rounding_precision")
    if precision is None:
        return request
    return request.with_rounding_precision(precision, overwrite=False)


@router.post("/calculate", response_model=CalculationResponse)
async def calculate_emissions(
    request: CalculationRequest,
    service: EmissionCalculationService = Depends(get_calculation_service),
    config: Config = Depends(get_app_config),
):
    """
    Calculate emissions for one transport leg.

    This endpoint will:
    1. Validate the activity data for its transport mode
    2. Resolve an emission factor, falling back to GLEC defaults
    3. Calculate Well-to-Wheel CO2e with its direct/indirect split

    Example:
        ```
        POST /api/v1/calculations/calculate
        {
            "activity_data": {
                "transport_mode": "rail",
                "distance": 500,
                "weight": 30,
                "load_factor": 0.8
            },
            "options": {"rounding_precision": 2}
        }
        ```
    """
    try:
        result = await service.calculate_single(with_default_precision(request, config))
    except CalculationValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": str(e),
                "errors": [error.model_dump(mode="json") for error in e.errors],
            },
        )
    except UnsupportedTransportModeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": str(e),
                "errors": [e.as_calculation_error().model_dump(mode="json")],
            },
        )

    return CalculationResponse(
        success=True,
        calculation_id=result.metadata.calculation_id,
        result=result,
        glec_version=result.metadata.glec_version,
        calculated_at=result.metadata.calculated_at,
    )


@router.post("/batch", response_model=BatchCalculationResult)
async def calculate_batch(
    request: BatchCalculationRequest,
    service: EmissionCalculationService = Depends(get_calculation_service),
    config: Config = Depends(get_app_config),
):
    """
    Calculate emissions for up to 100 transport legs.

    Invalid items are reported in `errors` with their index; the rest are
    still calculated.
    """
    logger.info(f"Batch request with {len(request.calculations)} calculations")

    batch = request.model_copy(
        update={
            "calculations": [
                with_default_precision(item, config) for item in request.calculations
            ]
        }
    )
    return await service.calculate_batch(batch)
