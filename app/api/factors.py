"""
Emission Factors API router.

Read-only view of the GLEC default factor tables.
"""
import logging

from fastapi import APIRouter

from app.pydantic_models.emission_factor import EmissionFactor
from app.services.factors.default_factors import list_default_factors
from app.utils.constants import TransportMode

router = APIRouter(
    prefix="/api/v1/factors",
    tags=["Emission Factors"],
)

logger = logging.getLogger(__name__)


@router.get("/defaults", response_model=list[EmissionFactor])
async def list_emission_factor_defaults(transport_mode: TransportMode | None = None):
    """
    List the default emission factors used when no stored factor matches.

    Args:
        transport_mode: Filter by transport mode (optional)
    """
    factors = list_default_factors(transport_mode)
    logger.debug(f"Returning {len(factors)} default factors")
    return factors
