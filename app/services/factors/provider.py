"""
Emission factor provider boundary.

The engine consumes factors through the FactorProvider protocol and never
assumes a lookup succeeds.
"""

import logging
from typing import Any, Iterable, Protocol, runtime_checkable

from app.pydantic_models.emission_factor import EmissionFactor
from app.utils.constants import FuelType, TransportMode

logger = logging.getLogger(__name__)


class FactorLookupError(Exception):
    """Raised by providers when the factor store cannot be queried."""


@runtime_checkable
class FactorProvider(Protocol):
    """Lookup capability for emission factors."""

    async def lookup(
        self,
        transport_mode: TransportMode,
        vehicle_type: str | None,
        fuel_type: FuelType | None,
    ) -> list[EmissionFactor]:
        """
        Return factors matching the mode and, when given, vehicle and fuel type.

        An empty list means nothing matched. Implementations may raise on
        store failures.
        """
        ...


class StaticFactorProvider:
    """
    In-memory factor catalogue.

    Matching is case-insensitive on vehicle type; a None vehicle or fuel
    type matches any factor for the mode.
    """

    def __init__(self, factors: Iterable[EmissionFactor] = ()):
        self.factors = list(factors)

    @classmethod
    def from_config(cls, catalogue: list[dict[str, Any]]) -> "StaticFactorProvider":
        """
        Build the catalogue from the [[factors.catalogue]] config entries.

        Args:
            catalogue: Raw factor tables from the TOML configuration

        Returns:
            StaticFactorProvider holding the validated factors
        """
        factors = [EmissionFactor.model_validate(entry) for entry in catalogue]
        logger.info(f"Loaded {len(factors)} emission factors into static catalogue")
        return cls(factors)

    async def lookup(
        self,
        transport_mode: TransportMode,
        vehicle_type: str | None,
        fuel_type: FuelType | None,
    ) -> list[EmissionFactor]:
        matches = [
            factor
            for factor in self.factors
            if factor.transport_mode == transport_mode
            and (
                vehicle_type is None
                or factor.vehicle_type.lower() == vehicle_type.lower()
            )
            and (fuel_type is None or factor.fuel_type == fuel_type)
        ]

        logger.debug(
            f"Static catalogue matched {len(matches)} factors for "
            f"{transport_mode.value}/{vehicle_type}/{fuel_type}"
        )
        return matches
