"""
Emission Aggregation Service.

Rolls batch calculation results up into a single aggregate.
"""

import logging
from decimal import Decimal
from typing import Optional

from app.pydantic_models.calculation import BatchAggregate, CalculationResult

logger = logging.getLogger(__name__)


class EmissionAggregator:
    """
    Service for aggregating calculation results.

    Aggregates:
    - Total emissions (kg CO2e)
    - Mean emission intensity
    - Total distance and cargo weight
    """

    @staticmethod
    def aggregate(results: list[CalculationResult]) -> Optional[BatchAggregate]:
        """
        Aggregate successful calculation results.

        Returns:
            BatchAggregate if there is at least one result, None otherwise
        """
        if not results:
            return None

        total_emissions = sum((r.emissions.total for r in results), Decimal("0"))
        total_intensity = sum(
            (r.metrics.emission_intensity for r in results), Decimal("0")
        )
        total_distance = sum(
            (r.input.activity_data.distance or Decimal("0") for r in results),
            Decimal("0"),
        )
        total_weight = sum(
            (r.input.activity_data.weight or Decimal("0") for r in results),
            Decimal("0"),
        )

        aggregate = BatchAggregate(
            total_emissions=total_emissions,
            average_intensity=total_intensity / len(results),
            total_distance=total_distance,
            total_weight=total_weight,
            calculation_count=len(results),
        )

        logger.debug(f"Aggregated {len(results)} results: {total_emissions} kg CO2e")
        return aggregate
