"""
Main emission calculation orchestrator service - async version.

Coordinates the strategy registry, the calculation pipeline and the factor
provider, and provides single and batch entry points.
"""

import asyncio
import logging

from app.core.config import get_environment_config
from app.pydantic_models.calculation import (
    BatchCalculationRequest,
    BatchCalculationResult,
    BatchItemError,
    BatchSummary,
    CalculationRequest,
    CalculationResult,
)
from app.services.aggregators.emission_aggregator import EmissionAggregator
from app.services.calculators.exceptions import (
    CalculationValidationError,
    UnsupportedTransportModeError,
)
from app.services.calculators.pipeline import run_pipeline
from app.services.calculators.registry import StrategyRegistry
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.provider import FactorProvider

logger = logging.getLogger(__name__)


def get_batch_concurrency_from_config() -> int:
    """
    Get batch concurrency from config file based on current environment.

    Returns:
        int: Maximum number of batch items calculated at once, defaults to 1
    """
    try:
        config = get_environment_config()
        concurrency = config.section("emission_calculation").get("batch_concurrency", 1)
        return max(int(concurrency), 1)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read batch_concurrency from config: {e}. Using default 1")
        return 1


class EmissionCalculationService:
    """
    Main orchestrator for emission calculations.

    Routes each request to its transport mode strategy and provides batch
    processing with per-item isolation.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        factor_provider: FactorProvider,
        batch_concurrency: int | None = None,
    ):
        """
        Initialize service.

        Args:
            registry: Strategy registry owned by the application
            factor_provider: Emission factor lookup
            batch_concurrency: Optional override for concurrent batch items.
                If not provided, reads from config file.
        """
        self.registry = registry
        self.factor_provider = factor_provider
        self.batch_concurrency = (
            batch_concurrency
            if batch_concurrency is not None
            else get_batch_concurrency_from_config()
        )
        self.aggregator = EmissionAggregator()

    async def calculate_single(self, request: CalculationRequest) -> CalculationResult:
        """
        Calculate emissions for a single transport leg.

        Raises:
            UnsupportedTransportModeError: If no strategy exists for the mode
            CalculationValidationError: If the activity data is invalid

        Example:
            >>> service = EmissionCalculationService(registry, provider)
            >>> result = await service.calculate_single(request)
            >>> print(f"Emissions: {result.emissions.total} kg CO2e")
        """
        strategy = self.registry.get(request.activity_data.transport_mode)
        return await run_pipeline(strategy, request, self.factor_provider)

    async def _calculate_item(
        self, index: int, request: CalculationRequest
    ) -> CalculationResult | BatchItemError:
        try:
            return await self.calculate_single(request)

        except CalculationValidationError as e:
            return BatchItemError(index=index, error=str(e), details=e.errors)

        except UnsupportedTransportModeError as e:
            return BatchItemError(
                index=index, error=str(e), details=[e.as_calculation_error()]
            )

        except Exception as e:
            logger.error(f"Error processing batch item {index}: {e}", exc_info=True)
            return BatchItemError(index=index, error=str(e))

    async def calculate_batch(
        self, batch_request: BatchCalculationRequest
    ) -> BatchCalculationResult:
        """
        Calculate emissions for multiple transport legs.

        A failing item is recorded with its index and does not stop the rest.
        Successful results keep input order.

        Example:
            >>> summary = await service.calculate_batch(batch_request)
            >>> print(f"Processed: {summary.summary.successful}")
        """
        requests = batch_request.calculations
        options = batch_request.options

        logger.info(
            f"Starting batch calculation for {len(requests)} activities "
            f"(concurrency={self.batch_concurrency})"
        )

        if self.batch_concurrency > 1:
            semaphore = asyncio.Semaphore(self.batch_concurrency)

            async def limited(index: int, request: CalculationRequest):
                async with semaphore:
                    return await self._calculate_item(index, request)

            outcomes = await asyncio.gather(
                *(limited(i, request) for i, request in enumerate(requests))
            )
        else:
            outcomes = [
                await self._calculate_item(i, request)
                for i, request in enumerate(requests)
            ]

        results = [o for o in outcomes if isinstance(o, CalculationResult)]
        errors = [o for o in outcomes if isinstance(o, BatchItemError)]

        aggregate = None
        if options and options.aggregate_results:
            aggregate = self.aggregator.aggregate(results)

        summary = BatchSummary(
            total_requests=len(requests),
            successful=len(results),
            failed=len(errors),
        )

        total_kg = sum(r.emissions.total for r in results)
        logger.info(
            f"Batch calculation complete: {len(results)}/{len(requests)} successful, "
            f"{UnitConverter.kg_to_tonnes(total_kg)} tonnes CO2e total"
        )

        return BatchCalculationResult(
            individual=results,
            errors=errors,
            aggregate=aggregate,
            summary=summary,
        )
