"""
Emission calculation pipeline - async version.

Runs the same five stages for every transport mode:
validate -> resolve factor -> normalize -> compute -> assemble result.
Mode behaviour comes from the ModeStrategy passed in.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from app.pydantic_models.activity import ActivityData
from app.pydantic_models.calculation import (
    CalculationInput,
    CalculationMetadata,
    CalculationMetrics,
    CalculationOptions,
    CalculationRequest,
    CalculationResult,
    EmissionBreakdown,
    EmissionTotals,
)
from app.pydantic_models.emission_factor import EmissionFactor, EmissionFactorOverride
from app.services.calculators.confidence import assess_confidence
from app.services.calculators.exceptions import CalculationValidationError
from app.services.calculators.gwp_converter import convert_to_co2e
from app.services.calculators.mode_strategy import ModeEmissions, ModeStrategy
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.provider import FactorProvider
from app.utils.constants import GLEC_VERSION, FactorSource, TransportMode

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    digits = ""
    while number:
        number, remainder = divmod(number, 36)
        digits = _BASE36[remainder] + digits
    return digits or "0"


def generate_calculation_id(mode: TransportMode) -> str:
    """Mode, base-36 millisecond timestamp and a random suffix."""
    timestamp = _to_base36(int(time.time() * 1000))
    return f"{mode.value}_{timestamp}_{uuid.uuid4().hex[:8]}"


def calculation_method(mode: TransportMode) -> str:
    return f"GLEC_{mode.value.upper()}_v{GLEC_VERSION}"


async def resolve_factor(
    strategy: ModeStrategy,
    data: ActivityData,
    provider: FactorProvider,
) -> tuple[EmissionFactor, FactorSource, str | None]:
    """
    Ask the provider for a factor, falling back to the mode default.

    Both a failed lookup and an empty result fall back, but they are
    reported differently so a data gap can be told apart from an outage.

    Returns:
        Tuple of (factor, how it was obtained, assumption note or None)
    """
    vehicle_type, fuel_type = strategy.lookup_key(data)

    try:
        factors = await provider.lookup(strategy.mode, vehicle_type, fuel_type)
    except Exception as e:
        default = strategy.default_factor(data)
        logger.error(
            f"Emission factor lookup failed for {strategy.mode.value}/"
            f"{vehicle_type}/{fuel_type}: {e}. Using default {default.id}"
        )
        return (
            default,
            FactorSource.DEFAULT_LOOKUP_FAILED,
            f"Emission factor lookup failed; default factor applied ({default.source})",
        )

    if not factors:
        default = strategy.default_factor(data)
        logger.warning(
            f"No emission factor found for {strategy.mode.value}/"
            f"{vehicle_type}/{fuel_type}. Using default {default.id}"
        )
        return (
            default,
            FactorSource.DEFAULT_NOT_FOUND,
            f"No matching emission factor found; default factor applied ({default.source})",
        )

    # Most recently updated factor wins
    factor = max(factors, key=lambda f: f.updated_at)
    logger.debug(f"Resolved emission factor {factor.id} from provider")
    return factor, FactorSource.PROVIDER, None


def apply_factor_override(
    factor: EmissionFactor, override: EmissionFactorOverride
) -> EmissionFactor:
    """Lay the caller's partial factor over the resolved one."""
    return factor.model_copy(update=override.model_dump(exclude_none=True))


def emission_intensity(total: Decimal, data: ActivityData) -> Decimal:
    """kg CO2e per tkm when weight is known, per km otherwise."""
    if data.weight and data.distance:
        return total / (data.weight * data.distance)
    if data.distance:
        return total / data.distance
    return total


def fuel_efficiency(data: ActivityData) -> Decimal | None:
    if data.fuel_consumed and data.distance:
        return data.distance / data.fuel_consumed
    return None


def build_assumptions(
    strategy: ModeStrategy,
    data: ActivityData,
    normalized: ActivityData,
    options: CalculationOptions,
    resolution_note: str | None,
) -> list[str]:
    """Assumption strings describing every default the calculation relied on."""
    assumptions = []

    if data.load_factor is None:
        assumptions.append(
            f"Load factor assumed: {UnitConverter.to_percent(normalized.load_factor)}"
        )

    if not data.empty_return:
        assumptions.append("No empty return trip assumed")

    assumptions.extend(strategy.assumptions(data))

    if resolution_note:
        assumptions.append(resolution_note)

    if options.custom_emission_factor is not None:
        fields = sorted(options.custom_emission_factor.model_dump(exclude_none=True))
        assumptions.append(f"Custom emission factor override applied: {', '.join(fields)}")

    if options.include_indirect_emissions is False:
        assumptions.append(
            "Indirect emissions are reported in the breakdown; totals remain Well-to-Wheel"
        )

    if options.include_biogenic is False:
        assumptions.append("Biogenic emissions are not separated from fossil emissions")

    return assumptions


def round_result_values(
    emissions: ModeEmissions,
    total: Decimal,
    intensity: Decimal,
    precision: int,
) -> tuple[ModeEmissions, Decimal, Decimal]:
    """
    Round reported values half-up.

    Indirect emissions are derived from the rounded co2 and direct values
    so the breakdown still adds up. CH4 and N2O masses stay unrounded and
    still reproduce the CO2e total.
    """

    def rnd(value):
        return UnitConverter.round_value(value, precision) if value is not None else None

    co2 = rnd(emissions.co2)
    direct = rnd(emissions.direct_emissions)
    rounded = ModeEmissions(
        co2=co2,
        ch4=emissions.ch4,
        n2o=emissions.n2o,
        direct_emissions=direct,
        indirect_emissions=co2 - direct,
    )
    return rounded, rnd(total), rnd(intensity)


def assemble_result(
    strategy: ModeStrategy,
    data: ActivityData,
    normalized: ActivityData,
    factor: EmissionFactor,
    factor_source: FactorSource,
    emissions: ModeEmissions,
    options: CalculationOptions,
    resolution_note: str | None,
) -> CalculationResult:
    total = convert_to_co2e(emissions.co2, emissions.ch4, emissions.n2o)
    intensity = emission_intensity(total, normalized)

    if options.rounding_precision is not None:
        emissions, total, intensity = round_result_values(
            emissions, total, intensity, options.rounding_precision
        )

    return CalculationResult(
        input=CalculationInput(
            activity_data=normalized,
            emission_factor=factor,
            calculation_method=calculation_method(strategy.mode),
        ),
        emissions=EmissionTotals(
            co2=emissions.co2,
            ch4=emissions.ch4,
            n2o=emissions.n2o,
            total=total,
        ),
        breakdown=EmissionBreakdown(
            direct_emissions=emissions.direct_emissions,
            indirect_emissions=emissions.indirect_emissions,
        ),
        metrics=CalculationMetrics(
            emission_intensity=intensity,
            fuel_efficiency=fuel_efficiency(normalized),
            load_utilization=normalized.load_factor,
        ),
        metadata=CalculationMetadata(
            calculated_at=datetime.now(timezone.utc),
            calculation_id=generate_calculation_id(strategy.mode),
            glec_version=GLEC_VERSION,
            confidence=assess_confidence(data, factor),
            assumptions=build_assumptions(
                strategy, data, normalized, options, resolution_note
            ),
            factor_source=factor_source,
        ),
    )


async def run_pipeline(
    strategy: ModeStrategy,
    request: CalculationRequest,
    provider: FactorProvider,
) -> CalculationResult:
    """
    Calculate emissions for one transport leg.

    Args:
        strategy: Capabilities of the request's transport mode
        request: Activity data and options
        provider: Emission factor lookup

    Returns:
        Fully populated CalculationResult

    Raises:
        CalculationValidationError: With all validation errors, before any
            factor lookup or computation happens

    Example:
        >>> result = await run_pipeline(build_rail_strategy(), request, provider)
        >>> print(f"Emissions: {result.emissions.total} kg CO2e")
    """
    data = request.activity_data
    options = request.options or CalculationOptions()

    logger.info(
        f"Calculating {strategy.mode.value} emissions for {data.distance} km, "
        f"{data.weight} t"
    )

    errors = strategy.validate(data)
    if errors:
        logger.info(
            f"Validation failed for {strategy.mode.value} activity: "
            f"{[error.code for error in errors]}"
        )
        raise CalculationValidationError(strategy.mode.value, errors)

    factor, factor_source, resolution_note = await resolve_factor(strategy, data, provider)

    if options.custom_emission_factor is not None:
        factor = apply_factor_override(factor, options.custom_emission_factor)

    normalized = strategy.normalize(data)
    emissions = strategy.compute_emissions(normalized, factor)

    result = assemble_result(
        strategy,
        data,
        normalized,
        factor,
        factor_source,
        emissions,
        options,
        resolution_note,
    )

    logger.info(
        f"Calculated {result.emissions.total} kg CO2e for {strategy.mode.value} activity "
        f"(confidence: {result.metadata.confidence.value}, "
        f"factor: {factor.id})"
    )
    return result
