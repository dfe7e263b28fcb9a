"""
Transport mode strategy definition.

A ModeStrategy is a table of the four capabilities the calculation pipeline
needs from a transport mode. Each mode module builds one.
"""

from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from typing import Callable

from app.pydantic_models.activity import ActivityData
from app.pydantic_models.calculation import CalculationError
from app.pydantic_models.emission_factor import EmissionFactor
from app.utils.constants import ErrorCode, TransportMode


@dataclass(frozen=True)
class ModeEmissions:
    """Mode computation output in kg, before result assembly."""

    co2: Decimal
    direct_emissions: Decimal
    indirect_emissions: Decimal
    ch4: Decimal | None = None
    n2o: Decimal | None = None


@dataclass(frozen=True)
class ModeStrategy:
    """
    Capabilities supplied per transport mode.

    Attributes:
        mode: Transport mode served
        validate: Returns every problem found in the activity data
        default_factor: Documented fallback factor for the activity
        normalize: Applies default load factor and name normalization
        compute_emissions: Mode-specific emissions formula
        lookup_key: (vehicle_type, fuel_type) passed to the factor provider
        assumptions: Mode-specific assumption strings for the raw input
    """

    mode: TransportMode
    validate: Callable[[ActivityData], list[CalculationError]]
    default_factor: Callable[[ActivityData], EmissionFactor]
    normalize: Callable[[ActivityData], ActivityData]
    compute_emissions: Callable[[ActivityData, EmissionFactor], ModeEmissions]
    lookup_key: Callable[[ActivityData], tuple[str | None, object]] = field(
        default=lambda data: (
            data.vehicle.type if data.vehicle else None,
            data.vehicle.fuel_type if data.vehicle else None,
        )
    )
    assumptions: Callable[[ActivityData], list[str]] = field(
        default=lambda data: []
    )


def split_emissions(
    co2: Decimal, direct_share: Decimal
) -> tuple[Decimal, Decimal]:
    """
    Split co2 into direct and indirect parts that add back to co2 exactly.

    The indirect part is the remainder of the direct part, computed with
    enough precision that neither operation rounds.
    """
    with localcontext() as ctx:
        ctx.prec = 60
        direct = co2 * direct_share
        indirect = co2 - direct
    return direct, indirect


def validate_distance(data: ActivityData) -> list[CalculationError]:
    if data.distance is None or data.distance <= 0:
        return [
            CalculationError(
                code=ErrorCode.INVALID_DISTANCE,
                message="Distance must be provided and greater than 0",
                field="distance",
                suggestion="Provide distance in kilometers",
            )
        ]
    return []


def validate_cargo_weight(data: ActivityData) -> list[CalculationError]:
    """Weight is mandatory for the tonne-km modes."""
    if data.weight is None or data.weight <= 0:
        return [
            CalculationError(
                code=ErrorCode.INVALID_WEIGHT,
                message=(
                    "Weight (cargo tonnage) must be provided for "
                    f"{data.transport_mode.value} transport"
                ),
                field="weight",
                suggestion="Provide cargo weight in tonnes",
            )
        ]
    return []


def validate_load_factor(
    data: ActivityData, allow_zero: bool = True
) -> list[CalculationError]:
    if data.load_factor is None:
        return []

    lower_ok = data.load_factor >= 0 if allow_zero else data.load_factor > 0
    if lower_ok and data.load_factor <= 1:
        return []

    return [
        CalculationError(
            code=ErrorCode.INVALID_LOAD_FACTOR,
            message=(
                "Load factor must be between 0 and 1"
                if allow_zero
                else "Load factor must be greater than 0 and at most 1"
            ),
            field="load_factor",
            suggestion="Use decimal format (e.g., 0.7 for 70%)",
        )
    ]


def validate_tonne_km_activity(data: ActivityData) -> list[CalculationError]:
    """Shared validation for rail, sea and air."""
    return (
        validate_distance(data)
        + validate_cargo_weight(data)
        + validate_load_factor(data, allow_zero=False)
    )


def with_default_load_factor(data: ActivityData, default: Decimal) -> ActivityData:
    if data.load_factor is not None:
        return data
    return data.model_copy(update={"load_factor": default})
