"""
Sea transport emissions calculator.

Implements GLEC Framework v3.1 for maritime freight.
"""

from decimal import Decimal

from app.pydantic_models.activity import ActivityData
from app.pydantic_models.emission_factor import EmissionFactor
from app.services.calculators.mode_strategy import (
    ModeEmissions,
    ModeStrategy,
    split_emissions,
    validate_tonne_km_activity,
    with_default_load_factor,
)
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.default_factors import SEA_DEFAULT_FACTOR
from app.utils.constants import DEFAULT_LOAD_FACTORS, TransportMode

SEA_DIRECT_SHARE = Decimal("0.72")


def compute_sea_emissions(data: ActivityData, factor: EmissionFactor) -> ModeEmissions:
    """
    Formula:
        co2 = distance * weight * co2_factor / load_factor
    """
    tonne_km = UnitConverter.tonne_km(data.distance, data.weight)
    co2 = tonne_km * factor.co2_factor / data.load_factor

    direct, indirect = split_emissions(co2, SEA_DIRECT_SHARE)
    return ModeEmissions(co2=co2, direct_emissions=direct, indirect_emissions=indirect)


def build_sea_strategy() -> ModeStrategy:
    return ModeStrategy(
        mode=TransportMode.SEA,
        validate=validate_tonne_km_activity,
        default_factor=lambda data: SEA_DEFAULT_FACTOR,
        normalize=lambda data: with_default_load_factor(
            data, DEFAULT_LOAD_FACTORS[TransportMode.SEA]
        ),
        compute_emissions=compute_sea_emissions,
        assumptions=lambda data: ["HFO-fuelled vessel split assumed: 72% direct / 28% indirect"],
    )
