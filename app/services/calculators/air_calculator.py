"""
Air transport emissions calculator.

Implements GLEC Framework v3.1 for air cargo, including the Radiative
Forcing Index for non-CO2 effects at altitude.
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
from app.services.factors.default_factors import AIR_DEFAULT_FACTOR
from app.utils.constants import (
    DEFAULT_LOAD_FACTORS,
    RADIATIVE_FORCING_INDEX,
    TransportMode,
)

AIR_DIRECT_SHARE = Decimal("0.75")


def compute_air_emissions(data: ActivityData, factor: EmissionFactor) -> ModeEmissions:
    """
    Formula:
        co2 = distance * weight * co2_factor * RFI / load_factor

    The exposed factor keeps its raw co2_factor; RFI only enters here.
    """
    tonne_km = UnitConverter.tonne_km(data.distance, data.weight)
    base = tonne_km * factor.co2_factor * RADIATIVE_FORCING_INDEX
    co2 = base / data.load_factor

    direct, indirect = split_emissions(co2, AIR_DIRECT_SHARE)
    return ModeEmissions(co2=co2, direct_emissions=direct, indirect_emissions=indirect)


def build_air_strategy() -> ModeStrategy:
    return ModeStrategy(
        mode=TransportMode.AIR,
        validate=validate_tonne_km_activity,
        default_factor=lambda data: AIR_DEFAULT_FACTOR,
        normalize=lambda data: with_default_load_factor(
            data, DEFAULT_LOAD_FACTORS[TransportMode.AIR]
        ),
        compute_emissions=compute_air_emissions,
        assumptions=lambda data: [
            f"Radiative Forcing Index of {RADIATIVE_FORCING_INDEX} applied to "
            "air emissions (not reflected in the reported emission factor)"
        ],
    )
