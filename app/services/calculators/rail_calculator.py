"""
Rail transport emissions calculator.

Implements GLEC Framework v3.1 for rail freight. Traction is assumed
electric, so most emissions sit upstream in power generation.
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
from app.services.factors.default_factors import RAIL_DEFAULT_FACTOR
from app.utils.constants import DEFAULT_LOAD_FACTORS, TransportMode

RAIL_DIRECT_SHARE = Decimal("0.1")


def compute_rail_emissions(data: ActivityData, factor: EmissionFactor) -> ModeEmissions:
    """
    Formula:
        co2 = distance * weight * co2_factor / load_factor
    """
    tonne_km = UnitConverter.tonne_km(data.distance, data.weight)
    co2 = tonne_km * factor.co2_factor / data.load_factor

    direct, indirect = split_emissions(co2, RAIL_DIRECT_SHARE)
    return ModeEmissions(co2=co2, direct_emissions=direct, indirect_emissions=indirect)


def rail_lookup_key(data: ActivityData):
    # Rail factors are keyed on traction energy only
    fuel_type = data.vehicle.fuel_type if data.vehicle else None
    return None, fuel_type or RAIL_DEFAULT_FACTOR.fuel_type


def build_rail_strategy() -> ModeStrategy:
    return ModeStrategy(
        mode=TransportMode.RAIL,
        validate=validate_tonne_km_activity,
        default_factor=lambda data: RAIL_DEFAULT_FACTOR,
        normalize=lambda data: with_default_load_factor(
            data, DEFAULT_LOAD_FACTORS[TransportMode.RAIL]
        ),
        compute_emissions=compute_rail_emissions,
        lookup_key=rail_lookup_key,
        assumptions=lambda data: [
            "Electric traction assumed: 10% direct / 90% indirect split"
        ],
    )
