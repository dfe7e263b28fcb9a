"""
GLEC Framework v3.1 default emission factors.

Fallback values used when the factor provider has nothing for a request or
cannot be reached. Road factors are per vehicle-km; rail, sea and air factors
are per tonne-km.
"""

from datetime import datetime
from decimal import Decimal

from app.pydantic_models.emission_factor import EmissionFactor
from app.utils.constants import (
    DEFAULT_LOAD_FACTORS,
    GLEC_VERSION,
    FactorScope,
    FactorUnit,
    FuelType,
    TransportMode,
)

DEFAULT_SOURCE = f"GLEC Framework v{GLEC_VERSION} - Default Values"

# Fixed timestamp so default factors are identical across requests
DEFAULTS_PUBLISHED_AT = datetime(2023, 1, 1)

DEFAULT_ROAD_VEHICLE = "truck"

# kg CO2e per km
ROAD_DEFAULT_FACTORS: dict[str, Decimal] = {
    "truck": Decimal("0.079"),  # medium truck
    "van": Decimal("0.195"),
    "car": Decimal("0.171"),
    "motorcycle": Decimal("0.084"),
    "heavy_truck": Decimal("0.125"),
    "light_truck": Decimal("0.065"),
}

ROAD_DEFAULT_LOAD_FACTORS: dict[str, Decimal] = {
    "truck": Decimal("0.7"),
    "van": Decimal("0.6"),
    "car": Decimal("1.0"),
    "motorcycle": Decimal("1.0"),
    "heavy_truck": Decimal("0.75"),
    "light_truck": Decimal("0.65"),
}

# (direct, indirect) shares of WTW emissions by fuel
WTW_RATIOS: dict[FuelType, tuple[Decimal, Decimal]] = {
    FuelType.DIESEL: (Decimal("0.74"), Decimal("0.26")),
    FuelType.PETROL: (Decimal("0.76"), Decimal("0.24")),
    FuelType.ELECTRIC: (Decimal("0"), Decimal("1")),
    FuelType.HYBRID: (Decimal("0.5"), Decimal("0.5")),
    FuelType.BIODIESEL: (Decimal("0.8"), Decimal("0.2")),
    FuelType.HFO: (Decimal("0.72"), Decimal("0.28")),
    FuelType.MGO: (Decimal("0.73"), Decimal("0.27")),
    FuelType.LNG: (Decimal("0.8"), Decimal("0.2")),
    FuelType.JET_FUEL: (Decimal("0.75"), Decimal("0.25")),
    FuelType.HYDROGEN: (Decimal("0"), Decimal("1")),
}

RAIL_DEFAULT_FACTOR = EmissionFactor(
    id="default_rail",
    transport_mode=TransportMode.RAIL,
    vehicle_type="freight_train",
    fuel_type=FuelType.ELECTRIC,
    co2_factor=Decimal("0.028"),
    unit=FactorUnit.TKM,
    scope=FactorScope.WTW,
    source=DEFAULT_SOURCE,
    version=GLEC_VERSION,
    updated_at=DEFAULTS_PUBLISHED_AT,
)

SEA_DEFAULT_FACTOR = EmissionFactor(
    id="default_sea",
    transport_mode=TransportMode.SEA,
    vehicle_type="container_ship",
    fuel_type=FuelType.HFO,
    co2_factor=Decimal("0.011"),
    unit=FactorUnit.TKM,
    scope=FactorScope.WTW,
    source=DEFAULT_SOURCE,
    version=GLEC_VERSION,
    updated_at=DEFAULTS_PUBLISHED_AT,
)

AIR_DEFAULT_FACTOR = EmissionFactor(
    id="default_air",
    transport_mode=TransportMode.AIR,
    vehicle_type="cargo_plane",
    fuel_type=FuelType.JET_FUEL,
    co2_factor=Decimal("0.602"),
    unit=FactorUnit.TKM,
    scope=FactorScope.WTW,
    source=DEFAULT_SOURCE,
    version=GLEC_VERSION,
    updated_at=DEFAULTS_PUBLISHED_AT,
)


def road_default_factor(vehicle_type: str, fuel_type: FuelType) -> EmissionFactor:
    """
    Default road factor for a canonical vehicle type.

    Unknown vehicle types use the medium truck value.
    """
    co2_factor = ROAD_DEFAULT_FACTORS.get(
        vehicle_type, ROAD_DEFAULT_FACTORS[DEFAULT_ROAD_VEHICLE]
    )
    return EmissionFactor(
        id="default_road",
        transport_mode=TransportMode.ROAD,
        vehicle_type=vehicle_type,
        fuel_type=fuel_type,
        co2_factor=co2_factor,
        unit=FactorUnit.KM,
        scope=FactorScope.WTW,
        source=DEFAULT_SOURCE,
        version=GLEC_VERSION,
        updated_at=DEFAULTS_PUBLISHED_AT,
    )


def road_default_load_factor(vehicle_type: str | None) -> Decimal:
    """Default load factor for a canonical road vehicle type."""
    if not vehicle_type:
        return DEFAULT_LOAD_FACTORS[TransportMode.ROAD]
    return ROAD_DEFAULT_LOAD_FACTORS.get(
        vehicle_type, DEFAULT_LOAD_FACTORS[TransportMode.ROAD]
    )


def wtw_ratio(fuel_type: FuelType | str | None) -> tuple[Decimal, Decimal]:
    """Direct/indirect shares for a fuel; unknown fuels use the diesel split."""
    try:
        return WTW_RATIOS[FuelType(fuel_type)]
    except ValueError:
        return WTW_RATIOS[FuelType.DIESEL]


def list_default_factors(
    transport_mode: TransportMode | None = None,
) -> list[EmissionFactor]:
    """All fallback factors, optionally restricted to one mode."""
    factors = [
        road_default_factor(vehicle_type, FuelType.DIESEL)
        for vehicle_type in ROAD_DEFAULT_FACTORS
    ]
    factors += [RAIL_DEFAULT_FACTOR, SEA_DEFAULT_FACTOR, AIR_DEFAULT_FACTOR]

    if transport_mode is not None:
        factors = [f for f in factors if f.transport_mode == transport_mode]
    return factors
