"""
Application constants following kkb_fastapi pattern.
"""
from decimal import Decimal
from enum import Enum


class ConfigFile:
    """Configuration file paths."""
    PRODUCTION = "production.toml"
    DEVELOPMENT = "development.toml"
    TEST = "test.toml"


class TransportMode(str, Enum):
    """Transport modes supported by the GLEC Framework."""
    ROAD = "road"
    RAIL = "rail"
    SEA = "sea"
    AIR = "air"


class FuelType(str, Enum):
    """Energy carriers accepted for vehicles and emission factors."""
    DIESEL = "diesel"
    PETROL = "petrol"
    ELECTRIC = "electric"
    HYBRID = "hybrid"
    HFO = "hfo"  # Heavy Fuel Oil (marine)
    MGO = "mgo"  # Marine Gas Oil
    LNG = "lng"
    JET_FUEL = "jet_fuel"
    BIODIESEL = "biodiesel"
    HYDROGEN = "hydrogen"


class FactorUnit(str, Enum):
    """Functional unit an emission factor is expressed per."""
    KM = "km"
    TKM = "tkm"
    KG_FUEL = "kg_fuel"
    KWH = "kwh"


class FactorScope(str, Enum):
    """Emission factor boundary: Tank-to-Wheel or Well-to-Wheel."""
    TTW = "ttw"
    WTW = "wtw"


class RouteType(str, Enum):
    HIGHWAY = "highway"
    URBAN = "urban"
    MIXED = "mixed"
    INTERNATIONAL = "international"


class EnergyUnit(str, Enum):
    LITERS = "liters"
    KWH = "kwh"
    KG = "kg"


class ConfidenceLevel(str, Enum):
    """Confidence rating attached to every calculation result."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FactorSource(str, Enum):
    """How the emission factor used for a calculation was obtained."""
    PROVIDER = "provider"
    DEFAULT_NOT_FOUND = "default_not_found"
    DEFAULT_LOOKUP_FAILED = "default_lookup_failed"


class ErrorCode:
    """Validation error codes returned in CalculationError values."""
    INVALID_DISTANCE = "INVALID_DISTANCE"
    INVALID_VEHICLE = "INVALID_VEHICLE"
    INVALID_FUEL_TYPE = "INVALID_FUEL_TYPE"
    INVALID_WEIGHT = "INVALID_WEIGHT"
    INVALID_LOAD_FACTOR = "INVALID_LOAD_FACTOR"
    UNSUPPORTED_TRANSPORT_MODE = "UNSUPPORTED_TRANSPORT_MODE"


GLEC_VERSION = "3.1"

# GWP100 values (IPCC AR5)
GWP_CO2 = Decimal("1")
GWP_CH4 = Decimal("28")
GWP_N2O = Decimal("265")

DEFAULT_LOAD_FACTORS = {
    TransportMode.ROAD: Decimal("0.7"),
    TransportMode.RAIL: Decimal("0.8"),
    TransportMode.SEA: Decimal("0.85"),
    TransportMode.AIR: Decimal("0.8"),
}

# Radiative Forcing Index, aviation only
RADIATIVE_FORCING_INDEX = Decimal("1.9")

# Floor applied to road load factors before dividing
MIN_ROAD_LOAD_FACTOR = Decimal("0.1")

EMPTY_RETURN_MULTIPLIER = Decimal("1.5")

MAX_BATCH_SIZE = 100
