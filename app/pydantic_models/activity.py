"""
Pydantic models for logistics activity data following kkb_fastapi pattern.

Schema-level checks are limited to types; the mode strategies perform the
semantic validation so every problem with a request is reported at once.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.utils.constants import EnergyUnit, FuelType, RouteType, TransportMode


class VehicleCapacity(BaseModel):
    """Nominal vehicle capacity."""

    model_config = ConfigDict(frozen=True)

    weight: Decimal | None = Field(None, description="Payload capacity in tonnes")
    volume: Decimal | None = Field(None, description="Cargo volume in cubic metres")
    passengers: int | None = Field(None, description="Passenger seats")


class VehicleCategory(BaseModel):
    """Vehicle or asset used for a transport leg."""

    model_config = ConfigDict(frozen=True)

    type: str | None = Field(
        None, description="Vehicle type", examples=["truck"]
    )
    sub_type: str | None = Field(None, description="Vehicle sub-type")
    capacity: VehicleCapacity | None = None
    fuel_type: FuelType | None = Field(
        None, description="Energy carrier", examples=["diesel"]
    )


class ActivityData(BaseModel):
    """Raw activity data for a single transport leg."""

    model_config = ConfigDict(frozen=True)

    transport_mode: TransportMode = Field(
        ..., description="Transport mode", examples=["road"]
    )
    vehicle: VehicleCategory | None = None

    # Trip information
    distance: Decimal | None = Field(
        None, description="Distance in kilometres", examples=[Decimal("500")]
    )
    weight: Decimal | None = Field(
        None, description="Cargo weight in tonnes", examples=[Decimal("25")]
    )
    volume: Decimal | None = Field(None, description="Cargo volume in cubic metres")

    # Load factor information
    load_factor: Decimal | None = Field(
        None, description="Capacity utilisation (0-1)", examples=[Decimal("0.8")]
    )
    empty_return: bool | None = Field(None, description="Return leg runs empty")

    # Route
    origin: str | None = None
    destination: str | None = None
    route_type: RouteType | None = None

    # Measured energy use
    fuel_consumed: Decimal | None = Field(
        None, description="Fuel or energy consumed (litres, kWh or kg)"
    )
    energy_unit: EnergyUnit | None = None
