"""
Pydantic models for EmissionFactor following kkb_fastapi pattern.
"""
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.constants import FactorScope, FactorUnit, FuelType, TransportMode


class EmissionFactor(BaseModel):
    """Emission factor applied to a transport leg."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(..., description="Factor identifier")
    transport_mode: TransportMode
    vehicle_type: str = Field(..., max_length=100)
    fuel_type: FuelType

    co2_factor: Decimal = Field(..., ge=0, description="kg CO2e per unit")
    ch4_factor: Decimal | None = Field(None, ge=0, description="kg CH4 per unit")
    n2o_factor: Decimal | None = Field(None, ge=0, description="kg N2O per unit")

    unit: FactorUnit = Field(..., description="Functional unit of the factor")
    scope: FactorScope = Field(FactorScope.WTW, description="TTW or WTW boundary")

    source: str = Field(..., max_length=200, description="Source of emission factor")
    version: str = Field(..., max_length=20)
    region: str | None = Field(None, max_length=100)
    updated_at: datetime

    @field_validator("updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are read as UTC so factors stay comparable."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class EmissionFactorOverride(BaseModel):
    """Caller-supplied partial emission factor laid over the resolved one."""

    model_config = ConfigDict(frozen=True)

    co2_factor: Decimal | None = Field(None, ge=0)
    ch4_factor: Decimal | None = Field(None, ge=0)
    n2o_factor: Decimal | None = Field(None, ge=0)
    unit: FactorUnit | None = None
    scope: FactorScope | None = None
    source: str | None = Field(None, max_length=200)
    region: str | None = Field(None, max_length=100)
