"""
Pydantic models for Emission Calculations and Results following kkb_fastapi pattern.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.pydantic_models.activity import ActivityData
from app.pydantic_models.emission_factor import EmissionFactor, EmissionFactorOverride
from app.utils.constants import (
    GLEC_VERSION,
    MAX_BATCH_SIZE,
    ConfidenceLevel,
    FactorSource,
)


class CalculationError(BaseModel):
    """A single validation problem found in activity data."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., examples=["INVALID_DISTANCE"])
    message: str
    field: str | None = Field(None, examples=["distance"])
    suggestion: str | None = None


class CalculationOptions(BaseModel):
    """Per-request calculation options."""

    model_config = ConfigDict(frozen=True)

    include_indirect_emissions: bool | None = None
    rounding_precision: int | None = Field(
        None, ge=0, le=6, description="Decimal places for reported values"
    )
    include_biogenic: bool | None = None
    custom_emission_factor: EmissionFactorOverride | None = None


class CalculationRequest(BaseModel):
    """Request model for calculating emissions of one transport leg."""

    model_config = ConfigDict(frozen=True)

    activity_data: ActivityData
    options: CalculationOptions | None = None

    def with_rounding_precision(
        self, precision: int, overwrite: bool = True
    ) -> "CalculationRequest":
        """Copy of the request with rounding_precision set."""
        options = self.options or CalculationOptions()
        if options.rounding_precision is not None and not overwrite:
            return self
        return self.model_copy(
            update={"options": options.model_copy(update={"rounding_precision": precision})}
        )


class CalculationInput(BaseModel):
    """Echo of what the calculation was performed on."""

    model_config = ConfigDict(frozen=True)

    activity_data: ActivityData
    emission_factor: EmissionFactor
    calculation_method: str = Field(..., examples=["GLEC_ROAD_v3.1"])


class EmissionTotals(BaseModel):
    """Emissions in kg; total is CO2-equivalent."""

    model_config = ConfigDict(frozen=True)

    co2: Decimal
    ch4: Decimal | None = None
    n2o: Decimal | None = None
    total: Decimal


class EmissionBreakdown(BaseModel):
    """Tank-to-Wheel (direct) and Well-to-Tank (indirect) split of co2."""

    model_config = ConfigDict(frozen=True)

    direct_emissions: Decimal
    indirect_emissions: Decimal
    fuel_production: Decimal = Decimal("0")
    fuel_transport: Decimal = Decimal("0")


class CalculationMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    emission_intensity: Decimal = Field(
        ..., description="kg CO2e per tkm, per km, or absolute"
    )
    fuel_efficiency: Decimal | None = Field(
        None, description="km per litre / kWh / kg consumed"
    )
    load_utilization: Decimal


class CalculationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    calculated_at: datetime
    calculation_id: str
    glec_version: str = GLEC_VERSION
    confidence: ConfidenceLevel
    assumptions: list[str] = Field(default_factory=list)
    factor_source: FactorSource


class CalculationResult(BaseModel):
    """Fully populated, auditable emissions result."""

    model_config = ConfigDict(frozen=True)

    input: CalculationInput
    emissions: EmissionTotals
    breakdown: EmissionBreakdown
    metrics: CalculationMetrics
    metadata: CalculationMetadata


class CalculationResponse(BaseModel):
    """Response envelope for the single calculation endpoint."""

    success: bool = True
    calculation_id: str
    result: CalculationResult
    glec_version: str
    calculated_at: datetime


class BatchOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    aggregate_results: bool | None = None


class BatchCalculationRequest(BaseModel):
    """Request model for calculating several transport legs at once."""

    model_config = ConfigDict(frozen=True)

    calculations: list[CalculationRequest] = Field(
        ..., min_length=1, max_length=MAX_BATCH_SIZE
    )
    options: BatchOptions | None = None


class BatchItemError(BaseModel):
    """Failure of one batch item, keyed by its position in the request."""

    index: int
    error: str
    details: list[CalculationError] = Field(default_factory=list)


class BatchAggregate(BaseModel):
    total_emissions: Decimal
    average_intensity: Decimal
    total_distance: Decimal
    total_weight: Decimal
    calculation_count: int


class BatchSummary(BaseModel):
    total_requests: int
    successful: int
    failed: int


class BatchCalculationResult(BaseModel):
    """Outcome of a batch: successes in input order plus indexed failures."""

    success: bool = True
    individual: list[CalculationResult] = Field(default_factory=list)
    errors: list[BatchItemError] = Field(default_factory=list)
    aggregate: BatchAggregate | None = None
    summary: BatchSummary
