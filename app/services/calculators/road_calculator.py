"""
Road transport emissions calculator.

Implements GLEC Framework v3.1 for road transport legs.
"""

import logging

from app.pydantic_models.activity import ActivityData
from app.pydantic_models.calculation import CalculationError
from app.pydantic_models.emission_factor import EmissionFactor
from app.services.calculators.mode_strategy import (
    ModeEmissions,
    ModeStrategy,
    split_emissions,
    validate_distance,
    validate_load_factor,
)
from app.services.calculators.vehicle_matcher import VehicleTypeMatcher
from app.services.factors.default_factors import (
    road_default_factor,
    road_default_load_factor,
    wtw_ratio,
)
from app.utils.constants import (
    EMPTY_RETURN_MULTIPLIER,
    MIN_ROAD_LOAD_FACTOR,
    ErrorCode,
    FactorUnit,
    TransportMode,
)

logger = logging.getLogger(__name__)


class RoadCalculator:
    """
    Capabilities for road transport.

    Emissions are vehicle-km (or tonne-km) based, adjusted for load factor,
    with an optional empty return leg and a fuel-specific Well-to-Wheel split.
    """

    def __init__(self, vehicle_matcher: VehicleTypeMatcher | None = None):
        self.vehicle_matcher = vehicle_matcher or VehicleTypeMatcher()

    def validate(self, data: ActivityData) -> list[CalculationError]:
        errors = validate_distance(data)

        if not data.vehicle or not data.vehicle.type:
            errors.append(
                CalculationError(
                    code=ErrorCode.INVALID_VEHICLE,
                    message="Vehicle type must be specified",
                    field="vehicle.type",
                    suggestion="Use truck, van, car, motorcycle, etc.",
                )
            )

        if not data.vehicle or not data.vehicle.fuel_type:
            errors.append(
                CalculationError(
                    code=ErrorCode.INVALID_FUEL_TYPE,
                    message="Fuel type must be specified",
                    field="vehicle.fuel_type",
                    suggestion="Use diesel, petrol, electric, hybrid, etc.",
                )
            )

        if data.weight is not None and data.weight < 0:
            errors.append(
                CalculationError(
                    code=ErrorCode.INVALID_WEIGHT,
                    message="Weight cannot be negative",
                    field="weight",
                )
            )

        errors.extend(validate_load_factor(data))
        return errors

    def canonical_vehicle_type(self, data: ActivityData) -> str:
        return self.vehicle_matcher.normalize(data.vehicle.type)

    def lookup_key(self, data: ActivityData):
        return self.canonical_vehicle_type(data).lower(), data.vehicle.fuel_type

    def default_factor(self, data: ActivityData) -> EmissionFactor:
        return road_default_factor(
            self.canonical_vehicle_type(data), data.vehicle.fuel_type
        )

    def normalize(self, data: ActivityData) -> ActivityData:
        vehicle_type = self.canonical_vehicle_type(data)
        update = {"vehicle": data.vehicle.model_copy(update={"type": vehicle_type})}

        if data.load_factor is None:
            update["load_factor"] = road_default_load_factor(vehicle_type)

        return data.model_copy(update=update)

    def compute_emissions(
        self, data: ActivityData, factor: EmissionFactor
    ) -> ModeEmissions:
        """
        Calculate road transport emissions.

        Formula:
            base = distance * co2_factor            (unit km)
            base = distance * weight * co2_factor   (unit tkm with weight)
            co2  = base / max(load_factor, 0.1) [* 1.5 if empty return]
        """
        distance = data.distance
        load_factor = data.load_factor

        if factor.unit == FactorUnit.KM:
            base = distance * factor.co2_factor
        elif factor.unit == FactorUnit.TKM and data.weight:
            base = distance * data.weight * factor.co2_factor
        else:
            logger.debug(
                f"Factor unit {factor.unit.value} without usable weight, "
                "falling back to distance-based calculation"
            )
            base = distance * factor.co2_factor

        co2 = base / max(load_factor, MIN_ROAD_LOAD_FACTOR)

        if data.empty_return:
            co2 = co2 * EMPTY_RETURN_MULTIPLIER

        direct_share, _ = wtw_ratio(data.vehicle.fuel_type)
        direct, indirect = split_emissions(co2, direct_share)

        ch4 = distance * factor.ch4_factor * load_factor if factor.ch4_factor else None
        n2o = distance * factor.n2o_factor * load_factor if factor.n2o_factor else None

        return ModeEmissions(
            co2=co2,
            ch4=ch4,
            n2o=n2o,
            direct_emissions=direct,
            indirect_emissions=indirect,
        )

    def assumptions(self, data: ActivityData) -> list[str]:
        assumptions = []

        if not data.route_type:
            assumptions.append("Mixed highway/urban route assumed")

        if self.canonical_vehicle_type(data) == "truck" and not data.vehicle.capacity:
            assumptions.append("Medium truck capacity assumed")

        if not data.fuel_consumed:
            assumptions.append("Standard fuel efficiency assumed for vehicle type")

        if data.empty_return:
            assumptions.append("Empty return leg modelled as a 50% uplift")

        return assumptions


def build_road_strategy(vehicle_matcher: VehicleTypeMatcher | None = None) -> ModeStrategy:
    calculator = RoadCalculator(vehicle_matcher)
    return ModeStrategy(
        mode=TransportMode.ROAD,
        validate=calculator.validate,
        default_factor=calculator.default_factor,
        normalize=calculator.normalize,
        compute_emissions=calculator.compute_emissions,
        lookup_key=calculator.lookup_key,
        assumptions=calculator.assumptions,
    )
