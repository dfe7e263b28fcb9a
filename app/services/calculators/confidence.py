"""
Calculation confidence scoring.

A point system over data completeness and factor quality, not a
statistical model.
"""

from app.pydantic_models.activity import ActivityData
from app.pydantic_models.emission_factor import EmissionFactor
from app.utils.constants import ConfidenceLevel, FactorScope

HIGH_CONFIDENCE_SCORE = 7
MEDIUM_CONFIDENCE_SCORE = 4


def confidence_score(data: ActivityData, factor: EmissionFactor) -> int:
    score = 0

    # Data quality
    if data.weight is not None:
        score += 2
    if data.distance is not None:
        score += 2
    if data.fuel_consumed is not None:
        score += 2
    if data.load_factor is not None:
        score += 1

    # Factor quality
    if factor.scope == FactorScope.WTW:
        score += 1
    if factor.region:
        score += 1

    return score


def assess_confidence(data: ActivityData, factor: EmissionFactor) -> ConfidenceLevel:
    """
    Rate a calculation from the caller's activity data and the factor used.

    Args:
        data: Activity data as supplied, before normalization
        factor: Emission factor applied

    Returns:
        ConfidenceLevel: high (score >= 7), medium (>= 4) or low
    """
    score = confidence_score(data, factor)

    if score >= HIGH_CONFIDENCE_SCORE:
        return ConfidenceLevel.HIGH
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
