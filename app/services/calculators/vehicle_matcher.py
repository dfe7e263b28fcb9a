"""
Road vehicle type matching utilities.

Provides exact alias and fuzzy matching of free-text vehicle type names onto
the canonical GLEC road vehicle types.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple

from rapidfuzz import fuzz, process

logger = logging.getLogger(__name__)


class VehicleTypeMatcher:
    """
    Service for normalizing road vehicle type names.

    Supports exact alias matching and fuzzy matching with confidence scoring.
    Names that match neither are returned unchanged.
    """

    # Default fuzzy matching threshold (90%)
    DEFAULT_THRESHOLD = 90

    ALIASES = {
        "truck": "truck",
        "lorry": "truck",
        "van": "van",
        "car": "car",
        "automobile": "car",
        "motorcycle": "motorcycle",
        "motorbike": "motorcycle",
        "heavy_truck": "heavy_truck",
        "heavy_goods_vehicle": "heavy_truck",
        "hgv": "heavy_truck",
        "light_truck": "light_truck",
        "light_goods_vehicle": "light_truck",
        "lgv": "light_truck",
    }

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        """
        Initialize matcher.

        Args:
            threshold: Minimum similarity score (0-100) for fuzzy matches
        """
        self.threshold = threshold

    @staticmethod
    def clean(vehicle_type: str) -> str:
        """Lower-case and fold spaces and hyphens to underscores."""
        return "_".join(vehicle_type.strip().lower().replace("-", " ").split())

    def exact_match(self, vehicle_type: str) -> Optional[str]:
        """
        Find the canonical type for a known alias.

        Args:
            vehicle_type: Vehicle type as supplied

        Returns:
            Canonical vehicle type if the alias is known, None otherwise
        """
        return self.ALIASES.get(self.clean(vehicle_type))

    def fuzzy_match(self, vehicle_type: str) -> Optional[Tuple[str, Decimal]]:
        """
        Find the closest alias using rapidfuzz.

        Args:
            vehicle_type: Vehicle type as supplied

        Returns:
            Tuple of (canonical vehicle type, confidence_score) if a match is
            above the threshold, None otherwise
        """
        cleaned = self.clean(vehicle_type)

        # token_sort_ratio handles word order ("truck heavy")
        result = process.extractOne(
            cleaned.replace("_", " "),
            [alias.replace("_", " ") for alias in self.ALIASES],
            scorer=fuzz.token_sort_ratio,
        )

        if result is None:
            return None

        matched_alias, score, _ = result

        if score < self.threshold:
            logger.debug(
                f"Fuzzy match score {score:.1f} below threshold {self.threshold} "
                f"for vehicle type '{vehicle_type}'"
            )
            return None

        canonical = self.ALIASES[matched_alias.replace(" ", "_")]
        confidence = Decimal(str(round(score, 2))) / Decimal("100")

        logger.info(
            f"Fuzzy matched vehicle type '{vehicle_type}' to '{canonical}' "
            f"with {score:.1f}% confidence"
        )
        return canonical, confidence

    def normalize(self, vehicle_type: str) -> str:
        """
        Normalize a vehicle type with exact match first, then fuzzy fallback.

        Example:
            >>> VehicleTypeMatcher().normalize("HGV")
            'heavy_truck'
        """
        canonical = self.exact_match(vehicle_type)
        if canonical:
            return canonical

        result = self.fuzzy_match(vehicle_type)
        if result is None:
            return vehicle_type

        return result[0]
