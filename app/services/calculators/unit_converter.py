"""
Unit conversion and rounding utilities for emissions calculations.

Stateless helpers shared by the pipeline and the factor providers.
"""

from decimal import ROUND_HALF_UP, Decimal


class UnitConverter:
    """
    Unit conversion service.

    Provides conversions between the units used in logistics emissions
    accounting and the rounding applied to reported values.
    """

    # Conversion constants
    KG_TO_TONNES = Decimal("0.001")
    PERCENT = Decimal("100")

    @staticmethod
    def normalize_number(value: str | float | int | Decimal) -> Decimal:
        """
        Normalize a number value to Decimal.

        Handles string inputs with commas, floats, and existing Decimals.

        Args:
            value: Number value in various formats

        Returns:
            Normalized Decimal value

        Example:
            >>> UnitConverter.normalize_number("1,234.56")
            Decimal('1234.56')
        """

        if isinstance(value, Decimal):
            return value

        if isinstance(value, str):
            # Remove commas from string numbers
            value = value.replace(",", "")

        return Decimal(str(value))

    @staticmethod
    def tonne_km(distance: Decimal, weight: Decimal) -> Decimal:
        """
        Cargo mass moved over a distance.

        Args:
            distance: Distance in kilometres
            weight: Cargo mass in tonnes

        Returns:
            Tonne-kilometres
        """
        return distance * weight

    @staticmethod
    def kg_to_tonnes(kg: float | Decimal) -> Decimal:
        """
        Convert kilograms to tonnes.

        Args:
            kg: Mass in kilograms

        Returns:
            Mass in tonnes as Decimal
        """

        if isinstance(kg, float):
            kg = Decimal(str(kg))
        return kg * UnitConverter.KG_TO_TONNES

    @staticmethod
    def to_percent(fraction: Decimal) -> str:
        """Format a 0-1 fraction as a percentage string, e.g. 0.7 -> '70%'."""
        return f"{(fraction * UnitConverter.PERCENT).normalize():f}%"

    @staticmethod
    def round_value(value: Decimal, precision: int) -> Decimal:
        """
        Round half-up to a number of decimal places.

        Example:
            >>> UnitConverter.round_value(Decimal("10723.125"), 1)
            Decimal('10723.1')
        """
        return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
