"""
Global Warming Potential conversion.
"""

from decimal import Decimal

from app.utils.constants import GWP_CH4, GWP_CO2, GWP_N2O


def convert_to_co2e(
    co2: Decimal,
    ch4: Decimal | None = None,
    n2o: Decimal | None = None,
) -> Decimal:
    """
    Convert per-gas masses to a single CO2-equivalent mass using GWP100.

    Absent gases count as zero.

    Example:
        >>> convert_to_co2e(Decimal("10"), Decimal("1"), Decimal("0.1"))
        Decimal('64.5')
    """
    total = co2 * GWP_CO2

    if ch4:
        total += ch4 * GWP_CH4
    if n2o:
        total += n2o * GWP_N2O

    return total
