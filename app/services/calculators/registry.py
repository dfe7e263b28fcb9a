"""
Transport mode strategy registry.

Maps each transport mode to one ModeStrategy, built on first use and reused
afterwards. The registry is constructed explicitly by whoever assembles the
engine and passed in where needed.
"""

import logging
from typing import Callable

from app.services.calculators.air_calculator import build_air_strategy
from app.services.calculators.exceptions import UnsupportedTransportModeError
from app.services.calculators.mode_strategy import ModeStrategy
from app.services.calculators.rail_calculator import build_rail_strategy
from app.services.calculators.road_calculator import build_road_strategy
from app.services.calculators.sea_calculator import build_sea_strategy
from app.services.calculators.vehicle_matcher import VehicleTypeMatcher
from app.utils.constants import TransportMode

logger = logging.getLogger(__name__)

StrategyBuilder = Callable[[], ModeStrategy]


class StrategyRegistry:
    """
    Lazily built, cached strategies per transport mode.

    Builders are side-effect free, so two concurrent first requests for the
    same mode may both build; the first stored instance is kept.
    """

    def __init__(self, builders: dict[TransportMode, StrategyBuilder]):
        self._builders = dict(builders)
        self._strategies: dict[TransportMode, ModeStrategy] = {}

    @classmethod
    def default(
        cls, fuzzy_threshold: int = VehicleTypeMatcher.DEFAULT_THRESHOLD
    ) -> "StrategyRegistry":
        """
        Registry with the four GLEC transport modes.

        Args:
            fuzzy_threshold: Minimum score for fuzzy road vehicle type matches
        """
        return cls(
            {
                TransportMode.ROAD: lambda: build_road_strategy(
                    VehicleTypeMatcher(threshold=fuzzy_threshold)
                ),
                TransportMode.RAIL: build_rail_strategy,
                TransportMode.SEA: build_sea_strategy,
                TransportMode.AIR: build_air_strategy,
            }
        )

    @property
    def supported_modes(self) -> list[TransportMode]:
        return list(self._builders)

    def get(self, transport_mode: TransportMode | str) -> ModeStrategy:
        """
        Resolve the strategy for a transport mode.

        Raises:
            UnsupportedTransportModeError: If the mode has no strategy
        """
        try:
            mode = TransportMode(transport_mode)
        except ValueError:
            raise UnsupportedTransportModeError(
                transport_mode, self.supported_modes
            ) from None

        strategy = self._strategies.get(mode)
        if strategy is not None:
            return strategy

        builder = self._builders.get(mode)
        if builder is None:
            raise UnsupportedTransportModeError(transport_mode, self.supported_modes)

        logger.debug(f"Building {mode.value} strategy")
        return self._strategies.setdefault(mode, builder())
