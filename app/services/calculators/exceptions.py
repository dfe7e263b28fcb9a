"""
Emission calculation exceptions.
"""
from app.pydantic_models.calculation import CalculationError
from app.utils.constants import ErrorCode


class CalculationValidationError(Exception):
    """
    Raised when activity data fails validation.

    Carries every CalculationError found, never just the first.
    """

    def __init__(self, transport_mode: str, errors: list[CalculationError]):
        self.transport_mode = transport_mode
        self.errors = errors
        super().__init__(
            f"Validation failed: {', '.join(error.message for error in errors)}"
        )


class UnsupportedTransportModeError(ValueError):
    """Raised when no strategy exists for a transport mode."""

    def __init__(self, transport_mode, supported_modes=()):
        transport_mode = getattr(transport_mode, "value", transport_mode)
        self.transport_mode = transport_mode
        self.supported_modes = [getattr(m, "value", m) for m in supported_modes]
        super().__init__(f"Unsupported transport mode: {transport_mode}")

    def as_calculation_error(self) -> CalculationError:
        return CalculationError(
            code=ErrorCode.UNSUPPORTED_TRANSPORT_MODE,
            message=str(self),
            field="transport_mode",
            suggestion=(
                f"Use one of: {', '.join(self.supported_modes)}"
                if self.supported_modes
                else None
            ),
        )
