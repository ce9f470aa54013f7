"""
Domain-specific errors for the restfulness predictor.

All errors raised by the session and the prediction pipeline are
defined here. Adapters translate backend exceptions (BrainFlowError)
into these types so callers only ever see this hierarchy.
"""


class RestfulnessError(Exception):
    """Base error for all restfulness predictor errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidConfigurationError(RestfulnessError):
    """Raised when a session is constructed with unusable parameters."""

    def __init__(self, parameter: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid {parameter}={value!r}: {reason}")
        self.parameter = parameter
        self.value = value
        self.reason = reason


class InvalidStateError(RestfulnessError):
    """Raised when start/stop is called in the wrong session state."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(f"Cannot {operation} while session is {state}")
        self.operation = operation
        self.state = state


class DeviceError(RestfulnessError):
    """Raised when the acquisition board or the inference model fails."""

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"Device error during {action}: {reason}")
        self.action = action
        self.reason = reason


class DataShapeError(RestfulnessError):
    """Raised when two window halves cannot be joined along the time axis."""

    def __init__(self, first_shape: tuple, second_shape: tuple) -> None:
        super().__init__(
            f"Window halves must have the same number of rows: "
            f"{first_shape} vs {second_shape}"
        )
        self.first_shape = first_shape
        self.second_shape = second_shape
