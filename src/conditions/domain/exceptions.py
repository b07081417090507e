"""Custom exceptions for the condition engine."""


class ConditionEngineException(Exception):
    """Base exception for all condition engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize engine exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SensorCatalogError(ConditionEngineException):
    """Raised when a sensor catalog cannot be built from its source."""

    pass


class DuplicateSensorError(SensorCatalogError):
    """Raised when two catalog entries share the same sensor id."""

    def __init__(self, sensor_id: str):
        super().__init__(
            message=f"Sensor '{sensor_id}' is defined more than once",
            details={"sensor_id": sensor_id},
        )


class InvalidPayloadError(ConditionEngineException):
    """Raised when a persisted rule payload cannot be rehydrated."""

    def __init__(self, message: str, validation_errors: list[str] | None = None):
        details = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        super().__init__(message, details)

    @classmethod
    def from_validation_error(cls, message: str, error) -> "InvalidPayloadError":
        """Build from a pydantic ValidationError, one "loc: msg" line per error."""
        return cls(message, [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in error.errors()])


class UnsupportedFieldError(ConditionEngineException):
    """Raised when an update targets a field the engine does not edit."""

    def __init__(self, target: str, field: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"Cannot update '{field}' on a {target}; expected one of {', '.join(allowed)}",
            details={"target": target, "field": field, "allowed": list(allowed)},
        )
