from typing import Any, Optional


class GatewayAddonError(Exception):
    """Base class for every error raised by the device model."""


class PropertyConfigurationError(GatewayAddonError):
    """Malformed or legacy property description, fatal at construction."""


class PropertyValidationError(GatewayAddonError):
    """A rejected write. The cached value is left unchanged."""

    reason = "Invalid value"

    def __init__(self, value: Any, bound: Optional[Any] = None):
        self.value = value
        self.bound = bound
        super().__init__(self.build_message())

    def build_message(self) -> str:
        return f"{self.reason}: {self.bound}"


class ReadOnlyViolation(PropertyValidationError):
    reason = "Read-only property"

    def build_message(self) -> str:
        return f"{self.reason}, cannot set value {self.value!r}"


class BelowMinimum(PropertyValidationError):
    reason = "Value less than minimum"


class AboveMaximum(PropertyValidationError):
    reason = "Value greater than maximum"


class NotAMultiple(PropertyValidationError):
    reason = "Value is not a multiple of"


class InvalidEnumValue(PropertyValidationError):
    reason = "Invalid enum value"

    def build_message(self) -> str:
        return f"{self.reason}: {self.value!r} (allowed: {', '.join(self.bound)})"
