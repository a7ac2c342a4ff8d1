from __future__ import annotations


class ConversionError(ValueError):
    """Base class for failures local to one conversion attempt."""


class EmptyResultError(ConversionError):
    """A reader produced no records from the supplied document."""


class MissingRequiredFieldError(ConversionError):
    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Required field(s) not mapped: {', '.join(self.missing)}")


class SerializationError(ConversionError):
    """Packaging generated output failed; parsed contacts are left untouched."""


__all__ = [
    "ConversionError",
    "EmptyResultError",
    "MissingRequiredFieldError",
    "SerializationError",
]
