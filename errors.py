# errors.py

from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError


class ParkingError(Exception):
    """Base class for every error raised by the parking core."""


class ValidationError(ParkingError):
    """Bad user input. `errors` maps each offending field to a message."""

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(message or f"Invalid value for: {fields}")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        errors = {}
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "__root__"
            errors.setdefault(field, err["msg"])
        return cls(errors)


class NotFound(ParkingError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Vehicle record {record_id} not found")


class AlreadyClosed(ParkingError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Vehicle record {record_id} already has an exit registered")


class InvalidConfiguration(ParkingError):
    """Tariff data is missing or corrupt. A system fault, not user input."""
