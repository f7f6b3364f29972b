"""
Exception taxonomy for dispatch commands.

Derivation of revenue/cost/profit never raises; everything else that can
go wrong in a command is one of the classes below.
"""

from typing import Optional


class HaulixError(Exception):
    """Base class for failures surfaced to the user as a notification."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LoadValidationError(HaulixError):
    """A required field is missing. Raised before any store write."""


class RecordNotFoundError(HaulixError):
    """A command referenced a record absent from the current snapshot."""

    def __init__(self, kind: str, record_id: Optional[str]) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class TransportError(HaulixError):
    """The store, upload or email collaborator failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
