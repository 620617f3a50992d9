"""Error types raised or returned by the disclosure/selection layer.

Three families exist:

- ``InvalidStateError``: a caller asked for a transition that the current
  panel state does not allow. This is an integration bug and propagates.
- ``ValidationError`` and subclasses: recoverable form problems returned
  by the save gate. Each one names the offending form field so the view
  can move focus there.
- ``SaveError``: the record store could not persist a record. The panel
  stays open so the user can retry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


class ErrorCode:
    """Constants for machine-readable error codes."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_RANGE = "invalid_range"
    OUT_OF_BOUNDS = "out_of_bounds"
    INVALID_STATE = "invalid_state"
    SAVE_FAILED = "save_failed"


class InvalidStateError(RuntimeError):
    """Raised when a panel transition is requested from an illegal state."""


class SaveError(Exception):
    """Raised by a record store when a record cannot be persisted."""

    error_code: ClassVar[str] = ErrorCode.SAVE_FAILED

    def __init__(self, message: str, *, record_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.record_id = record_id


@dataclass
class ValidationError(Exception):
    """Base class for field-level validation failures.

    Attributes:
        field: Name of the form field that failed (``"start"``, ``"end"``,
            ``"utilization"``).
        message: Human-readable description shown to the user.
        details: Additional structured information.
    """

    field: str
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    error_code: ClassVar[str] = "validation_error"

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error_code,
            "field": self.field,
            "message": self.message,
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload


@dataclass
class MissingRequiredField(ValidationError):
    """A required field was left empty."""

    error_code: ClassVar[str] = ErrorCode.MISSING_REQUIRED_FIELD


@dataclass
class InvalidRange(ValidationError):
    """The end date of a range lies before its start date."""

    error_code: ClassVar[str] = ErrorCode.INVALID_RANGE


@dataclass
class OutOfBounds(ValidationError):
    """A numeric field is outside its permitted bounds."""

    error_code: ClassVar[str] = ErrorCode.OUT_OF_BOUNDS


__all__ = [
    "ErrorCode",
    "InvalidStateError",
    "SaveError",
    "ValidationError",
    "MissingRequiredField",
    "InvalidRange",
    "OutOfBounds",
]
