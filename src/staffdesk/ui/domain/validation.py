"""Save gate for the role form.

The form layer captures its field values in a :class:`RoleDraft` and hands
``lambda: validate_role_draft(draft)`` to the disclosure coordinator's
``commit``. Rules run in a fixed order and stop at the first failure, so
the returned list holds at most one error and its ``field`` is the widget
that should receive focus.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from ..errors import InvalidRange, MissingRequiredField, OutOfBounds, ValidationError
from ..models.records import RoleRecord

START_FIELD = "start"
END_FIELD = "end"
UTILIZATION_FIELD = "utilization"
UTILIZATION_MIN = 0
UTILIZATION_MAX = 100


@dataclass(slots=True, frozen=True)
class RoleDraft:
    """Unsaved values entered in the role form."""

    start_date: date | None = None
    end_date: date | None = None
    utilization_rate: int | None = None
    reason: str | None = None
    head_office: bool = False
    team_lead: bool = False

    @classmethod
    def from_record(cls, record: RoleRecord) -> RoleDraft:
        return cls(
            start_date=record.start_date,
            end_date=record.end_date,
            utilization_rate=record.utilization_rate,
            reason=record.reason,
            head_office=record.head_office,
            team_lead=record.team_lead,
        )

    def apply_to(self, record: RoleRecord) -> RoleRecord:
        """Return a copy of ``record`` carrying the draft values.

        A blank utilization is stored as 0.
        """
        return replace(
            record,
            start_date=self.start_date,
            end_date=self.end_date,
            utilization_rate=self.utilization_rate if self.utilization_rate is not None else 0,
            reason=self.reason,
            head_office=self.head_office,
            team_lead=self.team_lead,
        )


def validate_role_draft(draft: RoleDraft) -> list[ValidationError]:
    """Check ``draft`` and return the first failure, or an empty list."""
    if draft.start_date is None:
        return [MissingRequiredField(START_FIELD, "Start date is required")]

    if draft.end_date is None:
        return [MissingRequiredField(END_FIELD, "End date is required")]

    if draft.end_date < draft.start_date:
        return [
            InvalidRange(
                END_FIELD,
                "End date must be after start date",
                {"start": draft.start_date.isoformat(), "end": draft.end_date.isoformat()},
            )
        ]

    utilization = draft.utilization_rate
    if utilization is not None and not UTILIZATION_MIN <= utilization <= UTILIZATION_MAX:
        return [
            OutOfBounds(
                UTILIZATION_FIELD,
                "Utilization rate must be between 0 and 100",
                {"value": utilization, "min": UTILIZATION_MIN, "max": UTILIZATION_MAX},
            )
        ]

    return []


__all__ = [
    "RoleDraft",
    "validate_role_draft",
    "START_FIELD",
    "END_FIELD",
    "UTILIZATION_FIELD",
]
