"""Record models shown in the role list and edited in the role form."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

_DATE_FORMAT = "%d.%m.%Y"


@dataclass(slots=True)
class Employee:
    """The person whose role assignments are being managed."""

    first_name: str
    last_name: str
    personal_number: str
    status: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()


@dataclass(slots=True)
class RoleRecord:
    """A single role assignment.

    The ``active`` and ``selected`` flags belong to the record store: ``active``
    marks the record disclosed in the detail panel, ``selected`` marks rows
    checked for batch removal. Only the store flips them.

    Attributes:
        record_id: Opaque identity of the record.
        name: Display name of the role.
        start_date: First day of the assignment.
        end_date: Last day of the assignment, or None when open-ended.
        utilization_rate: Percentage of working time (0-100), if known.
        reason: Why the role was assigned.
        head_office: Whether the role is based at head office.
        team_lead: Whether the role includes team leadership.
    """

    record_id: str
    name: str
    start_date: date | None = None
    end_date: date | None = None
    utilization_rate: int | None = None
    reason: str | None = None
    head_office: bool = False
    team_lead: bool = False
    active: bool = False
    selected: bool = False

    @property
    def date_range(self) -> str:
        """Return the validity window as ``dd.mm.yyyy - dd.mm.yyyy``."""
        if self.start_date is None:
            return ""
        start = self.start_date.strftime(_DATE_FORMAT)
        if self.end_date is None:
            return f"{start} -"
        return f"{start} - {self.end_date.strftime(_DATE_FORMAT)}"

    def status(self, today: date | None = None) -> str:
        """Return "Ongoing", "Active" or "Completed" relative to ``today``."""
        if self.end_date is None:
            return "Ongoing"
        if self.end_date > (today or date.today()):
            return "Active"
        return "Completed"

    def copy(self) -> RoleRecord:
        return replace(self)


__all__ = ["Employee", "RoleRecord"]
