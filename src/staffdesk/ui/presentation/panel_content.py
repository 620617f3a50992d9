"""Content builders for the primary and nested detail panels."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from ..domain.validation import RoleDraft
from ..models.records import RoleRecord

ROLE_INFO_TITLE = "Role info"
ROLE_INFO_TEXT = (
    "Role assignments define where the employee spends their working time. "
    "Use the form to adjust the validity period, utilisation and the reason "
    "for the assignment."
)
NESTED_TITLE = "Additional Role Information"
NESTED_TEXT = (
    "This panel shows additional information about the selected role. "
    "It stays open on top of the role form until it is closed or another "
    "role is selected."
)


@dataclass(slots=True, frozen=True)
class PanelContent:
    """Renderable content for one detail panel.

    Attributes:
        record_id: The record the content was built from.
        title: Panel heading.
        fields: Read-only ``(label, value)`` rows.
        body: Free text shown below the fields.
        draft: Initial form values; only set for the primary panel.
    """

    record_id: str
    title: str
    fields: tuple[tuple[str, str], ...] = ()
    body: str = ""
    draft: RoleDraft | None = None


class RolePanelContentProvider:
    """Builds :class:`PanelContent` for role records."""

    def __init__(self, *, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def build_primary(self, record: RoleRecord) -> PanelContent:
        return PanelContent(
            record_id=record.record_id,
            title=record.name,
            fields=(
                ("Status", record.status(self._today())),
                ("Period", record.date_range),
            ),
            body=ROLE_INFO_TEXT,
            draft=RoleDraft.from_record(record),
        )

    def build_nested(self, record: RoleRecord) -> PanelContent:
        utilization = "" if record.utilization_rate is None else f"{record.utilization_rate} %"
        return PanelContent(
            record_id=record.record_id,
            title=NESTED_TITLE,
            fields=(
                ("Role", record.name),
                ("Period", record.date_range),
                ("Status", record.status(self._today())),
                ("Utilisation rate", utilization),
                ("Reason", record.reason or ""),
            ),
            body=NESTED_TEXT,
        )


__all__ = ["PanelContent", "RolePanelContentProvider", "ROLE_INFO_TITLE", "NESTED_TITLE"]
