"""Demo role data for the role management view."""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Sequence

from ..ui.models.records import Employee, RoleRecord

LOGGER = logging.getLogger(__name__)

DEFAULT_ROLE_COUNT = 100
DEFAULT_SEED = 42

ROLE_NAMES: tuple[str, ...] = (
    "Product Owner",
    "Scrum Master",
    "UX Designer",
    "UI Designer",
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
    "DevOps Engineer",
    "QA Engineer",
    "Test Automation Engineer",
    "Business Analyst",
    "Data Analyst",
    "Data Scientist",
    "ML Engineer",
    "Solution Architect",
    "Technical Lead",
    "Engineering Manager",
    "Project Manager",
    "Product Manager",
    "Marketing Manager",
    "Sales Manager",
    "HR Manager",
    "Software Engineer",
    "Senior Developer",
    "Junior Developer",
    "Intern",
    "UX Researcher",
    "Content Writer",
    "Graphic Designer",
    "Brand Manager",
)

ASSIGNMENT_REASONS: tuple[str, ...] = (
    "Excellent performance",
    "Good employee",
    "Team leadership skills",
    "Technical expertise",
    "Project requirements",
    "Strong communication",
    "Problem-solving abilities",
    "Innovation and creativity",
    "Reliable team member",
    "Strategic thinking",
    "Client satisfaction",
    "Process improvement",
)

# Offered in the form's reason combo box
SELECTABLE_REASONS: tuple[str, ...] = ASSIGNMENT_REASONS[:5]


class RoleService:
    """Provides the current employee and a deterministic set of demo roles.

    Records are generated once per service from a seeded random source so
    every launch shows the same list. The roles end up in a mix of the
    Ongoing, Active and Completed statuses.
    """

    def __init__(
        self,
        *,
        count: int = DEFAULT_ROLE_COUNT,
        seed: int = DEFAULT_SEED,
        today: date | None = None,
    ) -> None:
        self._today = today or date.today()
        self._employee = Employee(
            first_name="Altan",
            last_name="Sadik",
            personal_number="42786",
            status="Active",
        )
        self._roles = self._generate_roles(count, random.Random(seed))
        self._saved: list[str] = []

    @property
    def current_employee(self) -> Employee:
        return self._employee

    @property
    def saved_ids(self) -> tuple[str, ...]:
        """Ids passed to :meth:`save_role`, in call order."""
        return tuple(self._saved)

    def available_roles(self) -> list[RoleRecord]:
        """Return fresh copies of the demo roles; the first one is selected."""
        return [role.copy() for role in self._roles]

    def available_reasons(self) -> Sequence[str]:
        return SELECTABLE_REASONS

    def save_role(self, record: RoleRecord) -> None:
        """Persistence hook handed to the record store.

        There is no backing database; the call is recorded and logged.
        """
        LOGGER.info("Saving role %s (%s)", record.name, record.record_id)
        self._saved.append(record.record_id)

    def _generate_roles(self, count: int, rng: random.Random) -> list[RoleRecord]:
        today = self._today
        roles: list[RoleRecord] = []
        for index in range(count):
            base_name = ROLE_NAMES[index % len(ROLE_NAMES)]
            if index >= len(ROLE_NAMES):
                name = f"{base_name} {index // len(ROLE_NAMES) + 1}"
            else:
                name = base_name

            start = today - timedelta(days=rng.randrange(365 * 3))
            end_kind = rng.random()
            if end_kind < 0.33:
                end: date | None = None
            elif end_kind < 0.66:
                end = today + timedelta(days=1 + rng.randrange(730))
            else:
                end = start + timedelta(days=rng.randrange(365))
                if end > today:
                    end = today - timedelta(days=rng.randrange(365))
                # Completed roles never end before they start
                end = max(end, start)

            roles.append(
                RoleRecord(
                    record_id=str(index + 1),
                    name=name,
                    start_date=start,
                    end_date=end,
                    utilization_rate=10 + rng.randrange(91),
                    reason=rng.choice(ASSIGNMENT_REASONS),
                    head_office=True,
                    team_lead=True,
                )
            )

        if roles:
            roles[0].selected = True
        return roles


__all__ = ["RoleService", "ROLE_NAMES", "SELECTABLE_REASONS"]
