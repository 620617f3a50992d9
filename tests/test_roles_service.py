"""Tests for :mod:`staffdesk.services.roles`."""

from __future__ import annotations

from datetime import date

from staffdesk.services.roles import ROLE_NAMES, SELECTABLE_REASONS, RoleService

TODAY = date(2025, 6, 1)


def test_current_employee() -> None:
    employee = RoleService(today=TODAY).current_employee

    assert employee.full_name == "Altan Sadik"
    assert employee.personal_number == "42786"
    assert employee.status == "Active"


def test_generates_requested_number_of_roles() -> None:
    roles = RoleService(count=45, today=TODAY).available_roles()

    assert len(roles) == 45
    assert [role.record_id for role in roles[:3]] == ["1", "2", "3"]
    assert roles[0].name == ROLE_NAMES[0]
    assert roles[len(ROLE_NAMES)].name == f"{ROLE_NAMES[0]} 2"


def test_roles_are_deterministic() -> None:
    first = RoleService(count=20, today=TODAY).available_roles()
    second = RoleService(count=20, today=TODAY).available_roles()

    assert first == second


def test_only_first_role_starts_selected() -> None:
    roles = RoleService(count=10, today=TODAY).available_roles()

    assert [role.record_id for role in roles if role.selected] == ["1"]
    assert not any(role.active for role in roles)


def test_generated_roles_are_valid() -> None:
    roles = RoleService(today=TODAY).available_roles()

    for role in roles:
        assert role.start_date is not None and role.start_date <= TODAY
        assert role.end_date is None or role.end_date >= role.start_date
        assert 10 <= role.utilization_rate <= 100
    statuses = {role.status(TODAY) for role in roles}
    assert statuses == {"Ongoing", "Active", "Completed"}


def test_available_roles_returns_copies() -> None:
    service = RoleService(count=3, today=TODAY)
    roles = service.available_roles()
    roles[0].name = "Changed"

    assert service.available_roles()[0].name == ROLE_NAMES[0]


def test_save_role_is_recorded() -> None:
    service = RoleService(count=3, today=TODAY)
    record = service.available_roles()[1]

    service.save_role(record)

    assert service.saved_ids == ("2",)


def test_reasons() -> None:
    assert list(RoleService(count=1).available_reasons()) == list(SELECTABLE_REASONS)
    assert "Good employee" in SELECTABLE_REASONS
