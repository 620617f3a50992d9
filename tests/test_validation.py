"""Tests for the role form save gate."""

from __future__ import annotations

from datetime import date

import pytest

from staffdesk.ui.domain.validation import (
    END_FIELD,
    START_FIELD,
    UTILIZATION_FIELD,
    RoleDraft,
    validate_role_draft,
)
from staffdesk.ui.errors import ErrorCode, InvalidRange, MissingRequiredField, OutOfBounds, ValidationError
from staffdesk.ui.models.records import RoleRecord


def _draft(**overrides) -> RoleDraft:
    values = {
        "start_date": date(2024, 3, 1),
        "end_date": date(2024, 9, 30),
        "utilization_rate": 60,
        "reason": "Good employee",
    }
    values.update(overrides)
    return RoleDraft(**values)


def test_valid_draft_has_no_errors() -> None:
    assert validate_role_draft(_draft()) == []


def test_missing_start_reported_first() -> None:
    errors = validate_role_draft(_draft(start_date=None, end_date=None, utilization_rate=500))

    assert len(errors) == 1
    assert isinstance(errors[0], MissingRequiredField)
    assert errors[0].field == START_FIELD
    assert errors[0].message == "Start date is required"


def test_missing_end_reported() -> None:
    errors = validate_role_draft(_draft(end_date=None))

    assert [error.field for error in errors] == [END_FIELD]
    assert errors[0].message == "End date is required"


def test_end_before_start_reported_on_end_field() -> None:
    errors = validate_role_draft(_draft(start_date=date(2024, 5, 2), end_date=date(2024, 5, 1)))

    assert len(errors) == 1
    error = errors[0]
    assert isinstance(error, InvalidRange)
    assert error.field == END_FIELD
    assert error.message == "End date must be after start date"
    assert error.details == {"start": "2024-05-02", "end": "2024-05-01"}


def test_same_day_range_is_valid() -> None:
    assert validate_role_draft(_draft(start_date=date(2024, 5, 1), end_date=date(2024, 5, 1))) == []


@pytest.mark.parametrize("value", [-1, 101, 250])
def test_utilization_out_of_bounds(value: int) -> None:
    errors = validate_role_draft(_draft(utilization_rate=value))

    assert len(errors) == 1
    assert isinstance(errors[0], OutOfBounds)
    assert errors[0].field == UTILIZATION_FIELD
    assert errors[0].message == "Utilization rate must be between 0 and 100"


@pytest.mark.parametrize("value", [None, 0, 100])
def test_utilization_bounds_inclusive(value: int | None) -> None:
    assert validate_role_draft(_draft(utilization_rate=value)) == []


def test_error_serialization() -> None:
    error = validate_role_draft(_draft(utilization_rate=120))[0]

    payload = error.to_dict()

    assert payload["error"] == ErrorCode.OUT_OF_BOUNDS
    assert payload["field"] == UTILIZATION_FIELD
    assert payload["details"]["value"] == 120
    assert str(error) == error.message
    assert isinstance(error, ValidationError)
    assert isinstance(error, Exception)


class TestRoleDraft:
    """Tests for moving values between drafts and records."""

    def test_from_record_copies_form_values(self) -> None:
        record = RoleRecord(
            record_id="7",
            name="Scrum Master",
            start_date=date(2023, 1, 1),
            end_date=None,
            utilization_rate=40,
            reason="Technical expertise",
            head_office=True,
        )

        draft = RoleDraft.from_record(record)

        assert draft.start_date == date(2023, 1, 1)
        assert draft.end_date is None
        assert draft.utilization_rate == 40
        assert draft.head_office is True
        assert draft.team_lead is False

    def test_apply_to_returns_updated_copy(self) -> None:
        record = RoleRecord(record_id="7", name="Scrum Master", utilization_rate=40, active=True)

        updated = _draft(team_lead=True).apply_to(record)

        assert updated is not record
        assert updated.record_id == "7"
        assert updated.name == "Scrum Master"
        assert updated.utilization_rate == 60
        assert updated.team_lead is True
        assert updated.active is True
        assert record.utilization_rate == 40

    def test_apply_blank_utilization_as_zero(self) -> None:
        record = RoleRecord(record_id="7", name="Scrum Master", utilization_rate=40)

        updated = _draft(utilization_rate=None).apply_to(record)

        assert updated.utilization_rate == 0
