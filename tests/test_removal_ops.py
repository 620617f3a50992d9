"""Unit tests for :mod:`staffdesk.ui.application.removal_ops`."""

from __future__ import annotations

from unittest.mock import Mock

from staffdesk.ui.application.removal_ops import RemovalRequest, RemoveSelectedUseCase
from staffdesk.ui.events import (
    PrimaryPanelHidden,
    RecordsRemoved,
    RemovalRequested,
    RemoveAffordanceChanged,
    SelectionChanged,
    StatusMessage,
)
from staffdesk.ui.models.disclosure import DisclosureState


class TestRemovalRequest:
    """Tests for the RemovalRequest value object."""

    def test_summary_lists_names(self) -> None:
        request = RemovalRequest(record_ids=("r1", "r2"), names=("Intern", "QA Engineer"))

        assert request.count == 2
        assert request.summary == "Selected 2 role(s) for removal: Intern, QA Engineer"


class TestRemoveSelectedUseCase:
    """Tests for RemoveSelectedUseCase.execute."""

    def test_nothing_selected(self, removal: RemoveSelectedUseCase, recorder) -> None:
        result = removal.execute()

        assert result.success is False
        assert result.removed == ()
        assert result.message == "No roles selected"
        assert recorder.events == []

    def test_build_request_uses_store_order(self, removal, coordinator) -> None:
        coordinator.handle_row_click("r3", toggle=True)
        coordinator.handle_row_click("r1", toggle=True)

        request = removal.build_request()

        assert request is not None
        assert request.record_ids == ("r1", "r3")
        assert request.names == ("Role 1", "Role 3")

    def test_removes_without_confirmer(self, removal, coordinator, store, recorder) -> None:
        coordinator.handle_row_click("r2", toggle=True)
        coordinator.handle_row_click("r3", toggle=True)
        recorder.clear()

        result = removal.execute()

        assert result.success is True
        assert result.removed == ("r2", "r3")
        assert result.dismissed_primary is False
        assert [record.record_id for record in store] == ["r1", "r4"]
        assert recorder.types() == [
            RemovalRequested,
            StatusMessage,
            RecordsRemoved,
            SelectionChanged,
            RemoveAffordanceChanged,
        ]
        assert recorder.of_type(StatusMessage)[0].message == "Selected 2 role(s) for removal: Role 2, Role 3"
        assert recorder.of_type(RemoveAffordanceChanged)[0].enabled is False

    def test_disclosed_record_closes_panels_first(self, removal, coordinator, recorder) -> None:
        coordinator.select_record("r2")
        coordinator.reveal_nested()
        coordinator.handle_row_click("r2", toggle=True)
        recorder.clear()

        result = removal.execute()

        assert result.dismissed_primary is True
        assert coordinator.state == DisclosureState.closed()
        types = recorder.types()
        assert types.index(PrimaryPanelHidden) < types.index(RecordsRemoved)

    def test_other_disclosed_record_stays_open(self, removal, coordinator) -> None:
        coordinator.select_record("r1")
        coordinator.handle_row_click("r4", toggle=True)

        result = removal.execute()

        assert result.dismissed_primary is False
        assert coordinator.state.active_record_id == "r1"

    def test_declined_confirmation_keeps_records(self, store, coordinator, event_bus, recorder) -> None:
        confirmer = Mock()
        confirmer.confirm_removal.return_value = False
        use_case = RemoveSelectedUseCase(store, coordinator, event_bus, confirmer=confirmer)
        coordinator.handle_row_click("r1", toggle=True)
        recorder.clear()

        result = use_case.execute()

        assert result.success is False
        assert result.message == "Removal cancelled"
        assert len(store) == 4
        request = confirmer.confirm_removal.call_args.args[0]
        assert request.record_ids == ("r1",)
        assert RecordsRemoved not in recorder.types()

    def test_accepted_confirmation_removes(self, store, coordinator, event_bus) -> None:
        confirmer = Mock()
        confirmer.confirm_removal.return_value = True
        use_case = RemoveSelectedUseCase(store, coordinator, event_bus)
        use_case.confirmer = confirmer
        coordinator.handle_row_click("r1", toggle=True)

        result = use_case.execute()

        assert result.removed == ("r1",)
        confirmer.confirm_removal.assert_called_once()
