"""
Tests for the pure panel state transitions.

No Flask app or HTTP transport is involved: each test feeds a
``PanelState`` through one or more transitions and checks the result.
"""

import pytest

from equipos.messages import CreateMessages, DeleteMessages
from equipos.models.equipment import EquipmentRecord, FormDraft
from equipos.services import panel_state as ps
from equipos.services.panel_state import ActionKind, ActionStatus, PanelState

DRILL = EquipmentRecord(id=1, name="Drill", type="Tool", location="Shelf A", status="Activo")
SAW = EquipmentRecord(id=2, name="Saw", type="Tool", location="Shelf B", status="Inactivo")
FULL_DRAFT = FormDraft(name="Saw", type="Tool", location="Shelf B", status="Activo")


class TestInitialState:
    """Tests for a freshly mounted panel."""

    def test_everything_idle(self):
        state = PanelState()

        assert state.records == ()
        assert state.draft == FormDraft()
        assert state.deleting_id is None
        assert state.error_message is None
        assert state.success_message is None
        assert not state.is_busy
        assert all(
            state.action(kind).status is ActionStatus.IDLE for kind in ActionKind
        )


class TestList:
    """Tests for the list transitions."""

    def test_started_marks_busy(self):
        state = ps.list_started(PanelState())
        assert state.is_busy
        assert state.action(ActionKind.LIST).in_flight

    def test_succeeded_replaces_records_and_clears_error(self):
        state = PanelState(records=(DRILL,), error_message="old error")

        state = ps.list_succeeded(ps.list_started(state), [SAW])

        assert state.records == (SAW,)
        assert state.error_message is None
        assert not state.is_busy
        assert state.action(ActionKind.LIST).payload == 1

    def test_failed_empties_records(self):
        """No stale rows survive a failed refresh."""
        state = PanelState(records=(DRILL, SAW))

        state = ps.list_failed(ps.list_started(state), "boom")

        assert state.records == ()
        assert state.error_message == "boom"
        assert state.action(ActionKind.LIST).error == "boom"

    def test_success_message_survives_list(self):
        """A reload after a create keeps the create's success message."""
        state = PanelState(success_message=CreateMessages.CREATED)
        state = ps.list_succeeded(ps.list_started(state), [])
        assert state.success_message == CreateMessages.CREATED


class TestCreate:
    """Tests for the create transitions."""

    def test_started_clears_both_messages(self):
        state = PanelState(error_message="e", success_message="s")

        state = ps.create_started(state)

        assert state.error_message is None
        assert state.success_message is None
        assert state.is_busy

    def test_succeeded_resets_draft(self):
        state = ps.create_started(PanelState(draft=FULL_DRAFT))

        state = ps.create_succeeded(state)

        assert state.draft == FormDraft()
        assert state.success_message == CreateMessages.CREATED
        assert state.action(ActionKind.CREATE).payload == FULL_DRAFT.to_form_fields()

    def test_failed_keeps_draft(self):
        state = ps.create_started(PanelState(draft=FULL_DRAFT))

        state = ps.create_failed(state, "Error 500")

        assert state.draft == FULL_DRAFT
        assert state.error_message == "Error 500"
        assert state.action(ActionKind.CREATE).status is ActionStatus.FAILED
        assert not state.is_busy


class TestRemove:
    """Tests for the remove transitions."""

    def test_started_sets_deleting_id(self):
        state = ps.remove_started(PanelState(success_message="s"), 1)

        assert state.deleting_id == 1
        assert state.is_deleting
        assert state.success_message is None

    def test_second_start_is_rejected(self):
        """Only one delete may be in flight."""
        state = ps.remove_started(PanelState(), 1)

        with pytest.raises(ps.DeleteInProgressError):
            ps.remove_started(state, 2)

    def test_succeeded_drops_record_locally(self):
        """The id from the URL is a string; the record id is a number."""
        state = ps.remove_started(PanelState(records=(DRILL, SAW)), "1")

        state = ps.remove_succeeded(state, "1")

        assert state.records == (SAW,)
        assert state.success_message == DeleteMessages.DELETED

    def test_failed_keeps_records(self):
        state = ps.remove_started(PanelState(records=(DRILL,)), 1)

        state = ps.remove_failed(state, DeleteMessages.DELETE_FAILED)

        assert state.records == (DRILL,)
        assert state.error_message == DeleteMessages.DELETE_FAILED

    def test_finished_releases_guard(self):
        state = ps.remove_finished(ps.remove_started(PanelState(), 1))
        assert state.deleting_id is None
        assert not state.is_deleting

    def test_remove_does_not_mark_busy(self):
        """Deleting only blocks delete buttons, not the form."""
        assert not ps.remove_started(PanelState(), 1).is_busy


class TestTableMode:
    """Tests for which body the table renders."""

    def test_loading_when_busy_and_empty(self):
        assert ps.list_started(PanelState()).table_mode == "loading"

    def test_rows_stay_visible_while_reloading(self):
        assert ps.list_started(PanelState(records=(DRILL,))).table_mode == "table"

    def test_empty(self):
        assert PanelState().table_mode == "empty"


class TestImmutability:
    """Transitions return new snapshots."""

    def test_original_untouched(self):
        original = PanelState(records=(DRILL,))

        ps.list_failed(original, "boom")

        assert original.records == (DRILL,)
        assert original.action(ActionKind.LIST).status is ActionStatus.IDLE
