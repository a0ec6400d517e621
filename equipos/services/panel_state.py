"""
Panel state — the equipment page's UI state and its transitions.

The state is an immutable snapshot.  Every change goes through one of
the transition functions below, which take the current ``PanelState``
and return a new one.  They never perform I/O, so the whole state
machine can be tested without Flask or the network.

Each action kind (list, create, remove) has its own ``ActionState``,
a tagged union:

    Idle -> InFlight -> Succeeded(payload) | Failed(error)

A settled action (Succeeded or Failed) counts as idle for the UI until
the same action starts again.  Messages are last-write-wins across all
actions.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from equipos.messages import CreateMessages, DeleteMessages
from equipos.models.equipment import EquipmentRecord, FormDraft


class DeleteInProgressError(RuntimeError):
    """Raised when a delete starts while another one is still in flight."""


class ActionKind(str, Enum):
    """The three operations the panel runs against the collection."""

    LIST = "list"
    CREATE = "create"
    REMOVE = "remove"


class ActionStatus(str, Enum):
    """Tag of an ``ActionState``."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionState:
    """
    Progress of one action kind.

    ``payload`` is only meaningful when ``status`` is SUCCEEDED
    (record count for list, created record fields for create, removed
    id for remove).  ``error`` is only set when ``status`` is FAILED.
    """

    status: ActionStatus = ActionStatus.IDLE
    payload: Any = None
    error: str | None = None

    @property
    def in_flight(self) -> bool:
        return self.status is ActionStatus.IN_FLIGHT


IDLE = ActionState()
IN_FLIGHT = ActionState(status=ActionStatus.IN_FLIGHT)


def _idle_actions() -> dict[ActionKind, ActionState]:
    return {kind: IDLE for kind in ActionKind}


@dataclass(frozen=True)
class PanelState:
    """Everything the equipment page renders."""

    records: tuple[EquipmentRecord, ...] = ()
    draft: FormDraft = field(default_factory=FormDraft)
    deleting_id: Any = None
    error_message: str | None = None
    success_message: str | None = None
    actions: dict[ActionKind, ActionState] = field(default_factory=_idle_actions)

    @property
    def is_busy(self) -> bool:
        """True while a list or create request is outstanding."""
        return (
            self.actions[ActionKind.LIST].in_flight
            or self.actions[ActionKind.CREATE].in_flight
        )

    @property
    def is_deleting(self) -> bool:
        """True while a delete is in flight; blocks every delete button."""
        return self.deleting_id is not None

    @property
    def table_mode(self) -> str:
        """
        Which body the equipment table shows.

        Returns:
            ``"loading"`` while busy with nothing to show yet,
            ``"empty"`` when there are no records, else ``"table"``.
        """
        if self.is_busy and not self.records:
            return "loading"
        if not self.records:
            return "empty"
        return "table"

    def action(self, kind: ActionKind) -> ActionState:
        """Return the state of one action kind."""
        return self.actions[kind]


def _with_action(state: PanelState, kind: ActionKind, value: ActionState, **changes):
    """Copy ``state`` with one action replaced plus any other field changes."""
    actions = dict(state.actions)
    actions[kind] = value
    return replace(state, actions=actions, **changes)


# =========================================================================
# Draft
# =========================================================================


def draft_updated(state: PanelState, draft: FormDraft) -> PanelState:
    """The user edited the form."""
    return replace(state, draft=draft)


# =========================================================================
# list()
# =========================================================================


def list_started(state: PanelState) -> PanelState:
    return _with_action(state, ActionKind.LIST, IN_FLIGHT)


def list_succeeded(
    state: PanelState, records: list[EquipmentRecord] | tuple[EquipmentRecord, ...]
) -> PanelState:
    """Replace the records wholesale with the server's answer."""
    return _with_action(
        state,
        ActionKind.LIST,
        ActionState(status=ActionStatus.SUCCEEDED, payload=len(records)),
        records=tuple(records),
        error_message=None,
    )


def list_failed(state: PanelState, message: str) -> PanelState:
    """Drop every record so no stale rows stay on screen."""
    return _with_action(
        state,
        ActionKind.LIST,
        ActionState(status=ActionStatus.FAILED, error=message),
        records=(),
        error_message=message,
    )


# =========================================================================
# create()
# =========================================================================


def create_started(state: PanelState) -> PanelState:
    """Clear both messages and mark the submission as outstanding."""
    return _with_action(
        state,
        ActionKind.CREATE,
        IN_FLIGHT,
        error_message=None,
        success_message=None,
    )


def create_succeeded(state: PanelState) -> PanelState:
    """Report success and reset the form to empty fields."""
    return _with_action(
        state,
        ActionKind.CREATE,
        ActionState(
            status=ActionStatus.SUCCEEDED, payload=state.draft.to_form_fields()
        ),
        success_message=CreateMessages.CREATED,
        draft=FormDraft(),
    )


def create_failed(state: PanelState, message: str) -> PanelState:
    """Report the error.  The draft is kept so no input is lost."""
    return _with_action(
        state,
        ActionKind.CREATE,
        ActionState(status=ActionStatus.FAILED, error=message),
        error_message=message,
    )


# =========================================================================
# remove()
# =========================================================================


def remove_started(state: PanelState, record_id: Any) -> PanelState:
    """
    Mark ``record_id`` as being deleted and clear both messages.

    Raises:
        DeleteInProgressError: If another delete is already in flight.
    """
    if state.is_deleting:
        raise DeleteInProgressError(DeleteMessages.DELETE_IN_PROGRESS)
    return _with_action(
        state,
        ActionKind.REMOVE,
        IN_FLIGHT,
        deleting_id=record_id,
        error_message=None,
        success_message=None,
    )


def remove_succeeded(state: PanelState, record_id: Any) -> PanelState:
    """Report success and drop the record locally before the next list."""
    remaining = tuple(r for r in state.records if not r.matches_id(record_id))
    return _with_action(
        state,
        ActionKind.REMOVE,
        ActionState(status=ActionStatus.SUCCEEDED, payload=record_id),
        success_message=DeleteMessages.DELETED,
        records=remaining,
    )


def remove_failed(state: PanelState, message: str) -> PanelState:
    """Report the error; records are left as they were."""
    return _with_action(
        state,
        ActionKind.REMOVE,
        ActionState(status=ActionStatus.FAILED, error=message),
        error_message=message,
    )


def remove_finished(state: PanelState) -> PanelState:
    """Release the single-delete guard, whatever the outcome."""
    return replace(state, deleting_id=None)
