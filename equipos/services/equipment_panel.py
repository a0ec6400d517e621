"""
Equipment panel service — runs the page's actions against the collection.

An ``EquipmentPanel`` is one mounted instance of the equipment page.  It
owns a ``PanelState`` and drives it through the pure transitions in
``panel_state`` while calling the REST collection through
``EquiposApiClient``:

    - ``load()``    list the collection (also run on activation)
    - ``submit()``  create a record from the draft, then reload
    - ``remove()``  delete a record after confirmation, then reload

The Flask routes keep one panel per browser session in the
``PanelRegistry``.  Waitress may run two requests of the same session
at once, so each transition is applied under the panel's lock while
the HTTP calls run outside it.  Responses still resolve in arrival
order: the last one to land wins.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable

from equipos.messages import (
    ConnectionMessages,
    CreateMessages,
    DeleteMessages,
    ListMessages,
)
from equipos.models.equipment import DraftValidationError, EquipmentRecord, FormDraft
from equipos.services.equipos_client import (
    ApiResponseError,
    ApiTransportError,
    EquiposApiClient,
    EquiposApiError,
)
from equipos.services.panel_state import (
    DeleteInProgressError,
    PanelState,
    create_failed,
    create_started,
    create_succeeded,
    draft_updated,
    list_failed,
    list_started,
    list_succeeded,
    remove_failed,
    remove_finished,
    remove_started,
    remove_succeeded,
)

logger = logging.getLogger(__name__)

# Status ORDS returns when the REST handler's source is misconfigured.
ORDS_CONFIG_ERROR_STATUS = 555


def create_error_message(exc: ApiResponseError) -> str:
    """
    Turn a failed create response into the message shown to the user.

    A 555 is annotated with a hint to check the endpoint configuration;
    any other status shows the server message or ``Error <status>``.
    """
    if exc.status == ORDS_CONFIG_ERROR_STATUS:
        base = exc.server_message or CreateMessages.ORDS_SERVER_ERROR
        return f"{base} - {CreateMessages.ORDS_CONFIG_HINT}"
    return exc.server_message or CreateMessages.HTTP_ERROR.format(status=exc.status)


class EquipmentPanel:
    """
    One mounted equipment page and its state.

    Usage::

        panel = EquipmentPanel(EquiposApiClient())
        panel.activate()
        panel.submit(FormDraft(name="Saw", type="Tool",
                               location="Shelf B", status="Activo"))
        panel.remove(1, confirm=lambda prompt: True)
    """

    def __init__(self, client: EquiposApiClient, panel_id: str | None = None) -> None:
        self.panel_id = panel_id
        self._client = client
        self._state = PanelState()
        self._lock = threading.Lock()

    @property
    def state(self) -> PanelState:
        """The latest snapshot; safe to read without the lock."""
        return self._state

    def _apply(self, transition: Callable[..., PanelState], *args: Any) -> PanelState:
        """Apply one transition atomically and return the new snapshot."""
        with self._lock:
            self._state = transition(self._state, *args)
            return self._state

    # =================================================================
    # Actions
    # =================================================================

    def activate(self) -> PanelState:
        """Initial load when the page is mounted."""
        logger.debug("Activating equipment panel %s", self.panel_id)
        return self.load()

    def load(self) -> PanelState:
        """
        Replace the records with the collection's current contents.

        Any failure empties the table and shows the server message, or
        a generic one when the server gave none.
        """
        self._apply(list_started)
        try:
            records = [
                EquipmentRecord.from_api(item) for item in self._client.list_equipos()
            ]
        except ApiResponseError as exc:
            logger.warning("Equipment list failed with status %d: %s", exc.status, exc)
            return self._apply(list_failed, exc.server_message or ListMessages.LOAD_FAILED)
        except EquiposApiError as exc:
            logger.warning("Equipment list failed: %s", exc)
            return self._apply(list_failed, ListMessages.LOAD_FAILED)

        return self._apply(list_succeeded, records)

    def update_draft(self, draft: FormDraft) -> PanelState:
        """Store what the user typed into the form."""
        return self._apply(draft_updated, draft)

    def submit(self, draft: FormDraft | None = None) -> PanelState:
        """
        Create a record from the draft and reload the list on success.

        Args:
            draft: New form values.  When omitted the stored draft is
                   submitted as is.

        Returns:
            The state after the action (and the reload) settled.
        """
        if draft is not None:
            self._apply(draft_updated, draft)
        state = self._apply(create_started)

        try:
            state.draft.validate(CreateMessages.ALL_FIELDS_REQUIRED)
        except DraftValidationError as exc:
            logger.info("Draft rejected, missing fields: %s", ", ".join(exc.missing))
            return self._apply(create_failed, str(exc))

        try:
            self._client.create_equipo(state.draft.to_form_fields())
        except ApiResponseError as exc:
            logger.warning("Equipment create failed with status %d: %s", exc.status, exc)
            return self._apply(create_failed, create_error_message(exc))
        except ApiTransportError as exc:
            logger.warning("Equipment create failed: %s", exc)
            return self._apply(create_failed, ConnectionMessages.UNREACHABLE)

        self._apply(create_succeeded)
        return self.load()

    def remove(self, record_id: Any, confirm: Callable[[str], bool]) -> bool:
        """
        Delete a record after the user confirms.

        The record disappears from the table as soon as the server
        accepts the delete; the reload that follows then replaces the
        table with the server's view.

        Args:
            record_id: Identifier of the record to delete.
            confirm:   Called with the confirmation prompt; the delete
                       only proceeds when it returns True.

        Returns:
            False if the user declined (nothing changed), else True.

        Raises:
            DeleteInProgressError: If another delete is still in flight.
        """
        if self._state.is_deleting:
            raise DeleteInProgressError(DeleteMessages.DELETE_IN_PROGRESS)

        if not confirm(DeleteMessages.CONFIRM_PROMPT):
            logger.debug("Delete of equipment %s declined", record_id)
            return False

        self._apply(remove_started, record_id)
        try:
            try:
                self._client.delete_equipo(record_id)
            except EquiposApiError as exc:
                logger.warning("Equipment delete of %s failed: %s", record_id, exc)
                self._apply(remove_failed, DeleteMessages.DELETE_FAILED)
            else:
                self._apply(remove_succeeded, record_id)
                self.load()
        finally:
            self._apply(remove_finished)

        return True


class PanelRegistry:
    """
    Process-local store of mounted panels, keyed by panel id.

    Mounting replaces any panel already stored under the same id and
    activates the new one.  The least recently used panels are dropped
    once ``max_panels`` is exceeded.

    Follows the Flask extension pattern so the factory can bind it::

        panels = PanelRegistry()
        panels.init_app(app)
    """

    def __init__(self, app=None) -> None:
        self._panels: OrderedDict[str, EquipmentPanel] = OrderedDict()
        self._lock = threading.Lock()
        self.max_panels: int = 256
        # Builds the client each mounted panel uses.
        self.client_factory: Callable[[], EquiposApiClient] = EquiposApiClient
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        """Read the panel limit from config and register on the app."""
        self.max_panels = app.config.get("EQUIPOS_MAX_PANELS", self.max_panels)
        app.extensions["equipos_panels"] = self

    def mount(self, panel_id: str) -> EquipmentPanel:
        """Create, store and activate a fresh panel."""
        panel = EquipmentPanel(self.client_factory(), panel_id=panel_id)
        with self._lock:
            self._panels[panel_id] = panel
            self._panels.move_to_end(panel_id)
            while len(self._panels) > self.max_panels:
                evicted_id, _ = self._panels.popitem(last=False)
                logger.debug("Evicted equipment panel %s", evicted_id)

        panel.activate()
        return panel

    def get(self, panel_id: str) -> EquipmentPanel | None:
        """Return the mounted panel, if it is still stored."""
        with self._lock:
            panel = self._panels.get(panel_id)
            if panel is not None:
                self._panels.move_to_end(panel_id)
            return panel

    def get_or_mount(self, panel_id: str) -> EquipmentPanel:
        """Return the stored panel or mount a new one."""
        panel = self.get(panel_id)
        if panel is None:
            panel = self.mount(panel_id)
        return panel

    def clear(self) -> None:
        """Drop every panel."""
        with self._lock:
            self._panels.clear()

    def __len__(self) -> int:
        return len(self._panels)
