"""
Routes for the equipos blueprint — register, list and delete equipment.

Each browser session gets its own ``EquipmentPanel`` from the panel
registry.  Opening the page mounts a fresh panel (which loads the list).
A successful create or delete redirects to the panel view, so a refresh
does not repeat it; a failed one renders the page directly so the
message and the draft stay on screen.
"""

import logging
import uuid

from flask import flash, redirect, render_template, request, session, url_for

from equipos.blueprints.equipos import bp
from equipos.extensions import panels
from equipos.messages import DeleteMessages
from equipos.models.equipment import STATUS_CHOICES, FormDraft
from equipos.services.equipment_panel import EquipmentPanel
from equipos.services.panel_state import ActionKind, ActionStatus, DeleteInProgressError

logger = logging.getLogger(__name__)

# Session key holding the id of this browser's panel.
PANEL_SESSION_KEY = "equipos_panel_id"


def _panel_id() -> str:
    """Return this session's panel id, assigning one on first visit."""
    panel_id = session.get(PANEL_SESSION_KEY)
    if panel_id is None:
        panel_id = uuid.uuid4().hex
        session[PANEL_SESSION_KEY] = panel_id
    return panel_id


def _confirmed_in_form(prompt: str) -> bool:  # pylint: disable=unused-argument
    """The page's ``confirm()`` dialog sets ``confirmed=yes`` on accept."""
    return request.form.get("confirmed") == "yes"


def _render_panel(panel: EquipmentPanel, status: int = 200):
    """Render the equipment page for a panel's current state."""
    return (
        render_template(
            "equipos/index.html",
            state=panel.state,
            status_choices=STATUS_CHOICES,
            confirm_prompt=DeleteMessages.CONFIRM_PROMPT,
        ),
        status,
    )


def _after_action(panel: EquipmentPanel, kind: ActionKind):
    """Redirect to the panel view on success, else show the failure."""
    if panel.state.action(kind).status is ActionStatus.SUCCEEDED:
        return redirect(url_for("equipos.show"), code=303)
    return _render_panel(panel)


@bp.route("/", methods=["GET"])
def index():
    """Mount a fresh panel for this session and show the equipment page."""
    panel = panels.mount(_panel_id())
    return _render_panel(panel)


@bp.route("/panel", methods=["GET"])
def show():
    """Show the session's panel as it is, without reloading the list."""
    panel = panels.get_or_mount(_panel_id())
    return _render_panel(panel)


@bp.route("/", methods=["POST"])
def create():
    """Register a new piece of equipment from the form."""
    panel = panels.get_or_mount(_panel_id())
    panel.submit(FormDraft.from_form(request.form))
    return _after_action(panel, ActionKind.CREATE)


@bp.route("/<equipo_id>/delete", methods=["POST"])
def delete(equipo_id):
    """
    Delete a piece of equipment.

    Without ``confirmed=yes`` in the form (JavaScript disabled, or the
    dialog was skipped) a confirmation page is shown instead.
    """
    panel = panels.get_or_mount(_panel_id())

    try:
        removed = panel.remove(equipo_id, confirm=_confirmed_in_form)
    except DeleteInProgressError as exc:
        logger.info("Delete of %s rejected: another delete is running", equipo_id)
        flash(str(exc), "warning")
        return _render_panel(panel, 409)

    if not removed:
        record = next(
            (r for r in panel.state.records if r.matches_id(equipo_id)), None
        )
        return render_template(
            "equipos/confirm_delete.html",
            equipo_id=equipo_id,
            record=record,
            confirm_prompt=DeleteMessages.CONFIRM_PROMPT,
        )

    return _after_action(panel, ActionKind.REMOVE)
