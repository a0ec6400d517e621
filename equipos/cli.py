"""
Custom Flask CLI commands.

These commands are registered with the app by ``register_commands()``
in the application factory. Run them with ``flask <command_name>``.

Usage::

    flask api-check                 # Verify the REST collection answers
    flask equipos list              # Print the equipment table
    flask equipos add --nombre ...  # Register a piece of equipment
    flask equipos delete 42         # Delete after confirmation
"""

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from equipos.extensions import panels
from equipos.models.equipment import STATUS_CHOICES, FormDraft
from equipos.services.equipment_panel import ORDS_CONFIG_ERROR_STATUS, EquipmentPanel
from equipos.services.equipos_client import (
    ApiResponseError,
    EquiposApiError,
)
from equipos.services.panel_state import PanelState

equipos_cli = AppGroup("equipos", help="Manage equipment records from the terminal.")


def _new_panel() -> EquipmentPanel:
    """Build a panel that talks to the configured collection."""
    return EquipmentPanel(panels.client_factory(), panel_id="cli")


def _echo_messages(state: PanelState) -> None:
    """Print the panel's messages with the same colors as the web alerts."""
    if state.error_message:
        click.secho(state.error_message, fg="red")
    if state.success_message:
        click.secho(state.success_message, fg="green")


def _echo_records(state: PanelState) -> None:
    """Print the records as a fixed-width table."""
    if not state.records:
        click.echo("No hay equipos registrados")
        return

    click.echo(f"{'ID':>6}  {'Nombre':<24} {'Tipo':<16} {'Ubicación':<16} Estado")
    for record in state.records:
        click.echo(
            f"{str(record.id):>6}  {record.name:<24} {record.type:<16} "
            f"{record.location:<16} {record.status}"
        )


@click.command("api-check")
@with_appcontext
def api_check_command():
    """
    Verify connectivity with the equipment REST collection.

    Sends one list request to the configured base URL and reports the
    status and record count.  Useful for confirming that
    EQUIPOS_API_BASE_URL in .env is correct.
    """
    click.echo("=" * 60)
    click.echo("  Equipos — REST Collection Check")
    click.echo("=" * 60)

    base_url = current_app.config["EQUIPOS_API_BASE_URL"]
    click.echo(f"\n  Base URL: {base_url}\n")

    click.echo("[1/1] Listing equipment...")
    try:
        items = panels.client_factory().list_equipos()
    except ApiResponseError as exc:
        click.secho(f"      ✗ Collection answered HTTP {exc.status}: {exc}", fg="red")
        if exc.status == ORDS_CONFIG_ERROR_STATUS:
            click.echo("        ORDS reports a handler error; check the REST module source.")
        raise SystemExit(1)
    except EquiposApiError as exc:
        click.secho(f"      ✗ Request failed: {exc}", fg="red")
        click.echo("\n  Troubleshooting tips:")
        click.echo("    - Is the base URL reachable from this machine?")
        click.echo("    - Does it end with a trailing slash?")
        raise SystemExit(1)

    click.secho(f"      ✓ Collection reachable, {len(items)} record(s).", fg="green")
    click.echo("\n" + "=" * 60)


@equipos_cli.command("list")
def list_command():
    """List every piece of equipment."""
    state = _new_panel().activate()
    _echo_messages(state)
    _echo_records(state)


@equipos_cli.command("add")
@click.option("--nombre", default="", help="Equipment name.")
@click.option("--tipo", default="", help="Equipment type.")
@click.option("--ubicacion", default="", help="Where the equipment is kept.")
@click.option(
    "--estado",
    default="",
    type=click.Choice(("",) + STATUS_CHOICES),
    help="Current status.",
)
def add_command(nombre, tipo, ubicacion, estado):
    """Register a new piece of equipment."""
    panel = _new_panel()
    state = panel.submit(
        FormDraft(name=nombre, type=tipo, location=ubicacion, status=estado)
    )
    _echo_messages(state)
    if state.success_message:
        _echo_records(state)


@equipos_cli.command("delete")
@click.argument("equipo_id")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
def delete_command(equipo_id, yes):
    """Delete the piece of equipment with EQUIPO_ID."""
    panel = _new_panel()
    removed = panel.remove(
        equipo_id,
        confirm=lambda prompt: yes or click.confirm(prompt, default=False),
    )
    if not removed:
        click.echo("Eliminación cancelada")
        return

    _echo_messages(panel.state)


def register_commands(app):
    """Register all custom CLI commands with the Flask application."""
    app.cli.add_command(api_check_command)
    app.cli.add_command(equipos_cli)
