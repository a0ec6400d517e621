"""
Routes for the main blueprint — landing redirect and health check.
"""

from flask import redirect, url_for

from equipos.blueprints.main import bp
from equipos.extensions import panels
from equipos.services.equipos_client import EquiposApiError


@bp.route("/")
def home():
    """Send visitors straight to the equipment page."""
    return redirect(url_for("equipos.index"))


@bp.route("/health")
def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns 200 if the app is running and the REST collection answers
    its list request.
    """
    try:
        items = panels.client_factory().list_equipos()
        return {"status": "healthy", "api": "reachable", "records": len(items)}, 200
    except EquiposApiError as exc:
        return {"status": "unhealthy", "api": str(exc)}, 503
