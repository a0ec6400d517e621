"""
Main blueprint — landing redirect and health check.
"""

from flask import Blueprint

bp = Blueprint("main", __name__)

# Import routes after blueprint creation to avoid circular imports.
from equipos.blueprints.main import routes  # noqa: E402, F401
