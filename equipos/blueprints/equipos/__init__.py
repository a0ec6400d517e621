"""
Equipos blueprint — the equipment registration form and table.
"""

from flask import Blueprint

bp = Blueprint(
    "equipos",
    __name__,
    template_folder="templates",
)

from equipos.blueprints.equipos import routes  # noqa: E402, F401
