"""
Flask extension instances.

Extensions are created here without binding to an application so that
the application factory can call ``init_app()`` on each one during
``create_app()``.  This avoids circular imports and follows the
standard Flask extension pattern.
"""

from flask_wtf.csrf import CSRFProtect

from equipos.services.equipment_panel import PanelRegistry

# -- CSRF protection for form submissions ---------------------------------
csrf = CSRFProtect()

# -- Mounted equipment panels, one per browser session --------------------
panels = PanelRegistry()
