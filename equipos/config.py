"""
Application configuration classes.

Each class represents a deployment environment. The factory function
``create_app`` in ``equipos/__init__.py`` selects the appropriate config
based on the FLASK_ENV environment variable.

The only backend is the ORDS REST collection configured through
``EQUIPOS_API_BASE_URL``; there is no local database.
"""

import logging
import os

# Module-level logger for startup warnings emitted by config classes.
_logger = logging.getLogger(__name__)

# Sentinel for detecting an unset SECRET_KEY in production.
_DEFAULT_SECRET_KEY = "dev-secret-change-me"

# Collection the original deployment points at.
_DEFAULT_API_BASE_URL = "https://apex.oracle.com/pls/apex/elrafas44/equipos/"


def _optional_float(name: str) -> float | None:
    """Read a float env var, treating unset or blank as None."""
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


class BaseConfig:
    """
    Shared configuration values inherited by all environments.

    Secrets and URLs are loaded from environment variables so they
    never appear in source control.
    """

    # -- Flask core --------------------------------------------------------
    SECRET_KEY: str = os.environ.get("SECRET_KEY", _DEFAULT_SECRET_KEY)

    # -- Session cookie hardening ------------------------------------------
    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = "Lax"

    # Secure flag is False by default so http://localhost works in dev.
    # ProductionConfig overrides this to True (requires HTTPS).
    SESSION_COOKIE_SECURE: bool = False

    # -- Equipos REST collection -------------------------------------------
    # Keep the trailing slash: ORDS module URIs are matched literally.
    EQUIPOS_API_BASE_URL: str = os.environ.get(
        "EQUIPOS_API_BASE_URL", _DEFAULT_API_BASE_URL
    )

    # Seconds before a request is abandoned.  Unset means urllib3's
    # default (no explicit timeout).
    EQUIPOS_API_TIMEOUT: float | None = _optional_float("EQUIPOS_API_TIMEOUT")

    # Mounted panels kept in memory (one per browser session).
    EQUIPOS_MAX_PANELS: int = int(os.environ.get("EQUIPOS_MAX_PANELS", "256"))

    # -- Logging -----------------------------------------------------------
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # =====================================================================
    # Production validation helpers
    # =====================================================================

    @classmethod
    def validate_production_secrets(cls, app_config: dict) -> None:
        """
        Verify that the settings required in production are sane.

        Called by ``create_app()`` when ``config_name == 'production'``.

        Args:
            app_config: The ``app.config`` dict after loading the
                        config class.

        Raises:
            RuntimeError: If any critical value is missing or insecure.
        """
        errors: list[str] = []

        if app_config.get("SECRET_KEY") == _DEFAULT_SECRET_KEY:
            errors.append(
                "SECRET_KEY is still the insecure default. "
                "Generate one with: python -c "
                '"import secrets; print(secrets.token_hex(32))"'
            )

        base_url = app_config.get("EQUIPOS_API_BASE_URL", "")
        if not base_url.startswith("https://"):
            errors.append(
                f"EQUIPOS_API_BASE_URL ({base_url}) must use HTTPS in production."
            )

        if errors:
            combined = "\n  - ".join(errors)
            raise RuntimeError(f"Production configuration errors:\n  - {combined}")

        if not base_url.endswith("/"):
            _logger.warning(
                "EQUIPOS_API_BASE_URL has no trailing slash — ORDS may "
                "redirect or reject POSTs to %s",
                base_url,
            )

        if app_config.get("LOG_LEVEL", "").upper() == "DEBUG":
            _logger.warning(
                "LOG_LEVEL=DEBUG is not recommended in production — "
                "request URLs and form values may appear in logs."
            )


class DevelopmentConfig(BaseConfig):
    """Development environment: debug mode and verbose logging."""

    DEBUG: bool = True
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    """
    Testing environment.

    WTF_CSRF_ENABLED is disabled so form submissions in tests don't
    need CSRF tokens.  The base URL points at a placeholder host; tests
    replace the HTTP transport so nothing is ever sent there.
    """

    TESTING: bool = True
    WTF_CSRF_ENABLED: bool = False
    EQUIPOS_API_BASE_URL: str = "https://equipos.test/ords/equipos/"
    EQUIPOS_API_TIMEOUT: float | None = None
    LOG_LEVEL: str = "DEBUG"


class ProductionConfig(BaseConfig):
    """
    Production environment: strict settings, no debug output.

    The application factory calls ``validate_production_secrets()`` at
    startup and refuses to launch if critical values are missing.
    """

    DEBUG: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING")

    # Session cookie is only sent over HTTPS.
    SESSION_COOKIE_SECURE: bool = True


# Lookup dict used by the application factory.
config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
