"""
Equipos API client — handles all communication with the ORDS REST
collection that stores the equipment records.

The collection lives at a single URL and supports three operations:

    - ``GET  <base>``            -> ``{"items": [...]}``
    - ``POST <base>``            -> create from multipart form fields
    - ``POST <base>?id=<id>``    -> delete, using ``_method=DELETE``

ORDS handlers on APEX cannot always be bound to the DELETE verb, so the
delete is sent as a POST with a method-override field.  The ``id`` is
sent both as a form field and in the query string because handlers read
it from either place depending on how they were defined.

Every call is a single attempt: urllib3's default connection retries are
disabled so that one user action maps to exactly one request.

Configuration is read from Flask ``current_app.config`` unless passed in:
    - ``EQUIPOS_API_BASE_URL``: collection URL, trailing slash included.
    - ``EQUIPOS_API_TIMEOUT``:  seconds, or None for the transport default.
"""

import json
import logging
from typing import Any
from urllib.parse import urlencode

import urllib3
from flask import current_app

logger = logging.getLogger(__name__)

# One attempt per request.  Redirects are still followed so that a
# base URL missing its trailing slash keeps working for GETs.
_SINGLE_ATTEMPT = urllib3.Retry(connect=0, read=0, status=0, other=0, redirect=3)


# =========================================================================
# Exceptions
# =========================================================================


class EquiposApiError(Exception):
    """Base class for every failure talking to the collection."""


class ApiTransportError(EquiposApiError):
    """No response was received (DNS, refused connection, timeout...)."""


class ApiResponseError(EquiposApiError):
    """
    The collection answered with a non-2xx status.

    Attributes:
        status:         HTTP status code.
        server_message: The ``message`` field of the JSON body, if any.
    """

    def __init__(self, status: int, server_message: str | None = None) -> None:
        super().__init__(server_message or f"HTTP {status}")
        self.status = status
        self.server_message = server_message


class MalformedResponseError(EquiposApiError):
    """A 2xx response whose body does not have the expected shape."""


# =========================================================================
# Client
# =========================================================================


class EquiposApiClient:
    """
    Client for the equipment REST collection.

    Usage inside a Flask request or app context::

        client = EquiposApiClient()
        items = client.list_equipos()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http: urllib3.PoolManager | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Collection URL.  Defaults to
                      ``EQUIPOS_API_BASE_URL`` from the app config.
            timeout:  Request timeout in seconds.  Defaults to
                      ``EQUIPOS_API_TIMEOUT`` from the app config.
            http:     Pool manager to send requests with.  When omitted
                      each request opens and closes its own pool.

        Raises:
            RuntimeError: If config is needed and there is no Flask
                          application context.
        """
        if base_url is None:
            base_url = current_app.config["EQUIPOS_API_BASE_URL"]
            if timeout is None:
                timeout = current_app.config.get("EQUIPOS_API_TIMEOUT")

        # The trailing slash is significant for ORDS module URIs.
        self.base_url: str = base_url
        self.timeout: float | None = timeout
        self._http = http

        logger.debug(
            "EquiposApiClient initialized — base_url=%s, timeout=%s",
            self.base_url,
            self.timeout,
        )

    # =================================================================
    # Public API
    # =================================================================

    def list_equipos(self) -> list[dict[str, Any]]:
        """
        Fetch every record in the collection.

        Returns:
            The raw ``items`` array (empty when the key is absent).

        Raises:
            ApiTransportError:      If no response was received.
            ApiResponseError:       If the status is not 2xx.
            MalformedResponseError: If the body is not a JSON object or
                                    ``items`` is not an array.
        """
        response = self._send("GET", self.base_url)
        payload = _decode_json(response.data)

        if not _is_success(response.status):
            raise ApiResponseError(response.status, _server_message(payload))

        if not isinstance(payload, dict):
            raise MalformedResponseError(
                "Expected a JSON object from the equipment list"
            )

        items = payload.get("items")
        if items is None:
            return []
        if not isinstance(items, list):
            raise MalformedResponseError("'items' is not an array")
        if not all(isinstance(item, dict) for item in items):
            raise MalformedResponseError("'items' contains non-object entries")

        logger.debug("Fetched %d equipment records", len(items))
        return items

    def create_equipo(self, form_fields: dict[str, str]) -> dict[str, Any] | None:
        """
        Create a record from multipart form fields.

        Args:
            form_fields: Wire field names to values
                         (``nombre``, ``tipo``, ``ubicacion``, ``estado``).

        Returns:
            The JSON body when the server sent one, else None.

        Raises:
            ApiTransportError: If no response was received.
            ApiResponseError:  If the status is not 2xx.
        """
        response = self._send("POST", self.base_url, fields=form_fields)
        payload = _decode_json(response.data)

        if not _is_success(response.status):
            raise ApiResponseError(response.status, _server_message(payload))

        logger.info("Created equipment record '%s'", form_fields.get("nombre"))
        return payload if isinstance(payload, dict) else None

    def delete_equipo(self, record_id: Any) -> None:
        """
        Delete a record through the ``_method=DELETE`` override.

        Args:
            record_id: Server identifier of the record.

        Raises:
            ApiTransportError: If no response was received.
            ApiResponseError:  If the status is not 2xx.
        """
        separator = "&" if "?" in self.base_url else "?"
        url = f"{self.base_url}{separator}{urlencode({'id': record_id})}"
        response = self._send(
            "POST",
            url,
            fields={"_method": "DELETE", "id": str(record_id)},
        )

        if not _is_success(response.status):
            raise ApiResponseError(
                response.status, _server_message(_decode_json(response.data))
            )

        logger.info("Deleted equipment record %s", record_id)

    # =================================================================
    # HTTP transport
    # =================================================================

    def _send(
        self,
        method: str,
        url: str,
        fields: dict[str, str] | None = None,
    ) -> urllib3.BaseHTTPResponse:
        """
        Send a single request to the collection.

        POST ``fields`` are encoded as ``multipart/form-data`` by urllib3.

        Raises:
            ApiTransportError: If urllib3 could not get a response.
        """
        options: dict[str, Any] = {"retries": _SINGLE_ATTEMPT}
        if self.timeout is not None:
            options["timeout"] = self.timeout

        try:
            if self._http is not None:
                response = self._http.request(method, url, fields=fields, **options)
            else:
                # Bodies are preloaded, so the pool can close before returning.
                with urllib3.PoolManager() as http:
                    response = http.request(method, url, fields=fields, **options)
        except urllib3.exceptions.HTTPError as exc:
            logger.error("Transport error calling %s %s: %s", method, url, exc)
            raise ApiTransportError(str(exc)) from exc

        logger.debug("%s %s returned status %d", method, url, response.status)
        return response


# =========================================================================
# Response helpers
# =========================================================================


def _is_success(status: int) -> bool:
    """True for any 2xx status."""
    return 200 <= status < 300


def _decode_json(data: bytes | None) -> Any:
    """Parse a response body, returning None when it is not JSON."""
    if not data:
        return None
    try:
        return json.loads(data)
    except ValueError:
        logger.debug("Response body is not valid JSON (%d bytes)", len(data))
        return None


def _server_message(payload: Any) -> str | None:
    """Extract the ``message`` field ORDS puts in error bodies."""
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None
