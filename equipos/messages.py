"""
User-facing messages for the equipment manager.

All text shown in the UI lives here so the wording stays consistent
between the web pages and the CLI.  The remote collection and its users
are Spanish-speaking, so the messages are too.
"""


class ListMessages:
    """Messages for loading the equipment list."""

    LOAD_FAILED = "Error al cargar equipos"


class CreateMessages:
    """Messages for registering a new piece of equipment."""

    CREATED = "Equipo registrado correctamente"
    ALL_FIELDS_REQUIRED = "Todos los campos son obligatorios"

    # ORDS answers 555 when the REST handler itself is misconfigured.
    ORDS_SERVER_ERROR = "Error en el servidor ORDS (555)"
    ORDS_CONFIG_HINT = "Verifica la configuración del endpoint REST"

    # Fallback for any other non-2xx status without a server message.
    HTTP_ERROR = "Error {status}"


class DeleteMessages:
    """Messages for removing a piece of equipment."""

    CONFIRM_PROMPT = "¿Estás seguro de eliminar este equipo?"
    DELETED = "Equipo eliminado correctamente"
    DELETE_FAILED = "Error al eliminar equipo"
    DELETE_IN_PROGRESS = "Ya hay una eliminación en curso, espera a que termine"


class ConnectionMessages:
    """Messages for transport failures (no response received)."""

    UNREACHABLE = "No se pudo conectar con el servidor de equipos"
