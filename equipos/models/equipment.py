"""
Equipment record models — the shapes exchanged with the REST collection.

The remote ORDS collection stores each piece of equipment with Spanish
column names (``nombre``, ``tipo``, ``ubicacion``, ``estado``).  These
dataclasses expose them under English attribute names and convert to and
from the wire format at the edges.

``EquipmentRecord`` always carries the server-assigned ``id``.
``FormDraft`` is the client-only counterpart for a record that has not
been created yet, so it never has one.
"""

from dataclasses import dataclass, fields
from typing import Any

# Wire (form/JSON) field name for each editable attribute, in form order.
WIRE_FIELDS: dict[str, str] = {
    "name": "nombre",
    "type": "tipo",
    "location": "ubicacion",
    "status": "estado",
}

# Closed set offered by the status selector.  Not re-validated on submit
# or on records returned by the server.
STATUS_CHOICES: tuple[str, ...] = ("Activo", "Inactivo", "Mantenimiento")


class DraftValidationError(ValueError):
    """
    Raised when a draft is submitted with one or more empty fields.

    Attributes:
        missing: Attribute names of the empty fields, in form order.
    """

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message)
        self.missing = missing


@dataclass(frozen=True)
class EquipmentRecord:
    """A piece of equipment as stored by the remote collection."""

    id: Any  # Opaque server identifier (ORDS returns a number).
    name: str
    type: str
    location: str
    status: str

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "EquipmentRecord":
        """
        Build a record from one element of the ``items`` array.

        Missing or null columns become empty strings so the table can
        still render the row.
        """
        values = {
            attr: "" if item.get(wire) is None else str(item.get(wire))
            for attr, wire in WIRE_FIELDS.items()
        }
        return cls(id=item.get("id"), **values)

    def matches_id(self, record_id: Any) -> bool:
        """
        Compare against an identifier that may have arrived as a string.

        URL segments and form fields are always strings while the API
        returns numbers, so both sides are compared as text.
        """
        return str(self.id) == str(record_id)


@dataclass(frozen=True)
class FormDraft:
    """Values typed into the "new equipment" form."""

    name: str = ""
    type: str = ""
    location: str = ""
    status: str = ""

    @classmethod
    def from_form(cls, form: Any) -> "FormDraft":
        """
        Read a draft from a submitted form using the wire field names.

        Args:
            form: Any mapping with ``get`` (e.g. ``request.form``).
        """
        return cls(
            **{
                attr: (form.get(wire) or "").strip()
                for attr, wire in WIRE_FIELDS.items()
            }
        )

    def missing_fields(self) -> list[str]:
        """Return the attribute names of every empty field."""
        return [f.name for f in fields(self) if not getattr(self, f.name)]

    def validate(self, message: str) -> None:
        """
        Ensure all four fields are filled in.

        Args:
            message: User-facing text for the error.

        Raises:
            DraftValidationError: If any field is empty.
        """
        missing = self.missing_fields()
        if missing:
            raise DraftValidationError(message, missing)

    def to_form_fields(self) -> dict[str, str]:
        """Return the multipart fields expected by the collection POST."""
        return {wire: getattr(self, attr) for attr, wire in WIRE_FIELDS.items()}
