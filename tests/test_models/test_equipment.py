"""
Tests for the equipment record and draft dataclasses.
"""

import pytest
from werkzeug.datastructures import MultiDict

from equipos.models.equipment import DraftValidationError, EquipmentRecord, FormDraft


class TestEquipmentRecord:
    """Tests for building records from the API payload."""

    def test_from_api_maps_wire_names(self):
        record = EquipmentRecord.from_api(
            {"id": 1, "nombre": "Drill", "tipo": "Tool", "ubicacion": "Shelf A", "estado": "Activo"}
        )

        assert record == EquipmentRecord(
            id=1, name="Drill", type="Tool", location="Shelf A", status="Activo"
        )

    def test_from_api_missing_and_null_columns(self):
        """ORDS returns null for empty columns; the row still renders."""
        record = EquipmentRecord.from_api({"id": 3, "nombre": "Drill", "tipo": None})

        assert record.type == ""
        assert record.location == ""
        assert record.status == ""

    def test_status_is_not_revalidated(self):
        """Values outside the selector's choices are kept as sent."""
        record = EquipmentRecord.from_api({"id": 4, "estado": "Baja"})
        assert record.status == "Baja"

    @pytest.mark.parametrize("other", [1, "1"])
    def test_matches_id_across_types(self, other):
        record = EquipmentRecord(id=1, name="", type="", location="", status="")
        assert record.matches_id(other)


class TestFormDraft:
    """Tests for the client-only draft."""

    def test_from_form_strips_values(self):
        form = MultiDict(
            {"nombre": " Saw ", "tipo": "Tool", "ubicacion": "Shelf B", "estado": "Activo"}
        )

        draft = FormDraft.from_form(form)

        assert draft == FormDraft(
            name="Saw", type="Tool", location="Shelf B", status="Activo"
        )

    def test_from_form_missing_keys(self):
        assert FormDraft.from_form(MultiDict()) == FormDraft()

    def test_missing_fields_in_form_order(self):
        draft = FormDraft(name="Saw", status="Activo")
        assert draft.missing_fields() == ["type", "location"]

    def test_validate_raises_with_missing(self):
        with pytest.raises(DraftValidationError) as excinfo:
            FormDraft(name="Saw").validate("Todos los campos son obligatorios")

        assert str(excinfo.value) == "Todos los campos son obligatorios"
        assert excinfo.value.missing == ["type", "location", "status"]

    def test_to_form_fields_uses_wire_names(self):
        draft = FormDraft(name="Saw", type="Tool", location="Shelf B", status="Activo")

        assert draft.to_form_fields() == {
            "nombre": "Saw",
            "tipo": "Tool",
            "ubicacion": "Shelf B",
            "estado": "Activo",
        }

    def test_never_has_id(self):
        assert not hasattr(FormDraft(), "id")
