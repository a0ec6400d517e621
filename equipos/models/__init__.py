"""
Model package — plain dataclasses for the remote equipment collection.

There is no local database: the REST collection is the only source of
truth, so these models only describe the payloads moving through the
client.
"""

from equipos.models.equipment import (  # noqa: F401
    STATUS_CHOICES,
    WIRE_FIELDS,
    DraftValidationError,
    EquipmentRecord,
    FormDraft,
)
