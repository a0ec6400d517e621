"""
Service layer package.

Each service module encapsulates one concern of the equipment page:
the REST client, the pure state transitions, and the panel that ties
them together.  Routes and CLI commands never call the REST collection
directly.

Import services in route modules as needed::

    from equipos.services.equipment_panel import EquipmentPanel
"""
