"""Domain types: schema versions and the vehicle entity graph."""

from vehicle_store.domain.models import Event, OwnershipRecord, Vehicle
from vehicle_store.domain.version import SchemaVersion

__all__ = ["Event", "OwnershipRecord", "SchemaVersion", "Vehicle"]
