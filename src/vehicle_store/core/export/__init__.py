"""Export of the vehicle graph to portable JSON and CSV files."""

from vehicle_store.core.export.serializer import ExportSerializer
from vehicle_store.core.export.snapshot import ExportSnapshot

__all__ = ["ExportSerializer", "ExportSnapshot"]
