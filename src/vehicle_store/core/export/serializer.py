"""ExportSerializer for writing portable copies of the vehicle data.

Exports are the user's escape hatch when a migration goes wrong, so the
JSON layout is stable and the numbers are exact: decimals are written as
strings, and files read back are validated against the bundled schema.
"""

import csv
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import Any, Final

import orjson

from vehicle_store import __version__
from vehicle_store.constants import (
    EXPORT_CSV_SUFFIX,
    EXPORT_FILE_PREFIX,
    EXPORT_JSON_SUFFIX,
)
from vehicle_store.core.export.snapshot import (
    ExportSnapshot,
    format_export_date,
    vehicle_to_dict,
)
from vehicle_store.core.version_state import VersionStateStore
from vehicle_store.domain.models import Vehicle
from vehicle_store.exceptions import DataCorruptionError
from vehicle_store.logger import get_logger
from vehicle_store.schemas import (
    SchemaValidationError,
    validate_export_document,
)
from vehicle_store.utils.datetime_utils import (
    format_file_timestamp,
    get_current_datetime_local,
)

logger = get_logger(__name__)

CSV_VEHICLE_COLUMNS: Final[tuple[str, ...]] = (
    "vehicleId",
    "year",
    "make",
    "model",
    "nickname",
    "vin",
)
CSV_RECORD_COLUMNS: Final[tuple[str, ...]] = (
    "recordKind",
    "recordId",
    "type",
    "date",
    "details",
    "mileage",
    "distanceUnit",
    "hours",
    "cost",
    "currencyCode",
)
CSV_COLUMNS: Final[tuple[str, ...]] = CSV_VEHICLE_COLUMNS + CSV_RECORD_COLUMNS


class ExportSerializer:
    """Builds export snapshots and writes them as JSON or CSV."""

    def __init__(
        self,
        version_state: VersionStateStore,
        export_dir: Path,
        app_version: str = __version__,
        clock: Callable[[], datetime] = get_current_datetime_local,
    ) -> None:
        """Initialize export serializer.

        Args:
            version_state: Source of the declared schema version
            export_dir: Directory receiving export files
            app_version: Version string stamped into exports
            clock: Source of "now" for export dates and file names

        """
        self.version_state = version_state
        self.export_dir = export_dir
        self.app_version = app_version
        self._clock = clock

    def export_snapshot(self, vehicles: Iterable[Vehicle]) -> ExportSnapshot:
        """Capture the vehicles and their records as a snapshot."""
        return ExportSnapshot(
            export_date=format_export_date(self._clock()),
            schema_version=str(self.version_state.current_declared_version()),
            app_version=self.app_version,
            vehicles=tuple(vehicle_to_dict(v) for v in vehicles),
        )

    def write_to_file(self, snapshot: ExportSnapshot) -> Path:
        """Write the snapshot as indented JSON with sorted keys.

        A file that fails halfway is left in place.

        Returns:
            Path of the written file

        Raises:
            OSError: If the export directory or file cannot be written

        """
        path = self._allocate_path(EXPORT_JSON_SUFFIX)
        data = orjson.dumps(
            snapshot.to_dict(),
            option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
        )
        path.write_bytes(data)
        logger.info(
            "Exported %d vehicles to %s", len(snapshot.vehicles), path
        )
        return path

    def export_to_json(self, vehicles: Iterable[Vehicle]) -> Path:
        return self.write_to_file(self.export_snapshot(vehicles))

    def read_file(self, path: Path) -> ExportSnapshot:
        """Load and validate a previously written JSON export.

        Raises:
            DataCorruptionError: If the file is not valid JSON or does not
                match the export schema
            OSError: If the file cannot be read

        """
        raw = path.read_bytes()
        try:
            document = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.error("Export file %s is not valid JSON: %s", path, e)
            raise DataCorruptionError(f"{path.name}: {e}") from e

        try:
            validate_export_document(document)
        except SchemaValidationError as e:
            logger.error("Export file %s failed validation: %s", path, e)
            raise DataCorruptionError(f"{path.name}: {e}") from e

        return ExportSnapshot.from_dict(document)

    def write_csv(self, snapshot: ExportSnapshot) -> Path:
        """Write one row per event or ownership record.

        Vehicle columns repeat on every row; a vehicle with no records
        still gets a single row with empty record columns.

        Returns:
            Path of the written file

        """
        path = self._allocate_path(EXPORT_CSV_SUFFIX)
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for vehicle in snapshot.vehicles:
                writer.writerows(_csv_rows(vehicle))
        logger.info(
            "Exported %d vehicles to %s", len(snapshot.vehicles), path
        )
        return path

    def _allocate_path(self, suffix: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        stem = f"{EXPORT_FILE_PREFIX}{format_file_timestamp(self._clock())}"
        path = self.export_dir / f"{stem}{suffix}"
        counter = 1
        while path.exists():
            path = self.export_dir / f"{stem}_{counter}{suffix}"
            counter += 1
        return path


def _csv_rows(vehicle: dict[str, Any]) -> list[dict[str, Any]]:
    base = {
        "vehicleId": vehicle["id"],
        "year": vehicle["year"],
        "make": vehicle["make"],
        "model": vehicle["model"],
        "nickname": vehicle.get("nickname") or "",
        "vin": vehicle.get("vin") or "",
    }
    rows = []
    for event in vehicle["events"]:
        kind = f"{event['categoryId']}/{event['subcategoryId']}"
        rows.append(base | _record_columns("event", event, kind))
    for record in vehicle["ownershipRecords"]:
        rows.append(
            base
            | _record_columns("ownership", record, record["typeRawValue"])
        )
    if not rows:
        rows.append(base | dict.fromkeys(CSV_RECORD_COLUMNS, ""))
    return rows


def _record_columns(
    kind: str, record: dict[str, Any], record_type: str
) -> dict[str, Any]:
    columns = {
        "recordKind": kind,
        "recordId": record["id"],
        "type": record_type,
    }
    for key in CSV_RECORD_COLUMNS[3:]:
        value = record.get(key)
        columns[key] = "" if value is None else value
    return columns
