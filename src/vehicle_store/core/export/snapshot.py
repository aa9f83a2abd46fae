"""Denormalized, immutable export snapshot of the vehicle graph.

Decimal quantities are carried as their exact string form and never as
binary floats; dates are ISO 8601 text in UTC.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from vehicle_store.domain.models import Event, OwnershipRecord, Vehicle

EXPORT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_export_date(moment: datetime) -> str:
    """Render a datetime as ISO 8601 UTC text (naive values are local)."""
    return moment.astimezone(UTC).strftime(EXPORT_DATE_FORMAT)


def decimal_text(value: Decimal | int | None) -> str | None:
    """Exact string form of a decimal quantity.

    Raises:
        TypeError: If a binary float is passed

    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Decimal | int):
        msg = f"Expected Decimal, got {type(value).__name__}"
        raise TypeError(msg)
    return str(value)


def event_to_dict(event: Event) -> dict[str, Any]:
    return {
        "id": event.id,
        "categoryId": event.category_id,
        "subcategoryId": event.subcategory_id,
        "date": format_export_date(event.date),
        "details": event.details,
        "mileage": decimal_text(event.mileage),
        "distanceUnit": event.distance_unit,
        "hours": decimal_text(event.hours),
        "cost": decimal_text(event.cost),
        "currencyCode": event.currency_code,
    }


def ownership_record_to_dict(record: OwnershipRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "typeRawValue": record.type_raw_value,
        "date": format_export_date(record.date),
        "details": record.details,
        "mileage": decimal_text(record.mileage),
        "distanceUnit": record.distance_unit,
        "hours": decimal_text(record.hours),
        "cost": decimal_text(record.cost),
        "currencyCode": record.currency_code,
    }


def vehicle_to_dict(vehicle: Vehicle) -> dict[str, Any]:
    """Flatten a vehicle and its related records into plain JSON types."""
    return {
        "id": vehicle.id,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "color": vehicle.color,
        "nickname": vehicle.nickname,
        "icon": vehicle.icon,
        "isPinned": vehicle.is_pinned,
        "categoryRawValue": vehicle.category_raw_value,
        "subcategoryName": vehicle.subcategory_name,
        "typeName": vehicle.type_name,
        "trimLevel": vehicle.trim_level,
        "vin": vehicle.vin,
        "serialNumber": vehicle.serial_number,
        "fuelTypeRawValue": vehicle.fuel_type_raw_value,
        "engineTypeRawValue": vehicle.engine_type_raw_value,
        "driveTypeRawValue": vehicle.drive_type_raw_value,
        "transmissionTypeRawValue": vehicle.transmission_type_raw_value,
        "notes": vehicle.notes,
        "addedDate": format_export_date(vehicle.added_date),
        "events": [event_to_dict(e) for e in vehicle.events],
        "ownershipRecords": [
            ownership_record_to_dict(r) for r in vehicle.ownership_records
        ],
    }


@dataclass(frozen=True)
class ExportSnapshot:
    """Export document: metadata plus the flattened vehicles."""

    export_date: str
    schema_version: str
    app_version: str
    vehicles: tuple[dict[str, Any], ...]

    @property
    def event_count(self) -> int:
        return sum(len(v["events"]) for v in self.vehicles)

    @property
    def ownership_record_count(self) -> int:
        return sum(len(v["ownershipRecords"]) for v in self.vehicles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "exportDate": self.export_date,
            "schemaVersion": self.schema_version,
            "appVersion": self.app_version,
            "vehicles": list(self.vehicles),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExportSnapshot":
        """Build a snapshot from an already validated document."""
        return cls(
            export_date=data["exportDate"],
            schema_version=data["schemaVersion"],
            app_version=data["appVersion"],
            vehicles=tuple(data["vehicles"]),
        )
