"""Vehicle entity graph.

Plain dataclasses standing in for the persistence engine's records:
vehicles own their maintenance events and ownership records. Numeric
quantities that users type in (mileage, hours, cost) are Decimals so
they survive export byte-for-byte.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class Event:
    """Maintenance, repair or observation entry."""

    category_id: str = "observation"
    subcategory_id: str = "general"
    date: datetime = field(default_factory=_now)
    details: str | None = None
    mileage: Decimal | None = None
    distance_unit: str = "mi"
    hours: Decimal | None = None
    cost: Decimal | None = None
    currency_code: str = "USD"
    id: str = field(default_factory=_new_id)


@dataclass
class OwnershipRecord:
    """Purchase, sale, registration or similar ownership change."""

    type_raw_value: str = "purchased"
    date: datetime = field(default_factory=_now)
    details: str | None = None
    mileage: Decimal | None = None
    distance_unit: str = "mi"
    hours: Decimal | None = None
    cost: Decimal | None = None
    currency_code: str = "USD"
    id: str = field(default_factory=_new_id)


@dataclass
class Vehicle:
    """A tracked vehicle with its event and ownership history."""

    make: str
    model: str
    year: int
    color: str = "Black"
    nickname: str | None = None
    icon: str = ""
    is_pinned: bool = False
    category_raw_value: str = "automobiles"
    subcategory_name: str | None = None
    type_name: str | None = None
    trim_level: str | None = None
    vin: str | None = None
    serial_number: str | None = None
    fuel_type_raw_value: str = "gasoline"
    engine_type_raw_value: str = "v8"
    drive_type_raw_value: str = "2wd"
    transmission_type_raw_value: str = "automatic"
    notes: str | None = None
    added_date: datetime = field(default_factory=_now)
    events: list[Event] = field(default_factory=list)
    ownership_records: list[OwnershipRecord] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        """Trim make and model like the entry form does."""
        self.make = self.make.strip()
        self.model = self.model.strip()

    @property
    def display_name(self) -> str:
        """``"<year> <make> <model>"`` with the nickname in parentheses."""
        base = f"{self.year} {self.make} {self.model}"
        if self.nickname:
            return f"{base} ({self.nickname})"
        return base

    def add_event(self, event: Event) -> None:
        self.events.append(event)

    def add_ownership_record(self, record: OwnershipRecord) -> None:
        self.ownership_records.append(record)
