"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Mapping

CoordinateTable = Mapping[str, tuple[float, float]]


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class RawAlert:
    alert_date: datetime
    title: str
    location: str
    category: Any


@dataclass(frozen=True)
class ResolvedAlert:
    date: datetime
    title: str
    location: str
    category: str
    lat: float
    lon: float

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["date"] = self.date.isoformat()
        return out


@dataclass(frozen=True)
class AggregateStats:
    total: int
    by_category: dict[str, int]
    by_location: dict[str, int]
    top_locations: list[tuple[str, int]]
    first_alert: datetime | None
    last_alert: datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_category": dict(self.by_category),
            "by_location": dict(self.by_location),
            "top_locations": [{"location": name, "count": count} for name, count in self.top_locations],
            "first_alert": self.first_alert.isoformat() if self.first_alert else None,
            "last_alert": self.last_alert.isoformat() if self.last_alert else None,
        }


@dataclass(frozen=True)
class Apartment:
    id: str
    address: str
    contact_name: str
    contact_phone: str
    price: float
    rooms: float
    size: float
    floor: int
    details: str
    lat: float
    lon: float
    notes: tuple[str, ...] = field(default_factory=tuple)
    is_irrelevant: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "contactName": self.contact_name,
            "contactPhone": self.contact_phone,
            "price": self.price,
            "rooms": self.rooms,
            "size": self.size,
            "floor": self.floor,
            "details": self.details,
            "lat": self.lat,
            "lng": self.lon,
            "notes": list(self.notes),
            "isIrrelevant": self.is_irrelevant,
        }
