"""Typed records for universities, events and click analytics."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


STUDY_LEVELS: Tuple[str, ...] = ("Bachelors", "Masters", "MBA", "PhD", "Diploma")

EVENT_COLUMNS: Tuple[str, ...] = (
    "university_id",
    "event_name",
    "city",
    "venue",
    "event_date",
    "event_time",
    "organizer",
    "cta_url",
    "study_levels",
)

UNIVERSITY_REQUIRED = ("name", "country")
EVENT_REQUIRED = (
    "university_id",
    "event_name",
    "city",
    "venue",
    "event_date",
    "event_time",
    "organizer",
    "cta_url",
)


@dataclass(frozen=True)
class University:
    id: int
    name: str
    country: str
    logo_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "University":
        return cls(
            id=int(row["id"]),
            name=str(row["name"]),
            country=str(row["country"]),
            logo_url=row["logo_url"] or None,
        )


@dataclass(frozen=True)
class Event:
    id: int
    university_id: int
    event_name: str
    city: str
    event_date: str
    venue: Optional[str] = None
    event_time: Optional[str] = None
    organizer: Optional[str] = None
    cta_url: Optional[str] = None
    study_levels: Tuple[str, ...] = ()
    # Denormalized from the owning university when read through the join.
    university_name: Optional[str] = None
    university_country: Optional[str] = None
    university_logo_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        keys = set(row.keys())

        def opt(key: str) -> Optional[str]:
            return row[key] if key in keys and row[key] not in (None, "") else None

        return cls(
            id=int(row["id"]),
            university_id=int(row["university_id"]),
            event_name=str(row["event_name"]),
            city=str(row["city"]),
            event_date=str(row["event_date"]),
            venue=opt("venue"),
            event_time=opt("event_time"),
            organizer=opt("organizer"),
            cta_url=opt("cta_url"),
            study_levels=tuple(decode_study_levels(row["study_levels"])),
            university_name=opt("university_name"),
            university_country=opt("university_country"),
            university_logo_url=opt("university_logo_url"),
        )

    def to_form(self) -> Dict[str, Any]:
        """Editable fields, shaped like the admin form payload."""
        return {
            "university_id": self.university_id,
            "event_name": self.event_name,
            "city": self.city,
            "venue": self.venue or "",
            "event_date": self.event_date,
            "event_time": self.event_time or "",
            "organizer": self.organizer or "",
            "cta_url": self.cta_url or "",
            "study_levels": list(self.study_levels),
        }


@dataclass(frozen=True)
class AnalyticsRecord:
    id: int
    event_id: Optional[int]
    created_at: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AnalyticsRecord":
        event_id = row["event_id"]
        return cls(
            id=int(row["id"]),
            event_id=int(event_id) if event_id is not None else None,
            created_at=str(row["created_at"] or ""),
        )


@dataclass
class EventForm:
    """Mutable admin form state for creating or editing an event."""

    university_id: Optional[int] = None
    event_name: str = ""
    city: str = ""
    venue: str = ""
    event_date: str = ""
    event_time: str = ""
    organizer: str = ""
    cta_url: str = ""
    study_levels: List[str] = field(default_factory=list)

    @classmethod
    def from_event(cls, event: Event) -> "EventForm":
        return cls(**event.to_form())

    def payload(self) -> Dict[str, Any]:
        return {
            "university_id": self.university_id,
            "event_name": self.event_name.strip(),
            "city": self.city.strip(),
            "venue": self.venue.strip(),
            "event_date": self.event_date,
            "event_time": self.event_time.strip(),
            "organizer": self.organizer.strip(),
            "cta_url": self.cta_url.strip(),
            "study_levels": list(self.study_levels),
        }


# Stored as JSON text, e.g. '["Masters", "PhD"]'.
def decode_study_levels(raw: Any) -> List[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, (list, tuple)):
        return [str(v) for v in raw]
    value = json.loads(raw)
    return [str(v) for v in value] if isinstance(value, list) else []


def encode_study_levels(levels: Any) -> str:
    return json.dumps(list(levels or []))


def missing_fields(payload: Mapping[str, Any], required: Tuple[str, ...]) -> List[str]:
    missing = []
    for key in required:
        value = payload.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(key)
    return missing
