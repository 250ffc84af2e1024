from __future__ import annotations

from pathlib import Path

import pytest

from uni_events import db
from uni_events.models import Event


@pytest.fixture()
def db_path(tmp_path) -> Path:
    path = tmp_path / "uni_events_test.db"
    db.init_db(path)
    return path


@pytest.fixture()
def seeded(db_path: Path) -> dict[str, int]:
    manchester = db.insert_university("University of Manchester", "United Kingdom", db_path=db_path)
    toronto = db.insert_university("University of Toronto", "Canada", db_path=db_path)
    open_day = db.insert_event(
        {
            "university_id": manchester,
            "event_name": "Masters Open Day",
            "city": "Dubai",
            "venue": "Address Marina",
            "event_date": "2030-03-14",
            "event_time": "4:00 PM - 8:00 PM",
            "organizer": "IDP Education",
            "cta_url": "https://example.com/register/open-day",
            "study_levels": ["Masters", "PhD"],
        },
        db_path=db_path,
    )
    return {"manchester": manchester, "toronto": toronto, "open_day": open_day}


@pytest.fixture()
def sample_events() -> list[Event]:
    return [
        Event(
            id=1,
            university_id=10,
            event_name="Masters Open Day",
            city="Dubai",
            event_date="2030-03-14",
            study_levels=("Masters", "PhD"),
            university_name="University of Manchester",
            university_country="United Kingdom",
        ),
        Event(
            id=2,
            university_id=11,
            event_name="Undergraduate Info Evening",
            city="Abu Dhabi",
            event_date="2030-04-02",
            study_levels=("Bachelors",),
            university_name="University of Melbourne",
            university_country="Australia",
        ),
        Event(
            id=3,
            university_id=12,
            event_name="MBA Breakfast Briefing",
            city="Dubai",
            event_date="2030-04-20",
            study_levels=("MBA",),
            university_name="University of Toronto",
            university_country="Canada",
        ),
        Event(
            id=4,
            university_id=13,
            event_name="Open Day",
            city="Riyadh",
            event_date="2030-05-01",
            study_levels=(),
            university_name=None,
            university_country=None,
        ),
    ]
