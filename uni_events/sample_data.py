"""Sample data for demos and the CSV import template."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from . import db


logger = logging.getLogger(__name__)

SAMPLE_UNIVERSITIES = [
    {"name": "University of Manchester", "country": "United Kingdom", "logo_url": ""},
    {"name": "University of Melbourne", "country": "Australia", "logo_url": ""},
    {"name": "University of Toronto", "country": "Canada", "logo_url": ""},
]

# university is an index into SAMPLE_UNIVERSITIES
SAMPLE_EVENTS = [
    {
        "university": 0,
        "event_name": "Masters Open Day",
        "city": "Dubai",
        "venue": "Address Marina",
        "event_date": "2030-03-14",
        "event_time": "4:00 PM - 8:00 PM",
        "organizer": "IDP Education",
        "cta_url": "https://example.com/register/manchester-masters",
        "study_levels": ["Masters", "PhD"],
    },
    {
        "university": 1,
        "event_name": "Undergraduate Info Evening",
        "city": "Abu Dhabi",
        "venue": "Rosewood Hotel",
        "event_date": "2030-04-02",
        "event_time": "5:00 PM - 7:00 PM",
        "organizer": "University of Melbourne",
        "cta_url": "https://example.com/register/melbourne-ug",
        "study_levels": ["Bachelors", "Diploma"],
    },
    {
        "university": 2,
        "event_name": "MBA Breakfast Briefing",
        "city": "Dubai",
        "venue": "Jumeirah Emirates Towers",
        "event_date": "2030-04-20",
        "event_time": "8:30 AM - 10:00 AM",
        "organizer": "Rotman School",
        "cta_url": "https://example.com/register/toronto-mba",
        "study_levels": ["MBA"],
    },
]

SAMPLE_EVENTS_CSV = (
    "university_id,event_name,city,venue,event_date,event_time,organizer,cta_url,study_levels\n"
    "1,Open Day,Dubai,Address Marina,2030-05-10,4:00 PM - 8:00 PM,IDP Education,"
    "https://example.com/register/open-day,\"['Masters','PhD']\"\n"
)


def seed_sample_data(db_path: Path = db.DB_PATH) -> Dict[str, List[int]]:
    uni_ids = [
        db.insert_university(u["name"], u["country"], u["logo_url"], db_path=db_path)
        for u in SAMPLE_UNIVERSITIES
    ]
    rows = []
    for ev in SAMPLE_EVENTS:
        row = {k: v for k, v in ev.items() if k != "university"}
        row["university_id"] = uni_ids[ev["university"]]
        rows.append(row)
    event_ids = db.insert_events(rows, db_path=db_path)
    logger.info("Seeded %d universities and %d events", len(uni_ids), len(event_ids))
    return {"universities": uni_ids, "events": event_ids}
