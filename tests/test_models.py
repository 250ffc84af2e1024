from __future__ import annotations

from uni_events.models import (
    EVENT_REQUIRED,
    Event,
    EventForm,
    decode_study_levels,
    encode_study_levels,
    missing_fields,
)


def test_event_form_payload_strips_text() -> None:
    form = EventForm(university_id=1, event_name="  Open Day ", city="Dubai ", study_levels=["PhD"])
    payload = form.payload()
    assert payload["event_name"] == "Open Day"
    assert payload["city"] == "Dubai"
    assert payload["study_levels"] == ["PhD"]


def test_event_form_from_event() -> None:
    event = Event(id=9, university_id=2, event_name="Fair", city="Doha", event_date="2030-01-01", study_levels=("MBA",))
    form = EventForm.from_event(event)
    assert form.university_id == 2
    assert form.venue == ""
    assert form.study_levels == ["MBA"]


def test_missing_fields_reports_blank_and_none() -> None:
    payload = EventForm(event_name="Fair", city="  ").payload()
    missing = missing_fields(payload, EVENT_REQUIRED)
    assert "university_id" in missing
    assert "city" in missing
    assert "event_name" not in missing


def test_study_levels_codec() -> None:
    assert decode_study_levels(encode_study_levels(["Masters", "PhD"])) == ["Masters", "PhD"]
    assert decode_study_levels(None) == []
    assert encode_study_levels(None) == "[]"
