from __future__ import annotations

import io

import pytest

from uni_events import db
from uni_events.csv_import import (
    CsvImportError,
    build_event_records,
    import_events_csv,
    parse_study_levels,
    read_csv_rows,
)
from uni_events.sample_data import SAMPLE_EVENTS_CSV


HEADER = "university_id,event_name,city,venue,event_date,event_time,organizer,cta_url,study_levels\n"


def test_parse_study_levels_single_quoted_list() -> None:
    assert parse_study_levels("['Masters','PhD']") == ["Masters", "PhD"]
    assert parse_study_levels('["MBA"]') == ["MBA"]
    assert parse_study_levels("") == []
    assert parse_study_levels(None) == []


@pytest.mark.parametrize("raw", ["['Masters','PhD'", "Masters", "{'a': 'b'}", "[1, 2]"])
def test_parse_study_levels_rejects_malformed(raw: str) -> None:
    with pytest.raises(CsvImportError):
        parse_study_levels(raw)


def test_open_day_row_becomes_one_record() -> None:
    rows = read_csv_rows("event_name,study_levels\nOpen Day,\"['Masters','PhD']\"\n")
    records = build_event_records(rows)

    assert len(records) == 1
    assert records[0]["event_name"] == "Open Day"
    assert records[0]["study_levels"] == ["Masters", "PhD"]
    # columns absent from the file become NULL for the store to judge
    assert records[0]["city"] is None


def test_read_csv_rows_handles_bytes_bom_and_blank_lines() -> None:
    data = ("\ufeff" + HEADER + "\n1,Open Day,Dubai,,2030-05-10,,,,\n\n").encode("utf-8")
    rows = read_csv_rows(io.BytesIO(data))
    assert len(rows) == 1
    assert rows[0]["university_id"] == "1"
    assert rows[0]["venue"] == ""


def test_unknown_column_is_rejected() -> None:
    rows = read_csv_rows("event_name,colour\nOpen Day,blue\n")
    with pytest.raises(CsvImportError, match="colour"):
        build_event_records(rows)


def test_import_inserts_batch(db_path, seeded) -> None:
    uni = seeded["toronto"]
    csv_text = (
        HEADER
        + f"{uni},Open Day,Toronto,Hart House,2030-06-01,10:00 AM,U of T,https://example.com/a,\"['Masters','PhD']\"\n"
        + f"{uni},MBA Night,Dubai,,2030-06-02,,,,\n"
    )
    result = import_events_csv(csv_text.encode("utf-8"), db_path=db_path)

    assert result.count == 2
    events = {e.id: e for e in db.fetch_events(db_path=db_path)}
    assert events[result.event_ids[0]].study_levels == ("Masters", "PhD")
    assert events[result.event_ids[1]].study_levels == ()
    assert events[result.event_ids[1]].venue is None


def test_malformed_study_levels_aborts_whole_batch(db_path, seeded) -> None:
    uni = seeded["toronto"]
    before = len(db.fetch_events(db_path=db_path))
    csv_text = (
        HEADER
        + f"{uni},Good Row,Toronto,,2030-06-01,,,,\"['Masters']\"\n"
        + f"{uni},Bad Row,Toronto,,2030-06-02,,,,\"['Masters','PhD'\"\n"
    )
    with pytest.raises(CsvImportError, match="Row 2"):
        import_events_csv(csv_text, db_path=db_path)

    assert len(db.fetch_events(db_path=db_path)) == before


def test_store_rejection_rolls_back_batch(db_path, seeded) -> None:
    uni = seeded["toronto"]
    before = len(db.fetch_events(db_path=db_path))
    csv_text = (
        HEADER
        + f"{uni},Good Row,Toronto,,2030-06-01,,,,\n"
        + "9999,Orphan Row,Nowhere,,2030-06-02,,,,\n"
    )
    with pytest.raises(db.StoreError, match="FOREIGN KEY"):
        import_events_csv(csv_text, db_path=db_path)

    assert len(db.fetch_events(db_path=db_path)) == before


def test_missing_required_field_surfaces_store_error(db_path, seeded) -> None:
    csv_text = HEADER + f"{seeded['toronto']},,Toronto,,2030-06-01,,,,\n"
    with pytest.raises(db.StoreError, match="NOT NULL"):
        import_events_csv(csv_text, db_path=db_path)


def test_empty_file_is_an_error(db_path) -> None:
    with pytest.raises(CsvImportError):
        import_events_csv(HEADER, db_path=db_path)


def test_template_imports_cleanly(db_path, seeded) -> None:
    # template references university id 1, created first by the seed fixture
    result = import_events_csv(SAMPLE_EVENTS_CSV, db_path=db_path)
    assert result.count == 1


def test_non_iso_event_date_aborts_whole_batch(db_path, seeded) -> None:
    uni = seeded["toronto"]
    before = len(db.fetch_events(db_path=db_path))
    csv_text = (
        HEADER
        + f"{uni},Good Row,Toronto,,2031-03-13,,,,\n"
        + f"{uni},Bad Date,Toronto,,14/03/2031,,,,\n"
    )
    with pytest.raises(db.StoreError, match="CHECK"):
        import_events_csv(csv_text, db_path=db_path)

    assert len(db.fetch_events(db_path=db_path)) == before
