"""Bulk event import from an uploaded CSV file.

Header row = field names. The study_levels column holds a single-quoted
bracket list, e.g. ['Masters','PhD'], normalized to a list of strings before
insert. The batch is all-or-nothing: any bad row or store error aborts it.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, IO, List, Union

from . import db
from .models import EVENT_COLUMNS


CSV_COLUMNS = list(EVENT_COLUMNS)

logger = logging.getLogger(__name__)

CsvSource = Union[bytes, str, IO[bytes], IO[str]]


class CsvImportError(ValueError):
    pass


@dataclass
class ImportResult:
    count: int
    event_ids: List[int] = field(default_factory=list)


def _read_text(source: CsvSource) -> str:
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, bytes):
        try:
            return source.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise CsvImportError(f"CSV file is not valid UTF-8: {exc}") from exc
    return str(source).lstrip("\ufeff")


def read_csv_rows(source: CsvSource) -> List[Dict[str, str]]:
    text = _read_text(source)
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        return []
    reader.fieldnames = [(name or "").strip() for name in reader.fieldnames]

    rows: List[Dict[str, str]] = []
    for raw in reader:
        # DictReader puts overflow cells under a None key.
        if None in raw:
            raise CsvImportError(f"Row {reader.line_num} has more cells than the header")
        row = {k: (v or "") for k, v in raw.items()}
        if not any(v.strip() for v in row.values()):
            continue
        rows.append(row)
    return rows


def parse_study_levels(raw: Any) -> List[str]:
    if raw is None:
        return []
    text = str(raw).strip()
    if not text:
        return []
    try:
        value = json.loads(text.replace("'", '"'))
    except json.JSONDecodeError as exc:
        raise CsvImportError(f"Invalid study_levels value {text!r}: {exc.msg}") from exc
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CsvImportError(f"Invalid study_levels value {text!r}: expected a list of strings")
    return [v.strip() for v in value]


def build_event_records(rows: List[Dict[str, str]]) -> List[Dict[str, Any]]:
    known = set(CSV_COLUMNS)
    records: List[Dict[str, Any]] = []
    for idx, row in enumerate(rows, start=1):
        unknown = sorted(k for k in row if k and k not in known)
        if unknown:
            raise CsvImportError(f"Unknown column(s): {', '.join(unknown)}")

        record: Dict[str, Any] = {}
        for col in CSV_COLUMNS:
            value = (row.get(col) or "").strip()
            record[col] = value or None
        try:
            record["study_levels"] = parse_study_levels(row.get("study_levels"))
        except CsvImportError as exc:
            raise CsvImportError(f"Row {idx}: {exc}") from exc
        records.append(record)
    return records


def import_events_csv(source: CsvSource, db_path: Path = db.DB_PATH) -> ImportResult:
    """Parse, transform and insert every row, or nothing.

    Raises CsvImportError for parse/transform problems and db.StoreError when
    the store rejects the batch.
    """
    rows = read_csv_rows(source)
    if not rows:
        raise CsvImportError("CSV file has no data rows")

    records = build_event_records(rows)
    ids = db.insert_events(records, db_path=db_path)
    logger.info("Imported %d events from CSV", len(ids))
    return ImportResult(count=len(ids), event_ids=ids)
