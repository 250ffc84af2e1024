"""Registration click tracking and click reporting."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from . import db
from .models import AnalyticsRecord, Event


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClickStat:
    event: Event
    count: int
    percentage: float


def record_click(event_id: int, db_path: Path = db.DB_PATH) -> int:
    return db.insert_analytics(event_id, db_path=db_path)


def _record_best_effort(recorder: Callable[[int], Any], event_id: int) -> None:
    try:
        recorder(event_id)
    except Exception:
        logger.exception("Analytics log failed for event %s", event_id)


def track_and_redirect(
    event_id: int,
    url: str,
    navigate: Callable[[str], Any],
    recorder: Optional[Callable[[int], Any]] = None,
) -> threading.Thread:
    """Record one click in the background, then navigate without waiting.

    Recorder failures only reach the log; navigation always happens.
    """
    recorder = recorder or record_click
    worker = threading.Thread(
        target=_record_best_effort,
        args=(recorder, event_id),
        name=f"analytics-{event_id}",
        daemon=True,
    )
    worker.start()
    navigate(url)
    return worker


def click_breakdown(events: Iterable[Event], records: Iterable[AnalyticsRecord]) -> List[ClickStat]:
    records = list(records)
    total = len(records)
    counts: Dict[int, int] = {}
    for r in records:
        if r.event_id is not None:
            counts[r.event_id] = counts.get(r.event_id, 0) + 1

    stats = []
    for ev in events:
        count = counts.get(ev.id, 0)
        pct = (count / total) * 100 if total > 0 else 0.0
        stats.append(ClickStat(event=ev, count=count, percentage=pct))
    return stats


def click_summary(events: Iterable[Event], records: Iterable[AnalyticsRecord]) -> Dict[str, int]:
    return {
        "total_clicks": len(list(records)),
        "active_listings": len(list(events)),
    }


def click_report_rows(stats: Iterable[ClickStat]) -> List[Dict[str, Any]]:
    return [
        {
            "event_id": s.event.id,
            "event_name": s.event.event_name,
            "university": s.event.university_name or "",
            "city": s.event.city,
            "event_date": s.event.event_date,
            "clicks": s.count,
            "share_percent": round(s.percentage, 1),
        }
        for s in stats
    ]
