"""SQLite schema + data access layer for universities, events and click analytics.

Every public function opens its own connection, commits on success and rolls
back on failure. Store failures surface as StoreError carrying the original
sqlite message.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import EVENT_COLUMNS, AnalyticsRecord, Event, University, encode_study_levels


DB_PATH = Path("data/uni_events.db")

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A database operation failed (constraint violation, I/O error, ...)."""


@contextmanager
def get_conn(db_path: Path = DB_PATH):
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        logger.error("Store operation failed: %s", exc)
        raise StoreError(str(exc)) from exc
    finally:
        conn.close()


def init_db(db_path: Path = DB_PATH) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_conn(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS universities (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                country TEXT NOT NULL,
                logo_url TEXT,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                university_id INTEGER NOT NULL,
                event_name TEXT NOT NULL,
                city TEXT NOT NULL,
                venue TEXT,
                event_date TEXT NOT NULL CHECK (date(event_date) = event_date),
                event_time TEXT,
                organizer TEXT,
                cta_url TEXT,
                study_levels TEXT NOT NULL DEFAULT '[]',
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(university_id) REFERENCES universities(id)
            );

            CREATE TABLE IF NOT EXISTS analytics (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                event_id INTEGER,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(event_id) REFERENCES events(id) ON DELETE SET NULL
            );

            CREATE TABLE IF NOT EXISTS admin_users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_events_date ON events(event_date);
            CREATE INDEX IF NOT EXISTS idx_analytics_event ON analytics(event_id);
            """
        )


# --- universities ---

def insert_university(name: str, country: str, logo_url: Optional[str] = None, db_path: Path = DB_PATH) -> int:
    with get_conn(db_path) as conn:
        cur = conn.execute(
            "INSERT INTO universities (name, country, logo_url) VALUES (?, ?, ?)",
            (name, country, logo_url or None),
        )
        return int(cur.lastrowid)


def update_university(
    university_id: int,
    name: str,
    country: str,
    logo_url: Optional[str] = None,
    db_path: Path = DB_PATH,
) -> None:
    with get_conn(db_path) as conn:
        conn.execute(
            "UPDATE universities SET name = ?, country = ?, logo_url = ? WHERE id = ?",
            (name, country, logo_url or None, university_id),
        )


def delete_university(university_id: int, db_path: Path = DB_PATH) -> None:
    """Delete a university; fails with StoreError while events still reference it."""
    with get_conn(db_path) as conn:
        conn.execute("DELETE FROM universities WHERE id = ?", (university_id,))


def fetch_universities(db_path: Path = DB_PATH) -> List[University]:
    with get_conn(db_path) as conn:
        rows = conn.execute("SELECT * FROM universities ORDER BY name").fetchall()
    return [University.from_row(r) for r in rows]


# --- events ---

def _event_params(row: Mapping[str, Any]) -> Dict[str, Any]:
    params = {col: row.get(col) for col in EVENT_COLUMNS}
    params["study_levels"] = encode_study_levels(row.get("study_levels"))
    return params


def insert_events(rows: Iterable[Mapping[str, Any]], db_path: Path = DB_PATH) -> List[int]:
    """Insert a batch of events in one transaction: all rows commit or none do."""
    inserted_ids: List[int] = []
    with get_conn(db_path) as conn:
        cur = conn.cursor()
        for row in rows:
            cur.execute(
                """
                INSERT INTO events (
                    university_id, event_name, city, venue, event_date,
                    event_time, organizer, cta_url, study_levels
                )
                VALUES (
                    :university_id, :event_name, :city, :venue, :event_date,
                    :event_time, :organizer, :cta_url, :study_levels
                )
                """,
                _event_params(row),
            )
            inserted_ids.append(int(cur.lastrowid))
    return inserted_ids


def insert_event(row: Mapping[str, Any], db_path: Path = DB_PATH) -> int:
    return insert_events([row], db_path=db_path)[0]


def update_event(event_id: int, row: Mapping[str, Any], db_path: Path = DB_PATH) -> None:
    params = _event_params(row)
    params["id"] = event_id
    with get_conn(db_path) as conn:
        conn.execute(
            """
            UPDATE events
            SET university_id = :university_id,
                event_name = :event_name,
                city = :city,
                venue = :venue,
                event_date = :event_date,
                event_time = :event_time,
                organizer = :organizer,
                cta_url = :cta_url,
                study_levels = :study_levels
            WHERE id = :id
            """,
            params,
        )


def delete_event(event_id: int, db_path: Path = DB_PATH) -> None:
    with get_conn(db_path) as conn:
        conn.execute("DELETE FROM events WHERE id = ?", (event_id,))


def fetch_events(from_date: Optional[str] = None, db_path: Path = DB_PATH) -> List[Event]:
    """Events joined with their university, ordered by date ascending.

    from_date (ISO YYYY-MM-DD) keeps only events on or after that day.
    """
    sql = """
        SELECT
            e.*,
            u.name AS university_name,
            u.country AS university_country,
            u.logo_url AS university_logo_url
        FROM events e
        LEFT JOIN universities u ON u.id = e.university_id
    """
    params: tuple = ()
    if from_date:
        sql += " WHERE e.event_date >= ?"
        params = (from_date,)
    sql += " ORDER BY e.event_date ASC, e.id ASC"

    with get_conn(db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [Event.from_row(r) for r in rows]


def event_counts_by_university(db_path: Path = DB_PATH) -> Dict[int, int]:
    """Number of events per university id. Universities without events are absent."""
    with get_conn(db_path) as conn:
        rows = conn.execute(
            "SELECT university_id, COUNT(*) AS n FROM events GROUP BY university_id"
        ).fetchall()
    return {int(r["university_id"]): int(r["n"]) for r in rows}


# --- analytics ---

def insert_analytics(event_id: int, db_path: Path = DB_PATH) -> int:
    with get_conn(db_path) as conn:
        cur = conn.execute("INSERT INTO analytics (event_id) VALUES (?)", (event_id,))
        return int(cur.lastrowid)


def fetch_analytics(db_path: Path = DB_PATH) -> List[AnalyticsRecord]:
    with get_conn(db_path) as conn:
        rows = conn.execute("SELECT * FROM analytics ORDER BY id").fetchall()
    return [AnalyticsRecord.from_row(r) for r in rows]


# --- admin users ---

def insert_admin_user(email: str, password_hash: str, db_path: Path = DB_PATH) -> int:
    with get_conn(db_path) as conn:
        cur = conn.execute(
            "INSERT INTO admin_users (email, password_hash) VALUES (?, ?)",
            (email, password_hash),
        )
        return int(cur.lastrowid)


def fetch_admin_user(email: str, db_path: Path = DB_PATH) -> Optional[sqlite3.Row]:
    with get_conn(db_path) as conn:
        return conn.execute(
            "SELECT id, email, password_hash FROM admin_users WHERE email = ?",
            (email,),
        ).fetchone()
