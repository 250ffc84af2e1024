from __future__ import annotations

from pathlib import Path

from uni_events import db
from uni_events.config import load_settings
from uni_events.sample_data import SAMPLE_EVENTS, SAMPLE_UNIVERSITIES, seed_sample_data


def test_load_settings_from_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("UNI_EVENTS_DB_PATH", str(tmp_path / "events.db"))
    monkeypatch.setenv("UNI_EVENTS_ADMIN_EMAIL", "ops@example.com")
    monkeypatch.setenv("UNI_EVENTS_ADMIN_PASSWORD", "pw")
    monkeypatch.setenv("UNI_EVENTS_LOG_LEVEL", "debug")
    monkeypatch.setenv("UNI_EVENTS_LOG_DIR", "")

    settings = load_settings()
    assert settings.db_path == tmp_path / "events.db"
    assert settings.admin_email == "ops@example.com"
    assert settings.admin_password == "pw"
    assert settings.log_level == "DEBUG"
    assert settings.log_dir is None


def test_load_settings_defaults(monkeypatch) -> None:
    for var in ["UNI_EVENTS_DB_PATH", "UNI_EVENTS_ADMIN_PASSWORD", "UNI_EVENTS_LOG_LEVEL", "UNI_EVENTS_LOG_DIR"]:
        monkeypatch.delenv(var, raising=False)
    settings = load_settings()
    assert settings.db_path == Path("data/uni_events.db")
    assert settings.admin_password == ""
    assert settings.log_level == "INFO"


def test_seed_sample_data(db_path) -> None:
    seeded = seed_sample_data(db_path=db_path)
    assert len(seeded["universities"]) == len(SAMPLE_UNIVERSITIES)
    events = db.fetch_events(db_path=db_path)
    assert len(events) == len(SAMPLE_EVENTS)
    assert {e.university_country for e in events} == {u["country"] for u in SAMPLE_UNIVERSITIES}
