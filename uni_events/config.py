"""Runtime settings and logging setup.

Settings come from environment variables; a local .env file is loaded first
when present.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_DB_PATH = Path("data/uni_events.db")
LOG_FORMAT = "[%(asctime)s] [%(levelname)-7s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    admin_email: str = "admin@example.com"
    admin_password: str = ""
    log_level: str = "INFO"
    log_dir: Optional[Path] = None


def load_settings() -> Settings:
    load_dotenv()
    log_dir = os.getenv("UNI_EVENTS_LOG_DIR", "").strip()
    return Settings(
        db_path=Path(os.getenv("UNI_EVENTS_DB_PATH", "").strip() or DEFAULT_DB_PATH),
        admin_email=os.getenv("UNI_EVENTS_ADMIN_EMAIL", "admin@example.com").strip(),
        admin_password=os.getenv("UNI_EVENTS_ADMIN_PASSWORD", ""),
        log_level=(os.getenv("UNI_EVENTS_LOG_LEVEL", "INFO").strip() or "INFO").upper(),
        log_dir=Path(log_dir) if log_dir else None,
    )


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    if root.handlers:
        # Streamlit reruns the script; configure once per process.
        return

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_dir:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = settings.log_dir / f"uni_events_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
    )
