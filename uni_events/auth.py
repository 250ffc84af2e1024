"""Admin sign-in and explicit session handling.

A Session is only ever created by sign_in. The app keeps it in the Streamlit
session state under SESSION_KEY and hands it to the admin console directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, MutableMapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


SESSION_KEY = "auth_session"
PASSWORD_METHOD = "pbkdf2:sha256"

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


@dataclass(frozen=True)
class Session:
    user_id: int
    email: str
    signed_in_at: datetime


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=PASSWORD_METHOD)


def create_admin(email: str, password: str, db_path: Path = db.DB_PATH) -> int:
    email = _normalize_email(email)
    if not email or not password:
        raise AuthError("Email and password are required")
    return db.insert_admin_user(email, hash_password(password), db_path=db_path)


def ensure_admin(email: str, password: str, db_path: Path = db.DB_PATH) -> bool:
    """Create the configured admin account if it does not exist yet."""
    if not _normalize_email(email) or not password:
        return False
    if db.fetch_admin_user(_normalize_email(email), db_path=db_path) is not None:
        return False
    create_admin(email, password, db_path=db_path)
    logger.info("Seeded admin account %s", _normalize_email(email))
    return True


def sign_in(email: str, password: str, db_path: Path = db.DB_PATH) -> Session:
    email = _normalize_email(email)
    row = db.fetch_admin_user(email, db_path=db_path) if email else None
    if row is None:
        logger.info("Sign-in rejected for unknown account %r", email)
        raise AuthError("Invalid login credentials")

    if not check_password_hash(row["password_hash"], password or ""):
        logger.info("Sign-in rejected for %s: wrong password", email)
        raise AuthError("Invalid login credentials")

    logger.info("Admin %s signed in", email)
    return Session(user_id=int(row["id"]), email=row["email"], signed_in_at=datetime.now())


def store_session(state: MutableMapping[str, Any], session: Session) -> None:
    state[SESSION_KEY] = session


def current_session(state: MutableMapping[str, Any]) -> Optional[Session]:
    session = state.get(SESSION_KEY)
    return session if isinstance(session, Session) else None


def sign_out(state: MutableMapping[str, Any]) -> None:
    session = state.pop(SESSION_KEY, None)
    if isinstance(session, Session):
        logger.info("Admin %s signed out", session.email)
