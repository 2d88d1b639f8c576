"""Credential checks and session pointer lifecycle.

Secrets are stored and compared in clear text, exactly as accounts are
persisted; there is no hashing or rate limiting. Only one session exists per
store: logging in replaces the pointer, which invalidates the previous token.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from classroom.config import get_settings
from classroom.models import SessionUser, User
from classroom.store import RecordStore


logger = logging.getLogger("classroom.auth")

SESSION_COOKIE_NAME = "session_token"

def authenticate_teacher(store: RecordStore, password: str) -> Optional[User]:
    """Return the teacher account whose password matches, or None."""
    if not password:
        return None
    return next(
        (u for u in store.get_users() if u.type == "teacher" and u.password == password),
        None,
    )


def authenticate_student(store: RecordStore, student_code: str, password: str) -> Optional[User]:
    """Return the student, normalized into a User, whose code and password match."""
    if not student_code or not password:
        return None
    student = next(
        (
            s
            for s in store.get_students()
            if s.student_id == student_code and s.password == password
        ),
        None,
    )
    return student.as_user() if student else None


def start_session(
    store: RecordStore, user: User, duration_hours: Optional[int] = None
) -> SessionUser:
    """Write ``user`` to the session pointer with a fresh token."""
    if duration_hours is None:
        duration_hours = get_settings().SESSION_DURATION_HOURS
    session = SessionUser(
        **user.model_dump(),
        token=secrets.token_urlsafe(32),
        expires_at=datetime.now(timezone.utc) + timedelta(hours=duration_hours),
    )
    store.set_current_user(session)
    logger.info("Started %s session for %s", user.type, user.id)
    return session


def login_teacher(
    store: RecordStore, password: str, duration_hours: Optional[int] = None
) -> Optional[SessionUser]:
    teacher = authenticate_teacher(store, password)
    if teacher is None:
        return None
    return start_session(store, teacher, duration_hours)


def login_student(
    store: RecordStore,
    student_code: str,
    password: str,
    duration_hours: Optional[int] = None,
) -> Optional[SessionUser]:
    student = authenticate_student(store, student_code, password)
    if student is None:
        return None
    return start_session(store, student, duration_hours)


def current_user(store: RecordStore) -> Optional[SessionUser]:
    """Return the session pointer if it has not expired."""
    session = store.get_current_user()
    if session is None:
        return None
    if session.expires_at < datetime.now(timezone.utc):
        store.clear_current_user()
        return None
    return session


def validate_session(store: RecordStore, token: Optional[str]) -> Optional[SessionUser]:
    """Return the session user when ``token`` matches the live session pointer."""
    if not token:
        return None
    session = current_user(store)
    if session is None or not secrets.compare_digest(session.token, token):
        return None
    return session


def logout(store: RecordStore) -> None:
    """Clear the session pointer unconditionally."""
    store.clear_current_user()
