"""Reusable FastAPI dependencies."""
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status

from classroom.auth import SESSION_COOKIE_NAME, validate_session
from classroom.config import Settings, get_settings as _get_settings
from classroom.models import Activity, SessionUser
from classroom.store import JsonFileBackend, RecordStore


def get_settings() -> Settings:
    """Return application settings (cached)."""
    return _get_settings()


@lru_cache(maxsize=1)
def get_store() -> RecordStore:
    """Return the process-wide record store, seeded on first use."""
    settings = _get_settings()
    store = RecordStore(JsonFileBackend(settings.DATA_DIR), prefix=settings.STORAGE_PREFIX)
    store.init(settings.DEFAULT_TEACHER_NAME, settings.DEFAULT_TEACHER_PASSWORD)
    return store


def get_current_user(request: Request, store: RecordStore = Depends(get_store)) -> SessionUser:
    """Ensure the request carries the token of the live session."""
    session = validate_session(store, request.cookies.get(SESSION_COOKIE_NAME))
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


def require_teacher(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if user.type != "teacher":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Teacher access only.")
    return user


def require_student(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if user.type != "student":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Student access only.")
    return user


def get_activity(activity_id: str, store: RecordStore = Depends(get_store)) -> Activity:
    """Resolve the ``activity_id`` path parameter or fail with 404."""
    activity = store.find_activity(activity_id)
    if activity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found.")
    return activity
