"""Authentication routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Response, status
from fastapi.responses import JSONResponse

from classroom.auth import SESSION_COOKIE_NAME, login_student, login_teacher, logout
from classroom.config import Settings
from classroom.dependencies import get_current_user, get_settings, get_store
from classroom.models import SessionUser
from classroom.store import RecordStore

router = APIRouter()
logger = logging.getLogger("classroom.web.auth")


def public_user(user: SessionUser) -> dict:
    return user.model_dump(
        mode="json", by_alias=True, exclude_none=True, exclude={"password", "token", "expires_at"}
    )


def _session_response(session: SessionUser, settings: Settings) -> JSONResponse:
    response = JSONResponse({"status": "success", "user": public_user(session)})
    max_age = settings.SESSION_DURATION_HOURS * 3600
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session.token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        samesite="lax",
        secure=False,
    )
    return response


@router.post("/login/teacher")
async def teacher_login(
    password: str = Form(...),
    settings: Settings = Depends(get_settings),
    store: RecordStore = Depends(get_store),
):
    """Validate the teacher password and start a session."""
    session = login_teacher(store, password, settings.SESSION_DURATION_HOURS)
    if session is None:
        logger.info("Rejected teacher login")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password.")
    return _session_response(session, settings)


@router.post("/login/student")
async def student_login(
    student_id: str = Form(...),
    password: str = Form(...),
    settings: Settings = Depends(get_settings),
    store: RecordStore = Depends(get_store),
):
    """Validate a student's 3-digit code and password and start a session."""
    session = login_student(store, student_id.strip(), password, settings.SESSION_DURATION_HOURS)
    if session is None:
        logger.info("Rejected student login for code %s", student_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect ID or password."
        )
    return _session_response(session, settings)


@router.post("/logout")
async def logout_route(response: Response, store: RecordStore = Depends(get_store)):
    """Clear the session pointer and the session cookie."""
    logout(store)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"status": "success"}


@router.get("/me")
async def me(user: SessionUser = Depends(get_current_user)):
    return public_user(user)
