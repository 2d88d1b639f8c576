"""Student dashboard, drafts and submission routes."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from classroom.attachments import verify_attachments
from classroom.config import Settings
from classroom.dependencies import get_activity, get_settings, get_store, require_student
from classroom.models import Activity, Answer, FileAttachment, SessionUser
from classroom.routes.uploads import download_response, process_uploads
from classroom.services import load_drafts, save_draft, student_dashboard, submit_activity
from classroom.store import RecordStore

router = APIRouter()


class DraftPayload(BaseModel):
    content: str


class SubmissionPayload(BaseModel):
    answers: dict[str, Optional[Answer]] = Field(default_factory=dict)
    attachments: list[FileAttachment] = Field(default_factory=list)


def _activity_for_student(activity: Activity, reveal_answers: bool) -> dict:
    """Activity payload; correct answers stay hidden until the student has submitted."""
    payload = activity.to_json_dict()
    if not reveal_answers:
        for question in payload["questions"]:
            question.pop("correctAnswer", None)
    return payload


@router.get("/dashboard")
async def dashboard(
    user: SessionUser = Depends(require_student),
    store: RecordStore = Depends(get_store),
):
    """Every activity marked completed or pending for the current student."""
    summary = student_dashboard(store, user.id)
    return {
        "student": user.name,
        "studentId": user.student_id,
        "total": summary.total,
        "completed": summary.completed,
        "pending": summary.pending,
        "activities": [
            {
                "id": row.activity.id,
                "title": row.activity.title,
                "description": row.activity.description,
                "questionCount": len(row.activity.questions),
                "attachmentCount": len(row.activity.attachments),
                "status": row.status,
                "grade": row.grade,
            }
            for row in summary.activities
        ],
    }


@router.get("/activities/{activity_id}")
async def open_activity(
    user: SessionUser = Depends(require_student),
    activity: Activity = Depends(get_activity),
    store: RecordStore = Depends(get_store),
):
    """Activity with saved drafts, or the existing result when already submitted."""
    submission = store.find_submission(activity.id, user.id)
    return {
        "activity": _activity_for_student(activity, reveal_answers=submission is not None),
        "drafts": load_drafts(store, activity.id, user.id),
        "submission": submission.to_json_dict() if submission else None,
    }


@router.put("/activities/{activity_id}/drafts/{question_id}")
async def put_draft(
    question_id: str,
    payload: DraftPayload,
    user: SessionUser = Depends(require_student),
    activity: Activity = Depends(get_activity),
    store: RecordStore = Depends(get_store),
):
    if not any(question.id == question_id for question in activity.questions):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found.")
    draft = save_draft(store, activity.id, user.id, question_id, payload.content)
    return draft.to_json_dict()


@router.post("/attachments")
async def upload_attachments(
    files: list[UploadFile] = File(...),
    user: SessionUser = Depends(require_student),
    settings: Settings = Depends(get_settings),
):
    """Encode files to send along with a submission."""
    return await process_uploads(files, user.id, settings.MAX_UPLOAD_SIZE_MB)


@router.post("/activities/{activity_id}/submit", status_code=status.HTTP_201_CREATED)
async def submit(
    payload: SubmissionPayload,
    user: SessionUser = Depends(require_student),
    activity: Activity = Depends(get_activity),
    settings: Settings = Depends(get_settings),
    store: RecordStore = Depends(get_store),
):
    verify_attachments(payload.attachments, user.id, settings.MAX_UPLOAD_SIZE_MB)
    submission = submit_activity(
        store, activity, user.id, payload.answers, attachments=payload.attachments
    )
    return submission.to_json_dict()


@router.get("/activities/{activity_id}/attachments/{attachment_id}")
async def download_activity_attachment(
    attachment_id: str,
    user: SessionUser = Depends(require_student),
    activity: Activity = Depends(get_activity),
):
    return download_response(activity.find_attachment(attachment_id))


@router.get("/activities/{activity_id}/submission/attachments/{attachment_id}")
async def download_own_attachment(
    attachment_id: str,
    user: SessionUser = Depends(require_student),
    activity: Activity = Depends(get_activity),
    store: RecordStore = Depends(get_store),
):
    submission = store.find_submission(activity.id, user.id)
    if submission is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found.")
    return download_response(submission.find_attachment(attachment_id))
