"""Teacher dashboard, student management and activity routes."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from classroom.attachments import format_date, verify_attachments
from classroom.config import Settings
from classroom.dependencies import get_activity, get_settings, get_store, require_teacher
from classroom.models import Activity, FileAttachment, Question, SessionUser
from classroom.routes.uploads import download_response, process_uploads
from classroom.services import (
    activity_stats,
    activity_submissions,
    create_activity,
    create_student,
    teacher_overview,
)
from classroom.services.statistics import describe_submission
from classroom.store import RecordStore

router = APIRouter()


class StudentCreate(BaseModel):
    name: str
    password: Optional[str] = None


class ActivityCreate(BaseModel):
    title: str
    description: str = ""
    questions: list[Question] = Field(default_factory=list)
    attachments: list[FileAttachment] = Field(default_factory=list)


def _activity_summary(activity: Activity) -> dict:
    return {
        "id": activity.id,
        "title": activity.title,
        "description": activity.description,
        "createdAt": activity.created_at.isoformat(),
        "questionCount": len(activity.questions),
        "attachmentCount": len(activity.attachments),
        "maxPoints": activity.max_points,
    }


def _stats_payload(stats) -> dict:
    return {
        "totalStudents": stats.total_students,
        "submitted": stats.submitted_count,
        "pending": stats.pending_count,
        "averageGrade": stats.average_grade,
    }


def _submission_payload(row) -> dict:
    return {
        "studentName": row.student_name,
        "studentCode": row.student_code,
        "submission": row.submission.to_json_dict(),
    }


@router.get("/dashboard")
async def dashboard(
    user: SessionUser = Depends(require_teacher),
    store: RecordStore = Depends(get_store),
):
    """Totals plus per-activity submission statistics."""
    overview = teacher_overview(store)
    return {
        "teacher": user.name,
        "totalStudents": overview.total_students,
        "totalActivities": overview.total_activities,
        "totalSubmissions": overview.total_submissions,
        "activities": [
            _activity_summary(item.activity) | {"stats": _stats_payload(item.stats)}
            for item in overview.activities
        ],
    }


@router.get("/students")
async def list_students(
    user: SessionUser = Depends(require_teacher),
    store: RecordStore = Depends(get_store),
):
    students = store.get_students()
    return {
        "count": len(students),
        "students": [
            s.to_json_dict() | {"createdAtLabel": format_date(s.created_at)} for s in students
        ],
    }


@router.post("/students", status_code=status.HTTP_201_CREATED)
async def add_student(
    payload: StudentCreate,
    user: SessionUser = Depends(require_teacher),
    settings: Settings = Depends(get_settings),
    store: RecordStore = Depends(get_store),
):
    """Create a student; the response carries the generated login code and password."""
    student = create_student(store, payload.name, payload.password or settings.DEFAULT_STUDENT_PASSWORD)
    return student.to_json_dict()


@router.get("/activities")
async def list_activities(
    user: SessionUser = Depends(require_teacher),
    store: RecordStore = Depends(get_store),
):
    return {"activities": [_activity_summary(a) for a in store.get_activities()]}


@router.post("/activities", status_code=status.HTTP_201_CREATED)
async def add_activity(
    payload: ActivityCreate,
    user: SessionUser = Depends(require_teacher),
    settings: Settings = Depends(get_settings),
    store: RecordStore = Depends(get_store),
):
    verify_attachments(payload.attachments, user.id, settings.MAX_UPLOAD_SIZE_MB)
    activity = create_activity(
        store,
        title=payload.title,
        description=payload.description,
        questions=payload.questions,
        attachments=payload.attachments,
        created_by=user.id,
    )
    return activity.to_json_dict()


@router.post("/attachments")
async def upload_attachments(
    files: list[UploadFile] = File(...),
    user: SessionUser = Depends(require_teacher),
    settings: Settings = Depends(get_settings),
):
    """Encode files for inclusion in a new activity."""
    return await process_uploads(files, user.id, settings.MAX_UPLOAD_SIZE_MB)


@router.get("/activities/{activity_id}")
async def view_activity(
    user: SessionUser = Depends(require_teacher),
    activity: Activity = Depends(get_activity),
    store: RecordStore = Depends(get_store),
):
    return {
        "activity": activity.to_json_dict(),
        "stats": _stats_payload(activity_stats(store, activity.id)),
        "submissions": [_submission_payload(row) for row in activity_submissions(store, activity.id)],
    }


@router.get("/activities/{activity_id}/attachments/{attachment_id}")
async def download_activity_attachment(
    attachment_id: str,
    user: SessionUser = Depends(require_teacher),
    activity: Activity = Depends(get_activity),
):
    return download_response(activity.find_attachment(attachment_id))


def _get_submission(store: RecordStore, activity: Activity, submission_id: str):
    submission = next(
        (
            s
            for s in store.get_submissions()
            if s.id == submission_id and s.activity_id == activity.id
        ),
        None,
    )
    if submission is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found.")
    return submission


@router.get("/activities/{activity_id}/submissions/{submission_id}")
async def view_submission(
    submission_id: str,
    user: SessionUser = Depends(require_teacher),
    activity: Activity = Depends(get_activity),
    store: RecordStore = Depends(get_store),
):
    """One submission with every answer shown next to its question."""
    submission = _get_submission(store, activity, submission_id)
    row = describe_submission(submission, store.get_students())
    questions = []
    for question in activity.questions:
        answer = submission.answer_for(question.id)
        questions.append(
            {
                "question": question.to_json_dict(),
                "answer": answer.to_json_dict() if answer else None,
            }
        )
    return _submission_payload(row) | {"questions": questions}


@router.get("/activities/{activity_id}/submissions/{submission_id}/attachments/{attachment_id}")
async def download_submission_attachment(
    submission_id: str,
    attachment_id: str,
    user: SessionUser = Depends(require_teacher),
    activity: Activity = Depends(get_activity),
    store: RecordStore = Depends(get_store),
):
    submission = _get_submission(store, activity, submission_id)
    return download_response(submission.find_attachment(attachment_id))
