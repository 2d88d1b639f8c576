from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from classroom.errors import RecordValidationError
from classroom.identity import new_record_id
from classroom.models import Activity, Answer, Draft, FileAttachment, Submission, utc_now
from classroom.services.grading import score_submission
from classroom.store import RecordStore


logger = logging.getLogger("classroom.submissions")


def save_draft(
    store: RecordStore, activity_id: str, student_id: str, question_id: str, content: str
) -> Draft:
    """Store in-progress text; a later save for the same question replaces it."""
    draft = Draft(
        activity_id=activity_id,
        student_id=student_id,
        question_id=question_id,
        content=content,
        saved_at=utc_now(),
    )
    return store.save_draft(draft)


def load_drafts(store: RecordStore, activity_id: str, student_id: str) -> dict[str, str]:
    """Return draft content keyed by question id."""
    return {
        draft.question_id: draft.content
        for draft in store.get_drafts()
        if draft.activity_id == activity_id and draft.student_id == student_id
    }


def find_unanswered(activity: Activity, answers: Mapping[str, Optional[Answer]]) -> list[str]:
    return [
        question.id
        for question in activity.questions
        if answers.get(question.id) is None or answers.get(question.id) == ""
    ]


def submit_activity(
    store: RecordStore,
    activity: Activity,
    student_id: str,
    answers: Mapping[str, Optional[Answer]],
    attachments: Optional[Sequence[FileAttachment]] = None,
) -> Submission:
    """Grade and persist a student's only submission for ``activity``.

    Raises ``RecordValidationError`` when a question is unanswered and
    ``DuplicateSubmissionError`` when the student already submitted.
    """
    unanswered = find_unanswered(activity, answers)
    if unanswered:
        raise RecordValidationError(
            f"Please answer every question. {len(unanswered)} question(s) left."
        )

    scored = score_submission(activity, answers)
    submission = Submission(
        id=new_record_id(),
        activity_id=activity.id,
        student_id=student_id,
        answers=scored.answers,
        attachments=list(attachments or []),
        submitted_at=utc_now(),
        total_points=scored.total_points,
        max_points=scored.max_points,
        grade=scored.grade,
    )
    store.create_submission(submission)
    logger.info(
        "Student %s submitted activity %s: %d/%d (%d%%)",
        student_id,
        activity.id,
        submission.total_points,
        submission.max_points,
        submission.grade,
    )
    return submission
