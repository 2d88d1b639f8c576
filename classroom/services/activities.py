from __future__ import annotations

import logging
from typing import Optional, Sequence

from classroom.errors import RecordValidationError
from classroom.identity import new_record_id
from classroom.models import Activity, FileAttachment, MultipleChoiceQuestion, Question, utc_now
from classroom.store import RecordStore


logger = logging.getLogger("classroom.activities")


def validate_activity(title: str, questions: Sequence[Question]) -> list[str]:
    """Return every problem with the activity form; empty when it can be saved."""
    errors: list[str] = []
    if not title.strip():
        errors.append("Title is required.")
    if not questions:
        errors.append("Add at least one question.")
    for number, question in enumerate(questions, start=1):
        if not question.question.strip():
            errors.append(f"Question {number} is empty.")
        if isinstance(question, MultipleChoiceQuestion) and any(
            not option.strip() for option in question.options
        ):
            errors.append(f"Question {number}: every option must be filled in.")
    return errors


def _assign_question_ids(questions: Sequence[Question]) -> list[Question]:
    assigned: list[Question] = []
    ids_seen: set[str] = set()
    for index, question in enumerate(questions):
        question_id = question.id
        if not question_id or question_id in ids_seen:
            question_id = new_record_id(f"q{index}")
        ids_seen.add(question_id)
        assigned.append(
            question.model_copy(update={"id": question_id, "question": question.question.strip()})
        )
    return assigned


def create_activity(
    store: RecordStore,
    title: str,
    questions: Sequence[Question],
    created_by: str,
    description: str = "",
    attachments: Optional[Sequence[FileAttachment]] = None,
) -> Activity:
    """Validate and persist a new activity; nothing is written when validation fails."""
    errors = validate_activity(title, questions)
    if errors:
        raise RecordValidationError(" ".join(errors))

    activity = Activity(
        id=new_record_id(),
        title=title.strip(),
        description=(description or "").strip(),
        questions=_assign_question_ids(questions),
        attachments=list(attachments or []),
        created_at=utc_now(),
        created_by=created_by,
    )
    store.save_activity(activity)
    logger.info(
        "Created activity %s with %d questions and %d attachments",
        activity.id,
        len(activity.questions),
        len(activity.attachments),
    )
    return activity
