from __future__ import annotations

import logging
import random
from typing import Optional

from classroom.config import get_settings
from classroom.errors import RecordValidationError
from classroom.identity import generate_student_code, new_record_id
from classroom.models import Student, utc_now
from classroom.store import RecordStore


logger = logging.getLogger("classroom.students")

def create_student(
    store: RecordStore,
    name: str,
    password: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Student:
    """Create a student with a fresh 3-digit login code."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise RecordValidationError("Student name is required.")

    student = Student(
        id=new_record_id(),
        name=cleaned,
        student_id=generate_student_code(store, rng),
        password=password or get_settings().DEFAULT_STUDENT_PASSWORD,
        created_at=utc_now(),
    )
    store.save_student(student)
    logger.info("Created student %s with code %s", student.id, student.student_id)
    return student
