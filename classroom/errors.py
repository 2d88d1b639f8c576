"""Exceptions raised by the classroom core."""
from __future__ import annotations


class ClassroomError(Exception):
    """Base class for every error the core raises on purpose."""


class RecordValidationError(ClassroomError, ValueError):
    """Input was rejected before anything was persisted."""


class DuplicateSubmissionError(ClassroomError):
    """A submission already exists for the (activity, student) pair."""

    def __init__(self, activity_id: str, student_id: str):
        super().__init__(
            f"Student '{student_id}' has already submitted activity '{activity_id}'."
        )
        self.activity_id = activity_id
        self.student_id = student_id


class AttachmentTooLargeError(ClassroomError, ValueError):
    """A file exceeded the per-file size ceiling."""

    def __init__(self, name: str, size: int, limit: int):
        super().__init__(
            f"File {name} is too large ({size} bytes). Maximum {limit // (1024 * 1024)}MB allowed."
        )
        self.name = name
        self.size = size
        self.limit = limit
