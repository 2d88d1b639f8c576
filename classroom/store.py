"""
Persistent storage for the classroom record collections.

Every collection is one JSON-encoded list under a named key. A read parses
the whole collection and a write replaces it, so there is no cache to keep
in sync. Corrupted data is not repaired: decoding errors propagate.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter

from classroom.config import get_settings
from classroom.errors import DuplicateSubmissionError
from classroom.identity import KeyFn, by_id, draft_key
from classroom.models import Activity, Draft, SessionUser, Student, Submission, User


logger = logging.getLogger("classroom.store")

T = TypeVar("T", bound=BaseModel)

USERS = "users"
STUDENTS = "students"
ACTIVITIES = "activities"
SUBMISSIONS = "submissions"
DRAFTS = "drafts"
CURRENT_USER = "current_user"

COLLECTIONS: dict[str, type[BaseModel]] = {
    USERS: User,
    STUDENTS: Student,
    ACTIVITIES: Activity,
    SUBMISSIONS: Submission,
    DRAFTS: Draft,
}

DEFAULT_TEACHER_ID = "teacher_001"


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBackend:
    """Dict-backed storage, lost when the process exits."""

    def __init__(self):
        self._items: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileBackend:
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RecordStore:
    """Whole-collection read/upsert over a key-value backend."""

    def __init__(self, backend: KeyValueBackend, prefix: str = "teacher_system_"):
        self.backend = backend
        self.prefix = prefix
        self._lock = threading.RLock()

    def _key(self, collection: str) -> str:
        return f"{self.prefix}{collection}"

    # Generic operations

    def load(self, collection: str) -> list:
        """Return every record of ``collection``; empty when never written."""
        raw = self.backend.get(self._key(collection))
        if not raw:
            return []
        model = COLLECTIONS[collection]
        return TypeAdapter(list[model]).validate_json(raw)

    def _write(self, collection: str, records: list) -> None:
        payload = [record.to_json_dict() for record in records]
        self.backend.set(self._key(collection), json.dumps(payload))

    def upsert(self, collection: str, record: T, key_fn: KeyFn = by_id) -> T:
        """Replace the first record with a matching key, otherwise append."""
        with self._lock:
            records = self.load(collection)
            key = key_fn(record)
            for index, existing in enumerate(records):
                if key_fn(existing) == key:
                    records[index] = record
                    break
            else:
                records.append(record)
            self._write(collection, records)
        return record

    # Lifecycle

    def init(
        self, teacher_name: Optional[str] = None, teacher_password: Optional[str] = None
    ) -> None:
        """Seed the default teacher account if no account exists yet."""
        settings = get_settings()
        with self._lock:
            if self.get_users():
                return
            teacher = User(
                id=DEFAULT_TEACHER_ID,
                type="teacher",
                name=teacher_name or settings.DEFAULT_TEACHER_NAME,
                password=teacher_password or settings.DEFAULT_TEACHER_PASSWORD,
            )
            self._write(USERS, [teacher])
        logger.info("Seeded default teacher account '%s'", teacher.id)

    def teardown(self) -> None:
        """Remove every collection, including the session pointer."""
        with self._lock:
            for collection in (*COLLECTIONS, CURRENT_USER):
                self.backend.delete(self._key(collection))

    # Accounts

    def get_users(self) -> list[User]:
        return self.load(USERS)

    def save_user(self, user: User) -> User:
        return self.upsert(USERS, user)

    # Students

    def get_students(self) -> list[Student]:
        return self.load(STUDENTS)

    def save_student(self, student: Student) -> Student:
        return self.upsert(STUDENTS, student)

    def find_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.get_students() if s.id == student_id), None)

    # Activities

    def get_activities(self) -> list[Activity]:
        return self.load(ACTIVITIES)

    def save_activity(self, activity: Activity) -> Activity:
        return self.upsert(ACTIVITIES, activity)

    def find_activity(self, activity_id: str) -> Optional[Activity]:
        return next((a for a in self.get_activities() if a.id == activity_id), None)

    # Submissions

    def get_submissions(self) -> list[Submission]:
        return self.load(SUBMISSIONS)

    def save_submission(self, submission: Submission) -> Submission:
        return self.upsert(SUBMISSIONS, submission)

    def find_submission(self, activity_id: str, student_id: str) -> Optional[Submission]:
        return next(
            (
                s
                for s in self.get_submissions()
                if s.activity_id == activity_id and s.student_id == student_id
            ),
            None,
        )

    def create_submission(self, submission: Submission) -> Submission:
        """Persist a new submission; a second one for the same pair is rejected."""
        with self._lock:
            if self.find_submission(submission.activity_id, submission.student_id):
                logger.warning(
                    "Rejected duplicate submission for activity %s by student %s",
                    submission.activity_id,
                    submission.student_id,
                )
                raise DuplicateSubmissionError(submission.activity_id, submission.student_id)
            return self.save_submission(submission)

    # Drafts

    def get_drafts(self) -> list[Draft]:
        return self.load(DRAFTS)

    def save_draft(self, draft: Draft) -> Draft:
        return self.upsert(DRAFTS, draft, key_fn=draft_key)

    # Session pointer

    def get_current_user(self) -> Optional[SessionUser]:
        raw = self.backend.get(self._key(CURRENT_USER))
        if not raw:
            return None
        return SessionUser.model_validate_json(raw)

    def set_current_user(self, user: SessionUser) -> None:
        self.backend.set(self._key(CURRENT_USER), json.dumps(user.to_json_dict()))

    def clear_current_user(self) -> None:
        self.backend.delete(self._key(CURRENT_USER))
