"""Identifier generation and upsert keys."""
from __future__ import annotations

import random
import time
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, Hashable

if TYPE_CHECKING:
    from classroom.models import Draft
    from classroom.store import RecordStore


STUDENT_CODE_SPACE = 1000

_last_timestamp = 0
_timestamp_lock = Lock()


def _next_timestamp() -> int:
    """Millisecond clock that never repeats a value within the process."""
    global _last_timestamp
    now = int(time.time() * 1000)
    with _timestamp_lock:
        if now <= _last_timestamp:
            now = _last_timestamp + 1
        _last_timestamp = now
    return now


def new_record_id(suffix: str = "") -> str:
    """Return a time-based id; ``suffix`` tells apart records made in one batch."""
    return f"{_next_timestamp()}{suffix}"


def generate_student_code(store: "RecordStore", rng: random.Random | None = None) -> str:
    """Draw random 3-digit codes until one is not used by an existing student.

    There are only 1000 codes: with every code taken this never returns.
    """
    rng = rng or random
    taken = {student.student_id for student in store.get_students()}
    while True:
        code = f"{rng.randrange(STUDENT_CODE_SPACE):03d}"
        if code not in taken:
            return code


def by_id(record: Any) -> Hashable:
    return record.id


def draft_key(draft: "Draft") -> tuple[str, str, str]:
    return (draft.activity_id, draft.student_id, draft.question_id)


KeyFn = Callable[[Any], Hashable]
