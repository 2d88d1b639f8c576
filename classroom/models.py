"""Domain records persisted by the classroom store.

Field names are snake_case in Python and camelCase on disk, so every model
serializes ``by_alias``. Questions are a discriminated union on ``type``: the
option list and the correct answer only exist on multiple-choice questions.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


Role = Literal["teacher", "student"]
Answer = Union[int, str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """Base for every persisted record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class User(Record):
    """An account that can hold the session pointer."""

    id: str
    type: Role
    name: str
    student_id: Optional[str] = None
    password: str


class SessionUser(User):
    """The authenticated user plus the token that binds it to a client."""

    token: str
    expires_at: datetime


class Student(Record):
    """A student created by the teacher; ``student_id`` is the 3-digit login code."""

    id: str
    name: str
    student_id: str = Field(pattern=r"^\d{3}$")
    password: str
    created_at: datetime = Field(default_factory=utc_now)

    def as_user(self) -> User:
        return User(
            id=self.id,
            type="student",
            name=self.name,
            student_id=self.student_id,
            password=self.password,
        )


class MultipleChoiceQuestion(Record):
    id: str = ""
    type: Literal["multiple-choice"] = "multiple-choice"
    question: str
    options: list[str] = Field(min_length=1)
    correct_answer: int = Field(ge=0)
    points: int = Field(default=1, gt=0)

    @model_validator(mode="after")
    def _correct_answer_in_options(self) -> "MultipleChoiceQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"Correct answer index {self.correct_answer} is outside the "
                f"{len(self.options)} available options."
            )
        return self


class EssayQuestion(Record):
    id: str = ""
    type: Literal["essay"] = "essay"
    question: str
    points: int = Field(default=1, gt=0)


Question = Annotated[
    Union[MultipleChoiceQuestion, EssayQuestion], Field(discriminator="type")
]


class FileAttachment(Record):
    """An uploaded file kept inline as a base64 data URL."""

    id: str
    name: str
    size: int = Field(ge=0)
    type: str = ""
    data: str
    uploaded_at: datetime = Field(default_factory=utc_now)
    uploaded_by: str


class Activity(Record):
    id: str
    title: str
    description: str = ""
    questions: list[Question]
    attachments: list[FileAttachment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    created_by: str

    @property
    def max_points(self) -> int:
        return sum(question.points for question in self.questions)

    def find_attachment(self, attachment_id: str) -> Optional[FileAttachment]:
        return next((a for a in self.attachments if a.id == attachment_id), None)


class StudentAnswer(Record):
    question_id: str
    answer: Answer
    is_correct: Optional[bool] = None
    points: int = Field(ge=0)


class Submission(Record):
    id: str
    activity_id: str
    student_id: str
    answers: list[StudentAnswer]
    attachments: list[FileAttachment] = Field(default_factory=list)
    submitted_at: datetime = Field(default_factory=utc_now)
    total_points: int
    max_points: int
    grade: int = Field(ge=0, le=100)

    def answer_for(self, question_id: str) -> Optional[StudentAnswer]:
        return next((a for a in self.answers if a.question_id == question_id), None)

    def find_attachment(self, attachment_id: str) -> Optional[FileAttachment]:
        return next((a for a in self.attachments if a.id == attachment_id), None)


class Draft(Record):
    """In-progress essay text, one per (activity, student, question)."""

    activity_id: str
    student_id: str
    question_id: str
    content: str
    saved_at: datetime = Field(default_factory=utc_now)
