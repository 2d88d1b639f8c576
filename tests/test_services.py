"""Service layer tests."""
from datetime import datetime

import pytest

from classroom.attachments import (
    UploadedFile,
    build_attachments,
    decode_data_url,
    encode_data_url,
    format_date,
    format_file_size,
    validate_file_size,
    verify_attachment,
)
from classroom.errors import DuplicateSubmissionError, RecordValidationError
from classroom.models import EssayQuestion, FileAttachment, MultipleChoiceQuestion, Student
from classroom.services import (
    activity_stats,
    activity_submissions,
    create_activity,
    create_student,
    load_drafts,
    save_draft,
    student_dashboard,
    submit_activity,
    teacher_overview,
)


def _add_students(store, count):
    return [
        store.save_student(Student(id=f"s{n}", name=f"Student {n}", student_id=f"{n:03d}", password="123"))
        for n in range(count)
    ]


def test_create_activity_assigns_question_ids(store):
    questions = [
        MultipleChoiceQuestion(question=" Pick one ", options=["a", "b"], correct_answer=0),
        EssayQuestion(question="Discuss", points=3),
    ]
    activity = create_activity(store, "  Quiz  ", questions, created_by="teacher_001")

    assert activity.title == "Quiz"
    assert activity.questions[0].question == "Pick one"
    ids = [q.id for q in activity.questions]
    assert all(ids) and len(set(ids)) == 2
    assert store.find_activity(activity.id) == activity


@pytest.mark.parametrize(
    "title, questions, message",
    [
        ("", [EssayQuestion(question="Q")], "Title is required."),
        ("Quiz", [], "Add at least one question."),
        ("Quiz", [EssayQuestion(question="   ")], "Question 1 is empty."),
        (
            "Quiz",
            [MultipleChoiceQuestion(question="Q", options=["a", " "], correct_answer=0)],
            "Question 1: every option must be filled in.",
        ),
    ],
)
def test_create_activity_rejects_invalid_form(store, title, questions, message):
    with pytest.raises(RecordValidationError, match=message):
        create_activity(store, title, questions, created_by="teacher_001")
    assert store.get_activities() == []


def test_correct_answer_must_index_options():
    with pytest.raises(ValueError):
        MultipleChoiceQuestion(question="Q", options=["a", "b"], correct_answer=2)


def test_create_student_uses_default_password(store):
    student = create_student(store, "  Ana  ")
    assert student.name == "Ana"
    assert student.password == "123"
    assert store.find_student(student.id) == student


def test_create_student_default_password_comes_from_settings(store, env_settings):
    env_settings(DEFAULT_STUDENT_PASSWORD="abc")
    assert create_student(store, "Ana").password == "abc"
    assert create_student(store, "Bia", password="xyz").password == "xyz"


def test_create_student_requires_name(store):
    with pytest.raises(RecordValidationError):
        create_student(store, "   ")
    assert store.get_students() == []


def test_drafts_load_per_student(store):
    save_draft(store, "A1", "S1", "Q1", "old")
    save_draft(store, "A1", "S1", "Q1", "new")
    save_draft(store, "A1", "S2", "Q1", "someone else")

    assert load_drafts(store, "A1", "S1") == {"Q1": "new"}


def test_submit_requires_every_answer(store, mc_question, essay_question):
    activity = create_activity(store, "Quiz", [mc_question, essay_question], created_by="teacher_001")

    with pytest.raises(RecordValidationError, match="1 question"):
        submit_activity(store, activity, "S1", {"q-mc": 2, "q-essay": ""})
    assert store.get_submissions() == []


def test_submit_accepts_zero_as_an_answer(store, mc_question):
    activity = create_activity(store, "Quiz", [mc_question], created_by="teacher_001")
    submission = submit_activity(store, activity, "S1", {"q-mc": 0})
    assert submission.grade == 0


def test_submit_scores_and_rejects_second_attempt(store, mc_question, essay_question):
    activity = create_activity(store, "Quiz", [mc_question, essay_question], created_by="teacher_001")
    submission = submit_activity(store, activity, "S1", {"q-mc": 2, "q-essay": "text"})

    assert (submission.total_points, submission.max_points, submission.grade) == (15, 15, 100)
    with pytest.raises(DuplicateSubmissionError):
        submit_activity(store, activity, "S1", {"q-mc": 0, "q-essay": "again"})
    assert store.get_submissions() == [submission]


def test_activity_stats(store, mc_question, essay_question):
    students = _add_students(store, 3)
    activity = create_activity(store, "Quiz", [mc_question, essay_question], created_by="teacher_001")
    submit_activity(store, activity, students[0].id, {"q-mc": 2, "q-essay": "x"})
    submit_activity(store, activity, students[1].id, {"q-mc": 1, "q-essay": "x"})

    stats = activity_stats(store, activity.id)
    assert stats.total_students == 3
    assert stats.submitted_count == 2
    assert stats.pending_count == 1
    assert stats.average_grade == pytest.approx((100 + 33) / 2)


def test_activity_stats_without_submissions(store):
    _add_students(store, 2)
    stats = activity_stats(store, "nothing")
    assert (stats.submitted_count, stats.pending_count, stats.average_grade) == (0, 2, 0)


def test_student_dashboard_partitions_activities(store, mc_question):
    first = create_activity(store, "One", [mc_question], created_by="teacher_001")
    create_activity(store, "Two", [mc_question], created_by="teacher_001")
    submit_activity(store, first, "S1", {"q-mc": 2})

    dashboard = student_dashboard(store, "S1")
    assert (dashboard.total, dashboard.completed, dashboard.pending) == (2, 1, 1)
    statuses = {row.activity.title: (row.status, row.grade) for row in dashboard.activities}
    assert statuses == {"One": ("completed", 100), "Two": ("pending", None)}


def test_teacher_overview_and_submission_rows(store, mc_question):
    students = _add_students(store, 1)
    activity = create_activity(store, "One", [mc_question], created_by="teacher_001")
    submit_activity(store, activity, students[0].id, {"q-mc": 2})
    submit_activity(store, activity, "ghost", {"q-mc": 0})

    overview = teacher_overview(store)
    assert (overview.total_students, overview.total_activities, overview.total_submissions) == (1, 1, 2)
    assert overview.activities[0].stats.submitted_count == 2

    rows = {row.submission.student_id: row for row in activity_submissions(store, activity.id)}
    assert rows[students[0].id].student_name == "Student 0"
    assert rows[students[0].id].student_code == "000"
    assert rows["ghost"].student_name == "Student not found"
    assert rows["ghost"].student_code == "N/A"


def test_attachment_batch_is_partial_success():
    uploads = [
        UploadedFile(name="big.bin", content=b"x" * (1024 * 1024 + 1)),
        UploadedFile(name="notes.txt", content=b"hello", mime_type="text/plain"),
    ]
    batch = build_attachments(uploads, uploaded_by="teacher_001", max_size_mb=1)

    assert [a.name for a in batch.accepted] == ["notes.txt"]
    assert batch.accepted[0].size == 5
    assert batch.accepted[0].id.endswith("1")
    assert [r.name for r in batch.rejected] == ["big.bin"]
    assert "too large" in batch.rejected[0].reason


def test_data_url_round_trip():
    data = encode_data_url(b"\x00\x01binary", "application/pdf")
    assert data.startswith("data:application/pdf;base64,")
    assert decode_data_url(data) == (b"\x00\x01binary", "application/pdf")


def test_decode_rejects_plain_text():
    with pytest.raises(ValueError):
        decode_data_url("hello")


def test_validate_file_size_ceiling():
    assert validate_file_size(80 * 1024 * 1024) is True
    assert validate_file_size(80 * 1024 * 1024 + 1) is False


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(500) == "500 Bytes"
    assert format_file_size(1536) == "1.5 KB"


def test_format_date():
    assert format_date(datetime(2024, 3, 5, 14, 7)) == "05/03/2024 at 14:07"


def test_upload_ceiling_comes_from_settings(env_settings):
    env_settings(MAX_UPLOAD_SIZE_MB=2)
    assert validate_file_size(2 * 1024 * 1024) is True
    assert validate_file_size(2 * 1024 * 1024 + 1) is False


def _file(content: bytes, **overrides) -> FileAttachment:
    fields = {
        "id": "f1",
        "name": "notes.txt",
        "size": len(content),
        "data": encode_data_url(content, "text/plain"),
        "uploaded_by": "S1",
    }
    fields.update(overrides)
    return FileAttachment(**fields)


def test_verify_attachment_accepts_matching_file():
    verify_attachment(_file(b"hello"), "S1", max_size_mb=1)


@pytest.mark.parametrize(
    "overrides, uploaded_by, message",
    [
        ({"size": 4}, "S1", "declares 4 bytes but contains 5"),
        ({"data": "hello"}, "S1", "not a base64 data URL"),
        ({"data": "data:text/plain;base64,@@@"}, "S1", "not valid base64"),
        ({}, "S2", "not uploaded by this user"),
    ],
)
def test_verify_attachment_rejects_tampered_file(overrides, uploaded_by, message):
    with pytest.raises(RecordValidationError, match=message):
        verify_attachment(_file(b"hello", **overrides), uploaded_by, max_size_mb=1)


def test_verify_attachment_enforces_ceiling():
    big = _file(b"x" * (1024 * 1024 + 1), name="big.bin")
    with pytest.raises(RecordValidationError, match="too large"):
        verify_attachment(big, "S1", max_size_mb=1)
