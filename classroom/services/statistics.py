"""Read-side aggregates, recomputed from the full collections on every call."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from classroom.models import Activity, Student, Submission
from classroom.store import RecordStore


UNKNOWN_STUDENT_NAME = "Student not found"
UNKNOWN_STUDENT_CODE = "N/A"


@dataclass
class ActivityStats:
    total_students: int
    submitted_count: int
    pending_count: int
    average_grade: float


@dataclass
class ActivityStatus:
    activity: Activity
    status: Literal["completed", "pending"]
    grade: Optional[int] = None


@dataclass
class StudentDashboard:
    total: int
    completed: int
    pending: int
    activities: List[ActivityStatus] = field(default_factory=list)


@dataclass
class ActivitySummary:
    activity: Activity
    stats: ActivityStats


@dataclass
class TeacherOverview:
    total_students: int
    total_activities: int
    total_submissions: int
    activities: List[ActivitySummary] = field(default_factory=list)


@dataclass
class SubmissionRow:
    submission: Submission
    student_name: str
    student_code: str


def _stats_for(activity_id: str, students: List[Student], submissions: List[Submission]) -> ActivityStats:
    matching = [s for s in submissions if s.activity_id == activity_id]
    total_students = len(students)
    submitted = len(matching)
    average = sum(s.grade for s in matching) / submitted if submitted else 0
    return ActivityStats(
        total_students=total_students,
        submitted_count=submitted,
        pending_count=total_students - submitted,
        average_grade=average,
    )


def activity_stats(store: RecordStore, activity_id: str) -> ActivityStats:
    return _stats_for(activity_id, store.get_students(), store.get_submissions())


def student_dashboard(store: RecordStore, student_id: str) -> StudentDashboard:
    """Split every activity into completed or pending for one student."""
    grades = {
        s.activity_id: s.grade for s in store.get_submissions() if s.student_id == student_id
    }
    rows = [
        ActivityStatus(
            activity=activity,
            status="completed" if activity.id in grades else "pending",
            grade=grades.get(activity.id),
        )
        for activity in store.get_activities()
    ]
    completed = sum(1 for row in rows if row.status == "completed")
    return StudentDashboard(
        total=len(rows),
        completed=completed,
        pending=len(rows) - completed,
        activities=rows,
    )


def teacher_overview(store: RecordStore) -> TeacherOverview:
    students = store.get_students()
    submissions = store.get_submissions()
    activities = store.get_activities()
    return TeacherOverview(
        total_students=len(students),
        total_activities=len(activities),
        total_submissions=len(submissions),
        activities=[
            ActivitySummary(activity=a, stats=_stats_for(a.id, students, submissions))
            for a in activities
        ],
    )


def describe_submission(submission: Submission, students: List[Student]) -> SubmissionRow:
    student = next((s for s in students if s.id == submission.student_id), None)
    return SubmissionRow(
        submission=submission,
        student_name=student.name if student else UNKNOWN_STUDENT_NAME,
        student_code=student.student_id if student else UNKNOWN_STUDENT_CODE,
    )


def activity_submissions(store: RecordStore, activity_id: str) -> List[SubmissionRow]:
    """Submissions of one activity joined with the submitting student's name and code."""
    students = store.get_students()
    return [
        describe_submission(submission, students)
        for submission in store.get_submissions()
        if submission.activity_id == activity_id
    ]
