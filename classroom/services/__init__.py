"""Service layer for the Classroom Activities system."""
from .activities import create_activity, validate_activity
from .grading import ScoredSubmission, calculate_grade, score_submission
from .statistics import (
    ActivityStats,
    StudentDashboard,
    TeacherOverview,
    activity_stats,
    activity_submissions,
    student_dashboard,
    teacher_overview,
)
from .students import create_student
from .submissions import load_drafts, save_draft, submit_activity

__all__ = [
	"create_activity", "validate_activity",
	"ScoredSubmission", "calculate_grade", "score_submission",
	"ActivityStats", "StudentDashboard", "TeacherOverview",
	"activity_stats", "activity_submissions", "student_dashboard", "teacher_overview",
	"create_student",
	"load_drafts", "save_draft", "submit_activity",
]
