"""Grading engine tests."""
import pytest

from classroom.models import Activity
from classroom.services.grading import calculate_grade, score_submission


def _activity(*questions) -> Activity:
    return Activity(id="a1", title="Quiz", questions=list(questions), created_by="teacher_001")


def test_calculate_grade_percentages():
    assert calculate_grade(15, 15) == 100
    assert calculate_grade(5, 15) == 33
    assert calculate_grade(2, 3) == 67
    assert calculate_grade(0, 7) == 0


def test_calculate_grade_rounds_half_up():
    assert calculate_grade(1, 8) == 13
    assert calculate_grade(7, 8) == 88


def test_calculate_grade_without_points():
    assert calculate_grade(0, 0) == 0


@pytest.mark.parametrize("max_points", [1, 3, 7, 15, 40])
def test_calculate_grade_stays_in_range(max_points):
    grades = [calculate_grade(total, max_points) for total in range(max_points + 1)]
    assert all(0 <= grade <= 100 for grade in grades)
    assert grades == sorted(grades)


def test_correct_multiple_choice_and_essay(mc_question, essay_question):
    scored = score_submission(
        _activity(mc_question, essay_question), {"q-mc": 2, "q-essay": "Because."}
    )

    assert (scored.total_points, scored.max_points, scored.grade) == (15, 15, 100)
    assert scored.answers[0].is_correct is True
    assert scored.answers[0].points == 10


def test_wrong_multiple_choice(mc_question, essay_question):
    scored = score_submission(
        _activity(mc_question, essay_question), {"q-mc": 0, "q-essay": "Because."}
    )

    assert (scored.total_points, scored.max_points, scored.grade) == (5, 15, 33)
    assert scored.answers[0].is_correct is False
    assert scored.answers[0].points == 0


def test_essay_gets_full_points_and_no_correctness(essay_question):
    scored = score_submission(_activity(essay_question), {"q-essay": "anything"})

    answer = scored.answers[0]
    assert answer.is_correct is None
    assert answer.points == 5
    assert "isCorrect" not in answer.to_json_dict()


def test_answers_follow_question_order(mc_question, essay_question):
    scored = score_submission(
        _activity(essay_question, mc_question), {"q-mc": 2, "q-essay": "text"}
    )
    assert [a.question_id for a in scored.answers] == ["q-essay", "q-mc"]


def test_string_index_is_not_a_correct_choice(mc_question):
    scored = score_submission(_activity(mc_question), {"q-mc": "2"})
    assert scored.answers[0].is_correct is False


def test_missing_answer_is_a_caller_error(mc_question, essay_question):
    with pytest.raises(KeyError):
        score_submission(_activity(mc_question, essay_question), {"q-mc": 2})
