import pytest

from api.services.exam_service import (
    ExamRepository,
    build_exam,
    exam_detail_for,
    grade_exam,
)
from helpers import make_course
from markdown_extract import parse_markdown

MARKDOWN = "".join(
    f"### Q{n}\n- [x] right {n}\n- [ ] wrong {n}\n" for n in range(1, 11)
)


@pytest.fixture
def questions():
    return parse_markdown(MARKDOWN, "C")


def _answers(questions, correct: int) -> dict[str, list[str]]:
    answers = {}
    for index, question in enumerate(questions):
        want_correct = index < correct
        answers[question.id] = [c.id for c in question.choices if c.is_correct == want_correct]
    return answers


def test_build_exam_takes_prefix(questions) -> None:
    assert build_exam(questions, 3) == questions[:3]
    assert build_exam(questions, 50) == questions
    assert build_exam(questions, 0) == []


def test_pass_threshold_is_seventy_percent(questions) -> None:
    assert grade_exam(questions, _answers(questions, 7)).passed is True
    failed = grade_exam(questions, _answers(questions, 6))
    assert failed.passed is False
    assert failed.correct_count == 6
    assert failed.percent_correct == pytest.approx(60.0)


def test_unanswered_questions_count_as_wrong(questions) -> None:
    grade = grade_exam(questions[:2], {questions[0].id: [questions[0].choices[0].id]})
    assert grade.correct_count == 1
    assert grade.snapshots[1]["selectedChoices"] == []
    assert grade.snapshots[1]["isCorrect"] is False


def test_unknown_question_is_rejected(questions) -> None:
    with pytest.raises(ValueError):
        grade_exam(questions[:1], {"missing": []})


def test_exam_detail_for_validates_mode() -> None:
    course = make_course()
    assert exam_detail_for(course, "quick").question_count == 2
    with pytest.raises(ValueError):
        exam_detail_for(course, "marathon")


def test_repository_round_trip(db_session, questions) -> None:
    course = make_course()
    repo = ExamRepository(db_session)
    grade = grade_exam(questions[:4], _answers(questions[:4], 3))

    stored = repo.save(course, "quick", grade, time_spent_seconds=95)
    assert stored.passed is True
    assert stored.percent_correct == pytest.approx(75.0)
    assert stored.course_name == course.full_name

    loaded = repo.get(stored.id)
    assert loaded is not None
    assert [item["question"] for item in loaded.questions] == ["Q1", "Q2", "Q3", "Q4"]
    assert [r.id for r in repo.list_results("SAA-C03")] == [stored.id]
    assert repo.list_results("OTHER") == []

    assert repo.delete(stored.id) is True
    assert repo.delete(stored.id) is False
    assert repo.get(stored.id) is None


def test_repository_reset(db_session, questions) -> None:
    repo = ExamRepository(db_session)
    grade = grade_exam(questions[:1], {})
    repo.save(make_course(), "quick", grade)
    repo.save(make_course(), "real", grade)
    assert repo.reset() == 2
    assert repo.list_results() == []
