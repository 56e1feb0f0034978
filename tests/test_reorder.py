from models import Choice, PerformanceRecord, Question
from api.services.reorder_service import PerformanceGroup, classify, reorder_questions


def _question(qid: str) -> Question:
    return Question(id=qid, text=qid, choices=[Choice(id=f"{qid}-1", text="x", is_correct=True)])


def test_unseen_then_struggling_then_mastered() -> None:
    a, b, c, d = (_question(name) for name in "ABCD")
    performance = {
        "B": PerformanceRecord(times_viewed=3, times_correct=1, times_incorrect=2),
        "C": PerformanceRecord(times_viewed=4, times_correct=3, times_incorrect=1),
    }
    assert [q.id for q in reorder_questions([a, b, c, d], performance)] == ["A", "D", "B", "C"]


def test_ties_count_as_mastered() -> None:
    assert classify(PerformanceRecord(times_viewed=2, times_correct=1, times_incorrect=1)) == PerformanceGroup.MASTERED
    assert classify(PerformanceRecord()) == PerformanceGroup.MASTERED
    assert classify(None) == PerformanceGroup.UNSEEN


def test_order_is_stable_within_groups() -> None:
    questions = [_question(name) for name in "PQRSTU"]
    struggling = PerformanceRecord(times_viewed=1, times_incorrect=1)
    mastered = PerformanceRecord(times_viewed=1, times_correct=1)
    performance = {"P": mastered, "Q": struggling, "S": mastered, "U": struggling}

    ordered = reorder_questions(questions, performance)
    assert [q.id for q in ordered] == ["R", "T", "Q", "U", "P", "S"]
    assert [q.id for q in questions] == list("PQRSTU")


def test_empty_history_keeps_input_order() -> None:
    questions = [_question(name) for name in "XYZ"]
    assert reorder_questions(questions, {}) == questions
