import pytest

from markdown_extract import parse_markdown
from serialization import deserialize_question_set, serialize_question, serialize_question_set

MARKDOWN = """\
### Pick one
- [x] right
- [ ] wrong

### Pick two
![x](images/x.png)
- [x] a
- [x] b
- [ ] c
"""


def test_single_response_omits_multiple_fields() -> None:
    single = parse_markdown(MARKDOWN, "C")[0]
    payload = serialize_question(single)

    assert payload == {
        "question": "Pick one",
        "choices": [
            {"text": "right", "correct": True},
            {"text": "wrong", "correct": False},
        ],
        "images": [],
    }


def test_multiple_response_fields_and_images() -> None:
    double = parse_markdown(MARKDOWN, "C")[1]
    payload = serialize_question(double)

    assert payload["multiple_response"] is True
    assert payload["response_count"] == 2
    assert payload["images"] == [{"path": "images/C/images/x.png", "url": None, "downloaded": False}]


def test_deserialize_recomputes_same_ids() -> None:
    questions = parse_markdown(MARKDOWN, "C")
    reloaded = deserialize_question_set(serialize_question_set(questions))
    assert [q.id for q in reloaded] == [q.id for q in questions]
    assert [q.correct_choice_ids for q in reloaded] == [q.correct_choice_ids for q in questions]


def test_deserialize_skips_malformed_entries() -> None:
    payload = [
        "not an object",
        {"choices": []},
        {"question": "Kept", "choices": [{"text": "a", "correct": True}, 5], "images": [{"url": "x"}]},
    ]
    questions = deserialize_question_set(payload)
    assert len(questions) == 1
    assert questions[0].text == "Kept"
    assert [c.text for c in questions[0].choices] == ["a"]
    assert questions[0].images == []


def test_deserialize_skips_null_or_non_list_fields() -> None:
    payload = [
        {"question": "Null choices", "choices": None, "images": []},
        {"question": "String choices", "choices": "a,b"},
        {"question": "Bad images", "choices": [{"text": "a", "correct": True}], "images": 5},
        {"question": "Kept", "choices": [{"text": "a", "correct": True}], "images": None},
    ]
    questions = deserialize_question_set(payload)
    assert [q.text for q in questions] == ["Kept"]
    assert questions[0].images == []


def test_deserialize_rejects_non_list() -> None:
    with pytest.raises(ValueError):
        deserialize_question_set({"question": "x"})
