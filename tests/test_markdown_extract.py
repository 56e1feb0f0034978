import pytest

from errors import EmptyResultError
from markdown_extract import MarkdownQuestionExtractor, parse_markdown
from serialization import deserialize_question_set, serialize_question_set

SAMPLE = """\
# Practice questions

- [x] Stray checkbox before any question

### Which service provides object storage?

- [x] Amazon S3
- [ ] Amazon EBS
- [ ] Amazon EFS

### Which TWO services are serverless? (Choose two.)

![diagram](images/serverless.png)

- [x] AWS Lambda
- [x] AWS Fargate
- [ ] Amazon EC2

### Question with no choices at all

Some explanation text.

### Question where nothing is marked correct

- [ ] First
- [ ] Second

### Which THREE are regions? (Choose three.)

![Join us](images/discord-banner.png)
![map](images/map.png) and ![promo](images/promotional/sale.png) ![zones](images/zones.png)

- [x] us-east-1
- [x] eu-west-1
- [x] ap-south-1
- [ ] us-east-1a
"""


def test_parse_keeps_only_complete_blocks() -> None:
    extractor = MarkdownQuestionExtractor("SAA-C03")
    questions = extractor.extract(SAMPLE)

    assert [q.text for q in questions] == [
        "Which service provides object storage?",
        "Which TWO services are serverless? (Choose two.)",
        "Which THREE are regions? (Choose three.)",
    ]
    assert extractor.skipped == 2
    assert [choice.text for choice in questions[0].choices] == [
        "Amazon S3",
        "Amazon EBS",
        "Amazon EFS",
    ]
    assert [choice.is_correct for choice in questions[0].choices] == [True, False, False]


def test_multiple_response_detection() -> None:
    single, double, triple = parse_markdown(SAMPLE, "SAA-C03")

    assert single.is_multiple_response is False
    assert single.required_selection_count == 1
    assert double.is_multiple_response is True
    assert double.required_selection_count == 2
    assert triple.is_multiple_response is True
    assert triple.required_selection_count == 3


def test_image_filtering_keeps_source_order() -> None:
    single, double, triple = parse_markdown(SAMPLE, "SAA-C03")

    assert single.images == []
    assert [image.path for image in double.images] == ["images/SAA-C03/images/serverless.png"]
    assert [image.path for image in triple.images] == [
        "images/SAA-C03/images/map.png",
        "images/SAA-C03/images/zones.png",
    ]
    assert all(not image.downloaded and image.url is None for image in triple.images)


def test_image_path_with_spaces_is_kept() -> None:
    markdown = "### Q\n![a](images/my pic.png)\n- [x] A\n- [ ] B\n"
    (question,) = parse_markdown(markdown, "SAA-C03")
    assert [image.path for image in question.images] == ["images/SAA-C03/images/my pic.png"]


@pytest.mark.parametrize("markdown", ["","# Title\n\nJust prose.\n", "- [x] orphan choice\n"])
def test_empty_input_raises(markdown: str) -> None:
    with pytest.raises(EmptyResultError) as excinfo:
        parse_markdown(markdown, "AZ-900")
    assert str(excinfo.value).startswith("AZ-900")
    assert "Course has no questions" in excinfo.value.message


def test_ids_are_stable_across_parses() -> None:
    first = parse_markdown(SAMPLE, "SAA-C03")
    second = parse_markdown(SAMPLE.replace("\n", "\r\n"), "SAA-C03")

    assert [q.id for q in first] == [q.id for q in second]
    assert [[c.id for c in q.choices] for q in first] == [[c.id for c in q.choices] for q in second]
    assert len({q.id for q in first}) == len(first)
    assert all(len(q.id) == 16 for q in first)


def test_duplicate_questions_get_suffixed_ids() -> None:
    block = "### Same?\n- [x] Yes\n- [ ] No\n"
    questions = parse_markdown(block + block + block, "SAA-C03")

    base = questions[0].id
    assert [q.id for q in questions] == [base, f"{base}-2", f"{base}-3"]


def test_round_trip_preserves_content() -> None:
    questions = parse_markdown(SAMPLE, "SAA-C03")
    reloaded = deserialize_question_set(serialize_question_set(questions))

    assert len(reloaded) == len(questions)
    for original, loaded in zip(questions, reloaded):
        assert loaded.text == original.text
        assert [(c.text, c.is_correct) for c in loaded.choices] == [
            (c.text, c.is_correct) for c in original.choices
        ]
        assert loaded.is_multiple_response == original.is_multiple_response
        assert loaded.required_selection_count == original.required_selection_count
        assert [i.path for i in loaded.images] == [i.path for i in original.images]
