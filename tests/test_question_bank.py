from __future__ import annotations

import json

import pytest

from quiz_session.constants.quiz_constants import DEFAULT_QUESTION_BANK_PATH
from quiz_session.core.question_bank import QuestionBankError, load_question_bank, parse_question_bank


def _entry(**overrides):
    entry = {"id": 1, "question": "Q?", "options": ["a", "b", "c"], "correctAnswer": 0}
    entry.update(overrides)
    return entry


def test_bundled_bank_loads():
    questions = load_question_bank(DEFAULT_QUESTION_BANK_PATH)
    assert [q.id for q in questions] == [1, 2, 3, 4, 5, 7]
    assert all(2 <= len(q.options) <= 5 for q in questions)
    assert all(0 <= q.correct_answer < len(q.options) for q in questions)


def test_entries_are_normalized():
    (question,) = parse_question_bank([_entry(question="  Q?  ", options=[" x ", "y"], correctAnswer=1)])
    assert question.text == "Q?"
    assert question.options == ("x", "y")
    assert question.correct_answer == 1


@pytest.mark.parametrize(
    "data",
    [
        {},
        [],
        ["not an object"],
        [_entry(id=0)],
        [_entry(id=True)],
        [_entry(id="1")],
        [_entry(question="   ")],
        [_entry(options=["only"])],
        [_entry(options=["a", "b", "c", "d", "e", "f"])],
        [_entry(options=["a", 2])],
        [_entry(options=["a", " "])],
        [_entry(correctAnswer=3)],
        [_entry(correctAnswer=-1)],
        [_entry(correctAnswer=None)],
        [_entry(), _entry()],
    ],
)
def test_invalid_banks_are_rejected(data):
    with pytest.raises(QuestionBankError):
        parse_question_bank(data)


def test_unreadable_files_are_rejected(tmp_path):
    with pytest.raises(QuestionBankError):
        load_question_bank(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")
    with pytest.raises(QuestionBankError):
        load_question_bank(broken)

    good = tmp_path / "good.json"
    good.write_text(json.dumps([_entry(id=9)]), encoding="utf-8")
    assert load_question_bank(good)[0].id == 9
