"""Loading the question bank from its JSON file.

File format: a JSON array of objects, one per question, in display order:

    [
      {
        "id": 1,
        "question": "Which planet is known as the Red Planet?",
        "options": ["Venus", "Mars", "Jupiter", "Mercury"],
        "correctAnswer": 1
      }
    ]

``correctAnswer`` is an index into ``options``. Ids must be unique positive
integers but need not be contiguous or start at zero.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from quiz_session.constants.quiz_constants import MAX_OPTION_COUNT, MIN_OPTION_COUNT
from quiz_session.core.models import Question


class QuestionBankError(Exception):
    """Raised when the question bank cannot be loaded."""


def load_question_bank(file_path: Path) -> list[Question]:
    try:
        text = Path(file_path).read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionBankError(f"Could not read question bank {file_path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionBankError(f"Question bank {file_path} is not valid JSON: {exc}") from exc
    return parse_question_bank(data)


def parse_question_bank(data: Any) -> list[Question]:
    if not isinstance(data, list):
        raise QuestionBankError("Question bank must be a JSON array of questions.")
    if not data:
        raise QuestionBankError("Question bank did not contain any questions.")

    questions: list[Question] = []
    seen_ids: set[int] = set()
    for position, entry in enumerate(data):
        question = _parse_entry(entry, position)
        if question.id in seen_ids:
            raise QuestionBankError(f"Duplicate question id {question.id}.")
        seen_ids.add(question.id)
        questions.append(question)
    return questions


def _parse_entry(entry: Any, position: int) -> Question:
    if not isinstance(entry, dict):
        raise QuestionBankError(f"Entry {position} must be an object.")

    question_id = entry.get("id")
    if not _is_int(question_id) or question_id <= 0:
        raise QuestionBankError(f"Entry {position}: id must be a positive integer.")

    text = entry.get("question")
    if not isinstance(text, str) or not text.strip():
        raise QuestionBankError(f"Question {question_id}: question text must not be empty.")

    options = _validate_options(question_id, entry.get("options"))

    correct_answer = entry.get("correctAnswer")
    if not _is_int(correct_answer) or not 0 <= correct_answer < len(options):
        raise QuestionBankError(
            f"Question {question_id}: correctAnswer must be an index between 0 and {len(options) - 1}."
        )

    return Question(
        id=question_id,
        text=text.strip(),
        options=options,
        correct_answer=correct_answer,
    )


def _validate_options(question_id: int, options: Any) -> tuple[str, ...]:
    if not isinstance(options, list) or not MIN_OPTION_COUNT <= len(options) <= MAX_OPTION_COUNT:
        raise QuestionBankError(
            f"Question {question_id}: options must be a list of "
            f"{MIN_OPTION_COUNT} to {MAX_OPTION_COUNT} strings."
        )
    if any(not isinstance(option, str) for option in options):
        raise QuestionBankError(f"Question {question_id}: every option must be a string.")
    cleaned = tuple(option.strip() for option in options)
    if any(not option for option in cleaned):
        raise QuestionBankError(f"Question {question_id}: option text cannot be empty.")
    return cleaned


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid id or index
    return isinstance(value, int) and not isinstance(value, bool)
