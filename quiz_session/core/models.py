"""Domain models for the quiz session client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

Identity = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question loaded from the question bank.

    ``options`` is the authoritative order; positions in it are the
    original indices that answers are stored and scored against.
    """

    id: int
    text: str
    options: tuple[str, ...]
    correct_answer: int


@dataclass(frozen=True, slots=True)
class AnswerRecord:
    """The user's current answer for one question."""

    question_id: int
    selected_answer: int | None = None

    @property
    def is_answered(self) -> bool:
        return self.selected_answer is not None


@dataclass(frozen=True, slots=True)
class SessionState:
    """Snapshot of a quiz attempt. Replaced as a whole on every change."""

    current_question: int
    answers: tuple[AnswerRecord, ...]
    time_remaining_ms: int
    is_completed: bool
    start_time: datetime


@dataclass(frozen=True, slots=True)
class ShuffledOption:
    """An option as shown to the user, remembering where it came from."""

    original_index: int
    value: str


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Everything a client needs about the session, read under one lock."""

    state: SessionState
    is_started: bool
    was_previously_completed: bool
    unanswered_positions: tuple[int, ...]
    score: int
    identity: Identity | None
