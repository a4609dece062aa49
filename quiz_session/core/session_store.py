"""Owner of the quiz attempt: lifecycle, navigation, timer, scoring and persistence."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timezone
import logging
from threading import Lock

from quiz_session.constants.quiz_constants import (
    COMPLETED_STORAGE_KEY,
    FLAG_TRUE,
    QUIZ_DURATION_MS,
    STARTED_STORAGE_KEY,
    STATE_STORAGE_KEY,
    USER_STORAGE_KEY,
)
from quiz_session.core.models import AnswerRecord, Identity, Question, SessionSnapshot, SessionState
from quiz_session.core.services.durable_store import DurableStore
from quiz_session.core.session_codec import (
    decode_identity,
    decode_state,
    encode_identity,
    encode_state,
    load_or_default,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Single writer of the session state shared by the UI and the local API.

    Lifecycle is ``not started -> in progress -> completed``; only
    :meth:`reset_session` leaves the completed state. Every change swaps in a
    new :class:`SessionState`, and the in-progress state is written back to
    ``storage`` only while the session is started and not completed. Storage
    is read once, here in the constructor.

    Invalid input (unknown question ids, out-of-range positions) is ignored
    rather than raised so the person taking the quiz is never interrupted.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        storage: DurableStore,
        duration_ms: int = QUIZ_DURATION_MS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not questions:
            raise ValueError("Quiz must contain at least one question.")
        self._lock = Lock()
        self._questions: tuple[Question, ...] = tuple(questions)
        self._questions_by_id: dict[int, Question] = {q.id: q for q in self._questions}
        self._storage = storage
        self._duration_ms = duration_ms
        self._clock = clock or _utcnow

        raw_state = self._storage.get(STATE_STORAGE_KEY)
        restored = self._decode_matching_state(raw_state) if raw_state is not None else None
        self._resumed = restored is not None
        self._state = restored or self._fresh_state()

        self._identity: Identity | None = load_or_default(
            self._storage.get(USER_STORAGE_KEY),
            decode_identity,
            lambda: None,
        )
        self._started = self._storage.get(STARTED_STORAGE_KEY) == FLAG_TRUE
        self._previously_completed = self._storage.get(COMPLETED_STORAGE_KEY) == FLAG_TRUE

    # --- Read surface ---

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def current_position(self) -> int:
        with self._lock:
            return self._state.current_question

    @property
    def current_question(self) -> Question:
        with self._lock:
            return self._questions[self._state.current_question]

    @property
    def answers(self) -> tuple[AnswerRecord, ...]:
        with self._lock:
            return self._state.answers

    @property
    def time_remaining_ms(self) -> int:
        with self._lock:
            return self._state.time_remaining_ms

    @property
    def start_time(self) -> datetime:
        with self._lock:
            return self._state.start_time

    @property
    def is_completed(self) -> bool:
        with self._lock:
            return self._state.is_completed

    @property
    def is_started(self) -> bool:
        with self._lock:
            return self._started

    @property
    def resumed_from_storage(self) -> bool:
        """True when construction adopted a persisted in-progress state."""
        return self._resumed

    @property
    def was_previously_completed(self) -> bool:
        """True when storage says an attempt was submitted and not reset since."""
        with self._lock:
            return self._previously_completed

    @property
    def identity(self) -> Identity | None:
        with self._lock:
            return self._identity

    @identity.setter
    def identity(self, identity: Identity | None) -> None:
        with self._lock:
            self._identity = identity
            if identity is None:
                self._storage.remove(USER_STORAGE_KEY)
            else:
                self._storage.set(USER_STORAGE_KEY, encode_identity(identity))

    def answer_for(self, question_id: int) -> AnswerRecord | None:
        with self._lock:
            return next((a for a in self._state.answers if a.question_id == question_id), None)

    def unanswered_positions(self) -> list[int]:
        with self._lock:
            return self._unanswered_positions()

    def score(self) -> int:
        """Number of correct answers; always 0 until the session is submitted."""
        with self._lock:
            return self._score()

    def snapshot(self) -> SessionSnapshot:
        """Read the state, flags, identity and derived values in one locked step."""
        with self._lock:
            return SessionSnapshot(
                state=self._state,
                is_started=self._started,
                was_previously_completed=self._previously_completed,
                unanswered_positions=tuple(self._unanswered_positions()),
                score=self._score(),
                identity=self._identity,
            )

    # --- Lifecycle ---

    def start_session(self) -> None:
        """Mark the session as started and, unless already submitted, begin a fresh attempt.

        Starting always discards in-flight answers and restarts the timer,
        even when a persisted in-progress attempt was restored at boot.
        """
        with self._lock:
            self._started = True
            self._storage.set(STARTED_STORAGE_KEY, FLAG_TRUE)
            if self._state.is_completed:
                logger.info("Start requested for a completed session; keeping results")
                return
            self._commit(
                replace(
                    self._state,
                    answers=self._fresh_answers(),
                    start_time=self._clock(),
                    time_remaining_ms=self._duration_ms,
                )
            )
            logger.info("Quiz session started with %d questions", len(self._questions))

    def submit_session(self) -> None:
        with self._lock:
            if not self._state.is_completed:
                self._state = replace(self._state, is_completed=True)
                logger.info(
                    "Quiz session submitted with %d ms remaining",
                    self._state.time_remaining_ms,
                )
            self._previously_completed = True
            self._storage.set(COMPLETED_STORAGE_KEY, FLAG_TRUE)
            self._storage.remove(STATE_STORAGE_KEY)

    def reset_session(self) -> None:
        """Discard the attempt and the identity, and wipe every stored key."""
        with self._lock:
            self._state = self._fresh_state()
            self._started = False
            self._previously_completed = False
            self._identity = None
            for key in (STATE_STORAGE_KEY, STARTED_STORAGE_KEY, COMPLETED_STORAGE_KEY, USER_STORAGE_KEY):
                self._storage.remove(key)
            logger.info("Quiz session reset")

    # --- Answers ---

    def record_answer(self, question_id: int, selected_answer: int | None) -> None:
        """Store ``selected_answer`` (an original option index) for ``question_id``.

        ``None`` clears the answer. Unknown ids are ignored.
        """
        with self._lock:
            answers = self._state.answers
            index = next((i for i, a in enumerate(answers) if a.question_id == question_id), None)
            if index is None:
                logger.debug("Ignoring answer for unknown question id %s", question_id)
                return
            record = replace(answers[index], selected_answer=selected_answer)
            self._commit(replace(self._state, answers=answers[:index] + (record,) + answers[index + 1:]))

    # --- Navigation ---

    def go_to(self, position: int) -> None:
        with self._lock:
            if 0 <= position < len(self._questions):
                self._commit(replace(self._state, current_question=position))

    def advance(self) -> None:
        with self._lock:
            self._move_by(1)

    def retreat(self) -> None:
        with self._lock:
            self._move_by(-1)

    def skip(self) -> None:
        """Move forward unless the current question is the last one."""
        with self._lock:
            if self._state.current_question < len(self._questions) - 1:
                self._move_by(1)

    # --- Timer ---

    def tick(self, time_remaining_ms: int) -> None:
        """Record the remaining time; ignored once the session is completed."""
        with self._lock:
            if self._state.is_completed:
                return
            self._commit(replace(self._state, time_remaining_ms=max(0, int(time_remaining_ms))))

    # --- Internal helpers (callers hold the lock) ---

    def _unanswered_positions(self) -> list[int]:
        return [
            position
            for position, record in enumerate(self._state.answers)
            if not record.is_answered
        ]

    def _score(self) -> int:
        if not self._state.is_completed:
            return 0
        correct = 0
        for record in self._state.answers:
            question = self._questions_by_id.get(record.question_id)
            if question is not None and record.selected_answer == question.correct_answer:
                correct += 1
        return correct

    def _move_by(self, step: int) -> None:
        last = len(self._questions) - 1
        position = min(max(self._state.current_question + step, 0), last)
        self._commit(replace(self._state, current_question=position))

    def _commit(self, state: SessionState) -> None:
        self._state = state
        if self._started and not state.is_completed:
            self._storage.set(STATE_STORAGE_KEY, encode_state(state))

    def _fresh_answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(AnswerRecord(question_id=q.id) for q in self._questions)

    def _fresh_state(self) -> SessionState:
        return SessionState(
            current_question=0,
            answers=self._fresh_answers(),
            time_remaining_ms=self._duration_ms,
            is_completed=False,
            start_time=self._clock(),
        )

    def _decode_matching_state(self, raw: str) -> SessionState | None:
        state = decode_state(raw, now=self._clock)
        if state is None:
            return None
        if len(state.answers) != len(self._questions):
            logger.info(
                "Stored session has %d answers for %d questions; starting fresh",
                len(state.answers),
                len(self._questions),
            )
            return None
        if state.current_question >= len(self._questions):
            logger.warning("Stored session position %d is out of range; starting fresh", state.current_question)
            return None
        return state
