"""JSON encoding of persisted session data.

The stored blob keeps the camelCase field names used by the browser
client (``currentQuestion``, ``timeRemaining`` in milliseconds, ...), so a
storage file written by either client can be read by the other. Decoding
never raises: anything that does not validate is reported as ``None`` and
the caller falls back to a fresh default.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
import json
import logging
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from quiz_session.core.models import AnswerRecord, Identity, SessionState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _AnswerPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: int = Field(alias="questionId")
    selected_answer: int | None = Field(default=None, alias="selectedAnswer")
    is_answered: bool = Field(default=False, alias="isAnswered")


class _StatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_question: int = Field(alias="currentQuestion", ge=0)
    answers: list[_AnswerPayload]
    time_remaining: int = Field(alias="timeRemaining", ge=0)
    is_completed: bool = Field(default=False, alias="isCompleted")
    start_time: datetime | None = Field(default=None, alias="startTime")

    @field_validator("start_time", mode="before")
    @classmethod
    def _blank_start_time_is_missing(cls, value: object) -> object:
        # The browser client reads `startTime || Date.now()`, so 0 and "" mean unset.
        return value or None


def encode_state(state: SessionState) -> str:
    payload = _StatePayload(
        current_question=state.current_question,
        answers=[
            _AnswerPayload(
                question_id=record.question_id,
                selected_answer=record.selected_answer,
                is_answered=record.is_answered,
            )
            for record in state.answers
        ],
        time_remaining=state.time_remaining_ms,
        is_completed=state.is_completed,
        start_time=state.start_time,
    )
    return payload.model_dump_json(by_alias=True)


def decode_state(raw: str, now: Callable[[], datetime] | None = None) -> SessionState | None:
    """Parse a stored session blob, or return ``None`` if it is unusable.

    A blob whose ``startTime`` is absent or empty (``null``, ``""``, ``0``)
    is accepted and stamped with ``now()``.
    """
    try:
        payload = _StatePayload.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("Discarding malformed session state: %s", exc.errors(include_url=False))
        return None

    start_time = payload.start_time
    if start_time is None:
        start_time = (now or _utcnow)()
    elif start_time.tzinfo is None:
        start_time = start_time.replace(tzinfo=timezone.utc)

    return SessionState(
        current_question=payload.current_question,
        # isAnswered is derived, the stored flag is not trusted.
        answers=tuple(
            AnswerRecord(question_id=answer.question_id, selected_answer=answer.selected_answer)
            for answer in payload.answers
        ),
        time_remaining_ms=payload.time_remaining,
        is_completed=payload.is_completed,
        start_time=start_time,
    )


def encode_identity(identity: Identity) -> str:
    return json.dumps(identity, ensure_ascii=False)


def decode_identity(raw: str) -> Identity | None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Discarding malformed identity record: %s", exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Discarding identity record: expected a JSON object")
        return None
    return data


def load_or_default(raw: str | None, decoder: Callable[[str], T | None], default: Callable[[], T]) -> T:
    """Decode ``raw`` with ``decoder``; absent or undecodable values yield ``default()``."""
    if raw is None:
        return default()
    decoded = decoder(raw)
    if decoded is None:
        return default()
    return decoded


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
