from __future__ import annotations

from datetime import datetime, timezone
import json

import pytest

from quiz_session.core.models import AnswerRecord, SessionState
from quiz_session.core.session_codec import (
    decode_identity,
    decode_state,
    encode_identity,
    encode_state,
    load_or_default,
)

MISSING = object()


def _state(**overrides) -> SessionState:
    values = dict(
        current_question=1,
        answers=(AnswerRecord(4, 2), AnswerRecord(9), AnswerRecord(12, 0)),
        time_remaining_ms=73_250,
        is_completed=False,
        start_time=datetime(2026, 3, 1, 8, 15, 30, 123456, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return SessionState(**values)


def test_encoded_state_uses_browser_field_names():
    blob = json.loads(encode_state(_state()))
    assert blob["currentQuestion"] == 1
    assert blob["timeRemaining"] == 73_250
    assert blob["isCompleted"] is False
    assert blob["answers"][0] == {"questionId": 4, "selectedAnswer": 2, "isAnswered": True}
    assert blob["answers"][1] == {"questionId": 9, "selectedAnswer": None, "isAnswered": False}


def test_decode_inverts_encode():
    state = _state()
    assert decode_state(encode_state(state)) == state


def test_is_answered_is_rederived():
    raw = json.dumps(
        {
            "currentQuestion": 0,
            "answers": [{"questionId": 1, "selectedAnswer": None, "isAnswered": True}],
            "timeRemaining": 10,
            "isCompleted": False,
            "startTime": "2026-03-01T08:00:00Z",
        }
    )
    state = decode_state(raw)
    assert state is not None
    assert not state.answers[0].is_answered


def test_epoch_millisecond_start_time_is_accepted():
    raw = json.dumps(
        {
            "currentQuestion": 0,
            "answers": [{"questionId": 1, "selectedAnswer": 1, "isAnswered": True}],
            "timeRemaining": 5_400_000,
            "isCompleted": False,
            "startTime": 1767225600000,
        }
    )
    state = decode_state(raw)
    assert state is not None
    assert state.start_time == datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("start_time", [MISSING, None, "", 0])
def test_missing_start_time_uses_now(start_time):
    moment = datetime(2030, 5, 5, tzinfo=timezone.utc)
    blob = {"currentQuestion": 0, "answers": [], "timeRemaining": 0}
    if start_time is not MISSING:
        blob["startTime"] = start_time
    raw = json.dumps(blob)
    state = decode_state(raw, now=lambda: moment)
    assert state is not None
    assert state.start_time == moment
    assert not state.is_completed


def test_invalid_blobs_decode_to_none():
    assert decode_state("") is None
    assert decode_state("null") is None
    assert decode_state('{"currentQuestion": 0}') is None
    assert decode_state(json.dumps({"currentQuestion": 0, "answers": [], "timeRemaining": -1})) is None
    assert decode_state(json.dumps({"currentQuestion": 0, "answers": [{}], "timeRemaining": 1})) is None


def test_identity_codec():
    identity = {"name": "Rina", "class": "XII IPA 2"}
    assert decode_identity(encode_identity(identity)) == identity
    assert decode_identity("[1, 2]") is None
    assert decode_identity("not json") is None


def test_load_or_default():
    assert load_or_default(None, int, lambda: -1) == -1
    assert load_or_default("x", lambda raw: None, lambda: -1) == -1
    assert load_or_default("7", int, lambda: -1) == 7
