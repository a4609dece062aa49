from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from quiz_session.core.models import Question
from quiz_session.core.services.durable_store import InMemoryStore
from quiz_session.core.session_store import SessionStore

DURATION_MS = 60_000


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def questions() -> list[Question]:
    return [
        Question(id=1, text="First?", options=("a", "b", "c", "d"), correct_answer=0),
        Question(id=2, text="Second?", options=("e", "f", "g", "h"), correct_answer=2),
        Question(id=3, text="Third?", options=("i", "j", "k", "l"), correct_answer=1),
    ]


@pytest.fixture
def storage() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def make_store(questions, storage, clock):
    def factory(bank=None, backing=None) -> SessionStore:
        return SessionStore(
            bank if bank is not None else questions,
            backing if backing is not None else storage,
            duration_ms=DURATION_MS,
            clock=clock,
        )

    return factory


@pytest.fixture
def store(make_store) -> SessionStore:
    return make_store()
