from __future__ import annotations

from PySide6.QtCore import QCoreApplication
import pytest

from quiz_session.ui.countdown_timer import CountdownTimer


class MonotonicStub:
    def __init__(self) -> None:
        self.value = 1_000.0

    def __call__(self) -> float:
        return self.value


@pytest.fixture(scope="session")
def qt_app():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def monotonic() -> MonotonicStub:
    return MonotonicStub()


def test_ticks_push_remaining_time_into_store(qt_app, store, monotonic):
    store.start_session()
    timer = CountdownTimer(store, clock=monotonic)
    ticks: list[int] = []
    timer.ticked.connect(ticks.append)

    timer.start()
    monotonic.value += 12.5
    timer._handle_timeout()

    assert store.time_remaining_ms == store.duration_ms - 12_500
    assert ticks == [store.duration_ms - 12_500]
    assert timer.is_running()
    timer.stop()


def test_restored_session_continues_from_stored_time(qt_app, store, monotonic):
    store.start_session()
    store.tick(5_000)
    timer = CountdownTimer(store, clock=monotonic)
    timer.start()
    monotonic.value += 2
    timer._handle_timeout()
    assert store.time_remaining_ms == 3_000
    timer.stop()


def test_expiry_emits_once_and_stops(qt_app, store, monotonic):
    store.start_session()
    store.tick(1_000)
    timer = CountdownTimer(store, clock=monotonic)
    expired: list[bool] = []
    timer.expired.connect(lambda: expired.append(True))

    timer.start()
    monotonic.value += 3
    timer._handle_timeout()
    timer._handle_timeout()

    assert store.time_remaining_ms == 0
    assert expired == [True]
    assert not timer.is_running()


def test_completed_session_is_not_ticked(qt_app, store, monotonic):
    store.start_session()
    store.tick(20_000)
    timer = CountdownTimer(store, clock=monotonic)
    timer.start()
    store.submit_session()

    monotonic.value += 5
    timer._handle_timeout()
    assert store.time_remaining_ms == 20_000
    assert not timer.is_running()
