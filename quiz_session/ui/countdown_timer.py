"""Qt timer that counts the session down and feeds the store."""

from __future__ import annotations

from collections.abc import Callable
import time

from PySide6.QtCore import QObject, QTimer, Signal

from quiz_session.constants.ui_constants import TIMER_INTERVAL_MS
from quiz_session.core.session_store import SessionStore


class CountdownTimer(QObject):
    """Periodically pushes the remaining time into the store.

    The deadline is taken from the store's remaining time when the timer
    starts, so a restored session continues where it was left.
    """

    ticked = Signal(int)
    expired = Signal()

    def __init__(
        self,
        store: SessionStore,
        interval_ms: int = TIMER_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._clock = clock
        self._deadline: float | None = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._handle_timeout)

    def start(self) -> None:
        self._deadline = self._clock() + self._store.time_remaining_ms / 1000
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._deadline = None

    def is_running(self) -> bool:
        return self._deadline is not None

    def _handle_timeout(self) -> None:
        if self._deadline is None or self._store.is_completed:
            self.stop()
            return
        remaining_ms = max(0, round((self._deadline - self._clock()) * 1000))
        self._store.tick(remaining_ms)
        self.ticked.emit(remaining_ms)
        if remaining_ms == 0:
            self.stop()
            self.expired.emit()
