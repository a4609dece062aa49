"""Scoped access to the active session store.

The entry point wraps the UI in ``session_scope(store)``; widgets that were
not handed a store explicitly look it up with :func:`current_session`.
Looking it up outside a scope is a wiring mistake and fails immediately.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from quiz_session.core.session_store import SessionStore

_active_store: ContextVar[SessionStore | None] = ContextVar("quiz_session_store", default=None)


class SessionScopeError(RuntimeError):
    """Raised when the session store is requested outside ``session_scope``."""


@contextmanager
def session_scope(store: SessionStore) -> Iterator[SessionStore]:
    token = _active_store.set(store)
    try:
        yield store
    finally:
        _active_store.reset(token)


def current_session() -> SessionStore:
    store = _active_store.get()
    if store is None:
        raise SessionScopeError("current_session() must be called inside session_scope()")
    return store
