"""FastAPI server that exposes the session store to local clients."""

from __future__ import annotations

from threading import Lock, Thread
from typing import Any, Literal

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from quiz_session.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_session.core.option_presenter import OptionPresenter, option_label
from quiz_session.core.session_store import SessionStore


class AnswerPayload(BaseModel):
    """Payload schema for a selection, given as the position the option was shown at."""

    display_index: int


class NavigatePayload(BaseModel):
    action: Literal["next", "previous", "skip"]


class GoToPayload(BaseModel):
    position: int


class TickPayload(BaseModel):
    time_remaining_ms: int


class IdentityPayload(BaseModel):
    """Opaque profile the session is attached to."""

    identity: dict[str, Any]


def _get_session_store_dependency(store: SessionStore):
    def dependency() -> SessionStore:
        return store

    return dependency


def _session_snapshot(store: SessionStore, include_score: bool = False) -> dict[str, object]:
    snapshot = store.snapshot()
    state = snapshot.state
    body: dict[str, object] = {
        "started": snapshot.is_started,
        "completed": state.is_completed,
        "previously_completed": snapshot.was_previously_completed,
        "current_position": state.current_question,
        "question_count": store.question_count,
        "time_remaining_ms": state.time_remaining_ms,
        "start_time": state.start_time.isoformat(),
        "unanswered_positions": list(snapshot.unanswered_positions),
        "identity": snapshot.identity,
    }
    if include_score:
        body["score"] = snapshot.score
    return body


def create_api_app(store: SessionStore) -> FastAPI:
    """Create a FastAPI application wired to the provided session store."""
    app = FastAPI(title="QuizSession API", version="0.1.0")
    store_dep = _get_session_store_dependency(store)
    presenter = OptionPresenter(store)
    presenter_lock = Lock()

    def present_current_question(session: SessionStore) -> dict[str, object]:
        question = session.current_question
        options = presenter.show(question)
        selected = presenter.selected_display_index()
        return {
            "question_id": question.id,
            "position": session.current_position,
            "progress": presenter.progress_text(),
            "text": question.text,
            "options": [
                {"label": option_label(index), "value": option.value}
                for index, option in enumerate(options)
            ],
            "selected_display_index": selected,
        }

    @app.get("/session")
    def get_session(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        return _session_snapshot(session)

    @app.get("/question")
    def get_question(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        with presenter_lock:
            return present_current_question(session)

    @app.post("/answer", status_code=201)
    def submit_answer(
        payload: AnswerPayload,
        session: SessionStore = Depends(store_dep),
    ) -> dict[str, object]:
        with presenter_lock:
            presenter.show(session.current_question)
            try:
                presenter.select(payload.display_index)
            except ValueError as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
            return present_current_question(session)

    @app.delete("/answer")
    def clear_answer(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        with presenter_lock:
            presenter.show(session.current_question)
            presenter.clear_selection()
            return present_current_question(session)

    @app.post("/navigate")
    def navigate(
        payload: NavigatePayload,
        session: SessionStore = Depends(store_dep),
    ) -> dict[str, object]:
        if payload.action == "next":
            session.advance()
        elif payload.action == "previous":
            session.retreat()
        else:
            session.skip()
        return _session_snapshot(session)

    @app.post("/goto")
    def go_to(payload: GoToPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        session.go_to(payload.position)
        return _session_snapshot(session)

    @app.post("/start")
    def start(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        session.start_session()
        return _session_snapshot(session)

    @app.post("/submit")
    def submit(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        session.submit_session()
        return _session_snapshot(session, include_score=True)

    @app.post("/reset")
    def reset(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        session.reset_session()
        return _session_snapshot(session)

    @app.post("/tick")
    def tick(payload: TickPayload, session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        session.tick(payload.time_remaining_ms)
        return _session_snapshot(session)

    @app.get("/score")
    def get_score(session: SessionStore = Depends(store_dep)) -> dict[str, object]:
        snapshot = session.snapshot()
        return {
            "completed": snapshot.state.is_completed,
            "score": snapshot.score,
            "question_count": session.question_count,
        }

    @app.put("/identity")
    def set_identity(
        payload: IdentityPayload,
        session: SessionStore = Depends(store_dep),
    ) -> dict[str, object]:
        session.identity = payload.identity
        return {"identity": session.identity}

    return app


def start_api_server(
    store: SessionStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizSessionApiServer", daemon=True)
    thread.start()
    return thread
