"""Application entry point for the QuizSession client."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from quiz_session.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_session.constants.quiz_constants import DEFAULT_QUESTION_BANK_PATH, DEFAULT_STORAGE_PATH
from quiz_session.core.question_bank import load_question_bank
from quiz_session.core.services.durable_store import JsonFileStore
from quiz_session.core.session_context import session_scope
from quiz_session.core.session_store import SessionStore
from quiz_session.server.api_server import start_api_server
from quiz_session.ui.quiz_window import QuizWindow
from quiz_session.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, restore the session, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting QuizSession…")

    questions = load_question_bank(DEFAULT_QUESTION_BANK_PATH)
    storage = JsonFileStore(DEFAULT_STORAGE_PATH)
    store = SessionStore(questions, storage)
    logger.info(
        "Loaded %d questions; session storage at %s",
        len(questions),
        storage.file_path,
    )

    start_api_server(store=store, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Session API available at http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)

    app = QApplication(sys.argv)
    with session_scope(store):
        window = QuizWindow()
        window.show()
        exit_code = app.exec()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
