"""Qt main window for taking a quiz: start, answer, submit, review the score."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quiz_session.constants.ui_constants import (
    ALL_ANSWERED_MESSAGE,
    CLEAR_BUTTON,
    NAME_PLACEHOLDER,
    NEXT_BUTTON,
    PREVIOUS_ATTEMPT_MESSAGE,
    PREVIOUS_BUTTON,
    RESET_BUTTON,
    RESULT_TEMPLATE,
    SKIP_BUTTON,
    START_BUTTON,
    START_PAGE_DESCRIPTION,
    SUBMIT_BUTTON,
    TIME_REMAINING_TEMPLATE,
    TIME_UP_MESSAGE,
    UNANSWERED_TEMPLATE,
    WINDOW_TITLE,
)
from quiz_session.core.option_presenter import OptionPresenter, option_label
from quiz_session.core.session_context import current_session
from quiz_session.core.session_store import SessionStore
from quiz_session.ui.countdown_timer import CountdownTimer
from quiz_session.ui.dialog_helpers import confirm_reset, confirm_submit, show_info, show_warning


def format_time_remaining(time_remaining_ms: int) -> str:
    total_seconds = max(0, time_remaining_ms) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return TIME_REMAINING_TEMPLATE.format(minutes=minutes, seconds=seconds)


class QuizWindow(QMainWindow):
    """Main window. Without an explicit store it uses the one in ``session_scope``."""

    def __init__(self, store: SessionStore | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.store = store or current_session()
        self.presenter = OptionPresenter(self.store)
        self.countdown = CountdownTimer(self.store, parent=self)
        self.countdown.ticked.connect(self._update_time_label)
        self.countdown.expired.connect(self._handle_time_expired)
        self._option_buttons: list[QPushButton] = []

        self._build_ui()
        self._restore_view()

    def _build_ui(self) -> None:
        self.page_stack = QStackedWidget(self)
        self.setCentralWidget(self.page_stack)

        self.start_page = self._build_start_page()
        self.question_page = self._build_question_page()
        self.result_page = self._build_result_page()
        for page in (self.start_page, self.question_page, self.result_page):
            self.page_stack.addWidget(page)

    def _build_start_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        self.start_description = QLabel(START_PAGE_DESCRIPTION, page)
        self.start_description.setWordWrap(True)
        layout.addWidget(self.start_description)

        self.name_input = QLineEdit(page)
        self.name_input.setPlaceholderText(NAME_PLACEHOLDER)
        layout.addWidget(self.name_input)

        self.start_button = QPushButton(START_BUTTON, page)
        self.start_button.clicked.connect(self._handle_start)
        layout.addWidget(self.start_button)
        layout.addStretch()
        return page

    def _build_question_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        header = QHBoxLayout()
        self.progress_label = QLabel(page)
        header.addWidget(self.progress_label)
        header.addStretch()
        self.time_label = QLabel(page)
        header.addWidget(self.time_label)
        layout.addLayout(header)

        self.question_label = QLabel(page)
        self.question_label.setWordWrap(True)
        layout.addWidget(self.question_label)

        self.options_layout = QVBoxLayout()
        layout.addLayout(self.options_layout)

        self.unanswered_label = QLabel(page)
        self.unanswered_label.setWordWrap(True)
        layout.addWidget(self.unanswered_label)

        nav_row = QHBoxLayout()
        self.previous_button = QPushButton(PREVIOUS_BUTTON, page)
        self.previous_button.clicked.connect(self._handle_previous)
        nav_row.addWidget(self.previous_button)

        self.clear_button = QPushButton(CLEAR_BUTTON, page)
        self.clear_button.clicked.connect(self._handle_clear)
        nav_row.addWidget(self.clear_button)

        self.skip_button = QPushButton(SKIP_BUTTON, page)
        self.skip_button.clicked.connect(self._handle_skip)
        nav_row.addWidget(self.skip_button)

        self.next_button = QPushButton(NEXT_BUTTON, page)
        self.next_button.clicked.connect(self._handle_next)
        nav_row.addWidget(self.next_button)
        layout.addLayout(nav_row)

        self.submit_button = QPushButton(SUBMIT_BUTTON, page)
        self.submit_button.clicked.connect(self._handle_submit)
        layout.addWidget(self.submit_button)
        layout.addStretch()
        return page

    def _build_result_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        self.result_label = QLabel(page)
        self.result_label.setWordWrap(True)
        layout.addWidget(self.result_label)

        self.reset_button = QPushButton(RESET_BUTTON, page)
        self.reset_button.clicked.connect(self._handle_reset)
        layout.addWidget(self.reset_button)
        layout.addStretch()
        return page

    # --- Page switching ---

    def _restore_view(self) -> None:
        if self.store.is_completed:
            self._show_result_page()
        elif self.store.is_started and self.store.resumed_from_storage:
            self._show_question_page()
            self.countdown.start()
        else:
            self._show_start_page()

    def _show_start_page(self) -> None:
        identity = self.store.identity or {}
        self.name_input.setText(str(identity.get("name", "")))
        if self.store.was_previously_completed:
            self.start_description.setText(f"{PREVIOUS_ATTEMPT_MESSAGE} {START_PAGE_DESCRIPTION}")
        else:
            self.start_description.setText(START_PAGE_DESCRIPTION)
        self.page_stack.setCurrentWidget(self.start_page)

    def _show_question_page(self) -> None:
        self._render_question()
        self._update_time_label(self.store.time_remaining_ms)
        self.page_stack.setCurrentWidget(self.question_page)

    def _show_result_page(self) -> None:
        self.countdown.stop()
        self.result_label.setText(
            RESULT_TEMPLATE.format(score=self.store.score(), total=self.store.question_count)
        )
        self.page_stack.setCurrentWidget(self.result_page)

    # --- Question rendering ---

    def _render_question(self) -> None:
        question = self.store.current_question
        options = self.presenter.show(question)

        self.progress_label.setText(self.presenter.progress_text())
        self.question_label.setText(question.text)

        for button in self._option_buttons:
            self.options_layout.removeWidget(button)
            button.deleteLater()
        self._option_buttons = []
        for display_index, option in enumerate(options):
            button = QPushButton(f"{option_label(display_index)}. {option.value}", self.question_page)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked=False, index=display_index: self._handle_option(index))
            self.options_layout.addWidget(button)
            self._option_buttons.append(button)

        self._refresh_selection()
        position = self.store.current_position
        self.previous_button.setEnabled(position > 0)
        self.skip_button.setEnabled(position < self.store.question_count - 1)
        self.next_button.setEnabled(position < self.store.question_count - 1)

    def _refresh_selection(self) -> None:
        selected = self.presenter.selected_display_index()
        for display_index, button in enumerate(self._option_buttons):
            button.setChecked(display_index == selected)
        unanswered = self.store.unanswered_positions()
        if unanswered:
            positions = ", ".join(str(position + 1) for position in unanswered)
            self.unanswered_label.setText(UNANSWERED_TEMPLATE.format(positions=positions))
        else:
            self.unanswered_label.setText(ALL_ANSWERED_MESSAGE)

    def _update_time_label(self, time_remaining_ms: int) -> None:
        self.time_label.setText(format_time_remaining(time_remaining_ms))

    # --- Handlers ---

    def _handle_start(self) -> None:
        name = self.name_input.text().strip()
        if not name:
            show_warning(self, "Name required", "Please enter your name before starting.")
            return
        self.store.identity = {"name": name}
        self.store.start_session()
        self._show_question_page()
        self.countdown.start()

    def _handle_option(self, display_index: int) -> None:
        self.presenter.select(display_index)
        self._refresh_selection()

    def _handle_clear(self) -> None:
        self.presenter.clear_selection()
        self._refresh_selection()

    def _handle_previous(self) -> None:
        self.store.retreat()
        self._render_question()

    def _handle_next(self) -> None:
        self.store.advance()
        self._render_question()

    def _handle_skip(self) -> None:
        self.store.skip()
        self._render_question()

    def _handle_submit(self) -> None:
        if not confirm_submit(self, len(self.store.unanswered_positions())):
            return
        self.store.submit_session()
        self._show_result_page()

    def _handle_time_expired(self) -> None:
        self.store.submit_session()
        self._show_result_page()
        show_info(self, "Time is up", TIME_UP_MESSAGE)

    def _handle_reset(self) -> None:
        if not confirm_reset(self):
            return
        self.store.reset_session()
        self._show_start_page()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt naming
        self.countdown.stop()
        super().closeEvent(event)
