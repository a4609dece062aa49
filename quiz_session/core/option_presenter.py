"""Randomized option order for one question, mapped back to original indices.

Options are displayed shuffled, but the session only ever stores and scores
original indices. The presenter resolves a clicked display position to the
original index before recording it, and finds the display position of a
stored answer by scanning for its original index. Because of that, a new
shuffle (a fresh presenter after a restart, or coming back to a question)
still highlights the answer the user picked, wherever it now sits.
"""

from __future__ import annotations

from collections.abc import Sequence
import random

from quiz_session.constants.quiz_constants import OPTION_LABELS
from quiz_session.core.models import Question, ShuffledOption
from quiz_session.core.session_store import SessionStore


def shuffle_options(options: Sequence[str], rng: random.Random) -> list[ShuffledOption]:
    """Return ``options`` in a uniformly random order, tagged with original indices."""
    shuffled = [ShuffledOption(original_index=index, value=value) for index, value in enumerate(options)]
    # Fisher-Yates
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


class ShuffleCache:
    """Keeps one display order per question until a different question is shown."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._key: tuple[int, tuple[str, ...]] | None = None
        self._order: list[ShuffledOption] = []

    def set_seed(self, seed: int | None) -> None:
        self._rng.seed(seed)
        self.invalidate()

    def invalidate(self) -> None:
        self._key = None
        self._order = []

    def order_for(self, question: Question) -> list[ShuffledOption]:
        key = (question.id, tuple(question.options))
        if key != self._key:
            self._order = shuffle_options(question.options, self._rng)
            self._key = key
        return list(self._order)


class OptionPresenter:
    """Presents one question's options and reports selections to the store."""

    def __init__(self, store: SessionStore, rng: random.Random | None = None) -> None:
        self._store = store
        self._cache = ShuffleCache(rng)
        self._question: Question | None = None
        self._order: list[ShuffledOption] = []

    @property
    def question(self) -> Question | None:
        return self._question

    @property
    def display_options(self) -> list[ShuffledOption]:
        return list(self._order)

    def show(self, question: Question) -> list[ShuffledOption]:
        """Switch to ``question`` and return its display order.

        Showing the same question again keeps the existing order.
        """
        self._question = question
        self._order = self._cache.order_for(question)
        return list(self._order)

    def original_index_at(self, display_index: int) -> int:
        if not 0 <= display_index < len(self._order):
            raise ValueError(f"Display index {display_index} out of range")
        return self._order[display_index].original_index

    def select(self, display_index: int) -> int:
        """Record the option shown at ``display_index`` and return its original index."""
        question = self._require_question()
        original_index = self.original_index_at(display_index)
        self._store.record_answer(question.id, original_index)
        return original_index

    def clear_selection(self) -> None:
        question = self._require_question()
        self._store.record_answer(question.id, None)

    def selected_display_index(self) -> int | None:
        if self._question is None:
            return None
        record = self._store.answer_for(self._question.id)
        if record is None or record.selected_answer is None:
            return None
        for display_index, option in enumerate(self._order):
            if option.original_index == record.selected_answer:
                return display_index
        return None

    def is_selected(self, display_index: int) -> bool:
        return self.selected_display_index() == display_index

    def progress_text(self) -> str:
        question = self._require_question()
        position = self._store.current_position
        return f"Question {question.id} ({position + 1} of {self._store.question_count})"

    def _require_question(self) -> Question:
        if self._question is None:
            raise RuntimeError("No question is being shown.")
        return self._question


def option_label(display_index: int) -> str:
    """Letter shown next to the option at ``display_index`` (A, B, ...)."""
    if 0 <= display_index < len(OPTION_LABELS):
        return OPTION_LABELS[display_index]
    return str(display_index + 1)
