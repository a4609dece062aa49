"""Quiz-related constants shared across UI, server and core layers."""

from pathlib import Path

QUIZ_DURATION_MS: int = 90 * 60 * 1000

STATE_STORAGE_KEY: str = "quiz-state"
USER_STORAGE_KEY: str = "quiz-user"
STARTED_STORAGE_KEY: str = "quiz-started"
COMPLETED_STORAGE_KEY: str = "quiz-completed"
FLAG_TRUE: str = "true"

OPTION_LABELS: tuple[str, ...] = ("A", "B", "C", "D", "E")
MIN_OPTION_COUNT: int = 2
MAX_OPTION_COUNT: int = len(OPTION_LABELS)

DEFAULT_QUESTION_BANK_PATH: Path = Path(__file__).resolve().parent.parent / "data" / "questions.json"
DEFAULT_STORAGE_PATH: Path = Path.home() / ".quiz_session" / "storage.json"
