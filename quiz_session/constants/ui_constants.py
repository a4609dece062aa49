"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizSession"
TIMER_INTERVAL_MS: int = 1000

START_PAGE_DESCRIPTION: str = "Enter your name and press Start when you are ready."
NAME_PLACEHOLDER: str = "Your name"
START_BUTTON: str = "Start Quiz"
PREVIOUS_BUTTON: str = "Previous"
SKIP_BUTTON: str = "Skip"
NEXT_BUTTON: str = "Next"
CLEAR_BUTTON: str = "Clear Answer"
SUBMIT_BUTTON: str = "Submit Quiz"
RESET_BUTTON: str = "Start Over"

UNANSWERED_TEMPLATE: str = "Unanswered: {positions}"
ALL_ANSWERED_MESSAGE: str = "All questions answered."
TIME_REMAINING_TEMPLATE: str = "Time remaining: {minutes:02d}:{seconds:02d}"
RESULT_TEMPLATE: str = "You scored {score} out of {total}."
TIME_UP_MESSAGE: str = "Time is up. Your answers have been submitted."
PREVIOUS_ATTEMPT_MESSAGE: str = "You have already submitted an attempt."
