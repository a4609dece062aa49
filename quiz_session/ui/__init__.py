"""Qt UI components for the quiz session client."""
