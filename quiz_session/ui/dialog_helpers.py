"""Helper functions for common dialog patterns in the quiz window."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_submit(parent: QWidget, unanswered_count: int) -> bool:
    """Ask before submitting, mentioning unanswered questions if there are any.

    Args:
        parent: Parent widget for the dialog
        unanswered_count: Number of questions without an answer

    Returns:
        True if user confirmed, False otherwise
    """
    message = "Submit your answers? You cannot change them afterwards."
    if unanswered_count:
        message = f"{unanswered_count} question(s) are still unanswered. {message}"
    reply = QMessageBox.question(
        parent,
        "Confirm Submit",
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_reset(parent: QWidget) -> bool:
    reply = QMessageBox.question(
        parent,
        "Confirm Start Over",
        "Starting over clears your answers, your result and your name. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
