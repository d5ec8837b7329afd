"""Phrase Master UI Module - terminal interface for phrase drills."""

from ui.app import PhraseMasterUI
from ui.components import (
    FeedbackLine,
    LessonSummary,
    SentenceBlock,
    TaskPanel,
    WelcomeScreen,
)
from ui.styles import (
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    SAGE,
    SUCCESS_GREEN,
)

__all__ = [
    "PhraseMasterUI",
    "FeedbackLine",
    "LessonSummary",
    "SentenceBlock",
    "TaskPanel",
    "WelcomeScreen",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
    "SAGE",
    "SUCCESS_GREEN",
]
