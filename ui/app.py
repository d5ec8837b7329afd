import logging
import re
import time
from typing import Callable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from lessons import lesson_stats
from models import Feedback
from session import DrillSession
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
    create_session_complete_header,
)

logger = logging.getLogger(__name__)

_TAKE_BACK = re.compile(r"-(\d+)")


class PhraseMasterUI:
    """Terminal front end that drives a DrillSession from keyboard input."""

    def __init__(
        self,
        console: Optional[Console] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.console = console or Console()
        self.sleep = sleep
        # Shown under the next redraw so the screen clear does not wipe it
        self.notice: Optional[str] = None

    def run(self, session: DrillSession) -> bool:
        """Run the lesson until it is finished or the learner quits.

        Returns:
            True if the lesson was completed, False if the learner quit.
        """
        stats = lesson_stats(session.sentences)

        while True:
            self.clear_screen()
            if not session.state.started:
                self.console.print(WelcomeScreen(stats))
                self.console.print()

            if not session.sentences:
                self.show_error("The lesson has no sentences.")
                return False

            self.show_lesson(session)
            if self.notice:
                self.show_hint(self.notice)
                self.notice = None

            if session.state.started and session.is_complete:
                self.show_session_complete(stats)
                return True

            if session.active_drill is None:
                label = "Start Class" if not session.state.started else "Next Sentence"
                answer = self.console.input(
                    Text(f"Press Enter for {label} ('q' to quit): ", style=f"bold {MUTED_GRAY}")
                ).strip()
                if answer.lower() == "q":
                    self.show_quit_message()
                    return False
                session.advance()
                continue

            user_input = self.console.input(
                Text("Your move: ", style=f"bold {MUTED_GRAY}")
            ).strip()
            if user_input.lower() == "q":
                self.show_quit_message()
                return False
            self.handle_drill_input(session, user_input)

    def handle_drill_input(self, session: DrillSession, user_input: str) -> None:
        """Apply one line of input to the open drill."""
        state = session.state

        take_back = _TAKE_BACK.fullmatch(user_input)
        if take_back:
            position = int(take_back.group(1))
            if 1 <= position <= len(state.placed):
                session.move_block(state.placed[position - 1].id, from_pool=False)
            else:
                self.notice = f"There is no placed word {position}."
            return

        if user_input.isdigit() and state.pool:
            position = int(user_input)
            if 1 <= position <= len(state.pool):
                session.move_block(state.pool[position - 1].id, from_pool=True)
            else:
                self.notice = f"Pick a word between 1 and {len(state.pool)}."
            return

        if not user_input:
            return

        if state.pool:
            self.notice = "Place every word before typing the phrase."
            return

        drill = session.active_drill
        session.submit(user_input)
        feedback = session.state.feedback
        self.console.print(
            FeedbackLine(feedback, drill.correct if feedback == Feedback.CORRECT else None)
        )
        logger.debug("Submitted %r: %s", user_input, feedback.value)
        session.settle(self.sleep)

    def show_lesson(self, session: DrillSession) -> None:
        """Print every sentence reached so far and the open task, if any."""
        for view in session.render():
            self.console.print(SentenceBlock(view))
        self.console.print()

        drill = session.active_drill
        if drill is not None:
            state = session.state
            self.console.print(
                TaskPanel(
                    drill=drill,
                    drill_index=state.drill_index,
                    drill_count=session.active_sentence.drill_count,
                    pool=state.pool,
                    placed=state.placed,
                    feedback=state.feedback,
                )
            )
            self.console.print()

    def show_session_complete(self, stats: dict) -> None:
        self.console.print(create_session_complete_header())
        self.console.print(LessonSummary(stats, title="Summary"))

    def show_hint(self, message: str) -> None:
        self.console.print(Text(message, style=INFO_BLUE))

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_quit_message(self) -> None:
        self.console.print()
        self.console.print(Text("👋 Goodbye!", style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()
