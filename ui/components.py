from rich import box
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text
from typing import Dict, Optional, Sequence

from models import Block, Drill, Feedback, RenderTag
from render import SentenceView
from ui.styles import (
    ERROR_RED,
    INK,
    MUTED_GRAY,
    SAGE,
    STONE,
    SUCCESS_GREEN,
    create_welcome_banner,
    get_tag_style,
    get_word_style,
)


class SentenceBlock:
    """One lesson sentence with its drills shown according to their tag."""

    def __init__(self, view: SentenceView):
        self.view = view

    def render_text(self) -> Text:
        content = Text()
        for token_view in self.view.tokens:
            if token_view.tag is None:
                content.append(token_view.text, Style(color=INK))
            elif token_view.tag == RenderTag.COMPLETED:
                content.append(f" {token_view.text} ", get_tag_style(token_view.tag))
            elif token_view.tag == RenderTag.CURRENT:
                content.append(" [ ______ ] ", get_tag_style(token_view.tag))
            else:
                content.append(" ____ ", get_tag_style(token_view.tag))
        return content

    def render(self):
        content = self.render_text()
        if not self.view.active:
            content.stylize(Style(dim=True))
            return Align.left(content)

        return Panel(
            Align.left(content),
            title=f"Sentence {self.view.index + 1}",
            title_align="left",
            border_style=SAGE,
            box=box.ROUNDED,
            padding=(1, 2),
        )

    def __rich__(self):
        return self.render()


class TaskPanel:
    """The ordering and typing area for the open drill."""

    def __init__(
        self,
        drill: Drill,
        drill_index: int,
        drill_count: int,
        pool: Sequence[Block],
        placed: Sequence[Block],
        feedback: Feedback = Feedback.IDLE,
    ):
        self.drill = drill
        self.drill_index = drill_index
        self.drill_count = drill_count
        self.pool = list(pool)
        self.placed = list(placed)
        self.feedback = feedback

    def _chips(self, blocks: Sequence[Block], prefix: str = "") -> Text:
        row = Text()
        for i, block in enumerate(blocks, start=1):
            row.append(f"{prefix}{i}", Style(color=MUTED_GRAY))
            row.append(f" {block.text} ", get_word_style(block.word_type))
            row.append("  ")
        return row

    def render(self) -> Panel:
        content = Text()
        content.append(
            f" Task {self.drill_index + 1}/{self.drill_count} ",
            Style(color="white", bgcolor=SAGE, bold=True),
        )
        content.append("  ")
        content.append(self.drill.meaning, Style(color=INK, bold=True))
        content.append("\n\n")

        content.append("Your order: ", Style(color=MUTED_GRAY))
        if self.placed:
            content.append_text(self._chips(self.placed, prefix="-"))
        else:
            content.append("pick words below", Style(color=STONE, italic=True))
        content.append("\n\n")

        if self.pool:
            content.append("Words:      ", Style(color=MUTED_GRAY))
            content.append_text(self._chips(self.pool))
            subtitle = "Number to place a word, -number to take it back, 'q' to quit"
        else:
            content.append(
                "All words placed. Type the complete phrase.", Style(color=SAGE)
            )
            subtitle = "Type the phrase and press Enter, -number to take a word back"

        border = SAGE
        if self.feedback == Feedback.CORRECT:
            border = SUCCESS_GREEN
        elif self.feedback == Feedback.INVALID:
            border = ERROR_RED

        return Panel(
            Align.left(content),
            subtitle=subtitle,
            border_style=border,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackLine:
    """Short status line shown after a submission."""

    MESSAGES = {
        Feedback.CORRECT: ("✓ Correct!", SUCCESS_GREEN),
        Feedback.INVALID: ("✗ Not quite. Check your words and try again.", ERROR_RED),
    }

    def __init__(self, feedback: Feedback, answer: Optional[str] = None):
        self.feedback = feedback
        self.answer = answer

    def render(self) -> Text:
        if self.feedback not in self.MESSAGES:
            return Text()
        message, color = self.MESSAGES[self.feedback]
        line = Text(message, Style(color=color, bold=True))
        if self.feedback == Feedback.CORRECT and self.answer:
            line.append(f"  {self.answer}", Style(color=SUCCESS_GREEN))
        return line

    def __rich__(self) -> Text:
        return self.render()


class LessonSummary:
    """Table of sentence and drill counts for a lesson."""

    LABELS = [
        ("sentences", "Sentences"),
        ("practice_sentences", "Sentences with drills"),
        ("drills", "Drills"),
    ]

    def __init__(self, stats: Dict[str, int], title: str = "Lesson"):
        self.stats = stats
        self.title = title

    def render(self) -> Panel:
        table = Table(
            show_header=False,
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
        )
        table.add_column("Item", style=Style(color=MUTED_GRAY))
        table.add_column("Count", justify="right", style=Style(color=SAGE, bold=True))

        for key, label in self.LABELS:
            table.add_row(label, str(self.stats.get(key, 0)))

        return Panel(table, title=self.title, border_style=SAGE, box=box.HEAVY)

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen shown before the first sentence."""

    def __init__(self, stats: Dict[str, int]):
        self.stats = stats

    def render(self) -> Panel:
        intro = Text()
        intro.append(
            f"{self.stats.get('sentences', 0)} sentences, "
            f"{self.stats.get('drills', 0)} phrases to practise.\n\n",
            Style(color=INK),
        )
        intro.append(
            "For each phrase, put the words in order, then type the full phrase.",
            Style(color=MUTED_GRAY),
        )
        return Panel(
            Group(Align.center(create_welcome_banner()), Text(), intro),
            border_style=SAGE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()
