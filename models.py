from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

DRILL_PLACEHOLDER = "_____"


class WordType(str, Enum):
    VERB = "verb"
    NOUN = "noun"
    ADJECTIVE = "adjective"
    PREPOSITION = "preposition"


class Feedback(str, Enum):
    IDLE = "idle"
    INVALID = "invalid"
    CORRECT = "correct"


class RenderTag(str, Enum):
    """Display category of a drill token, derived from session state."""

    COMPLETED = "completed"
    CURRENT = "current"
    FUTURE = "future"


# ============================================================================
# Parsed Lesson Models
# ============================================================================


class Drill(BaseModel):
    """One fill-in-the-blank exercise embedded in a sentence."""

    model_config = ConfigDict(frozen=True)

    correct: str  # Answer the learner must type (compared after normalization)
    base: str  # Prompt form, split on whitespace into scramble blocks
    meaning: str  # Gloss shown as the task instruction

    @property
    def words(self) -> list[str]:
        return self.base.split()


class TextToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    content: str


class DrillToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["drill"] = "drill"
    drill_index: int = Field(ge=0)


Token = Annotated[Union[TextToken, DrillToken], Field(discriminator="kind")]


class Sentence(BaseModel):
    """A parsed sentence: literal text interleaved with drill references.

    ``drills`` is None when the sentence has no drills; such a sentence is
    display-only and never enters the active-drill UI.
    """

    model_config = ConfigDict(frozen=True)

    full_text: str
    tokens: list[Token]
    drills: list[Drill] | None = None

    @property
    def drill_count(self) -> int:
        return len(self.drills) if self.drills else 0

    @property
    def has_drills(self) -> bool:
        return self.drill_count > 0

    def get_drill(self, drill_index: int) -> Drill | None:
        """Get a drill by index, or None if out of range."""
        if self.drills and 0 <= drill_index < len(self.drills):
            return self.drills[drill_index]
        return None

    def plain_text(self, placeholder: str = DRILL_PLACEHOLDER) -> str:
        """Sentence text with every drill replaced by a placeholder."""
        parts = []
        for token in self.tokens:
            if isinstance(token, TextToken):
                parts.append(token.content)
            else:
                parts.append(placeholder)
        return "".join(parts)

    def answer_text(self) -> str:
        """Sentence text with every drill filled in with its answer."""
        parts = []
        for token in self.tokens:
            if isinstance(token, TextToken):
                parts.append(token.content)
            else:
                parts.append(self.drills[token.drill_index].correct)
        return "".join(parts)


# ============================================================================
# Session Models
# ============================================================================


class Block(BaseModel):
    """One word of a drill's prompt, identified by its position in the prompt."""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    word_type: WordType = WordType.NOUN


class SessionState(BaseModel):
    """Snapshot of one learning run.

    Transitions never mutate a snapshot; they return a new one. ``generation``
    is bumped by every effective transition so that deferred callbacks
    scheduled under an older snapshot can be recognised as stale.
    """

    model_config = ConfigDict(frozen=True)

    sentence_index: int = Field(default=-1, ge=-1)
    drill_index: int = Field(default=0, ge=0)
    pool: tuple[Block, ...] = ()
    placed: tuple[Block, ...] = ()
    free_text: str = ""
    feedback: Feedback = Feedback.IDLE
    generation: int = 0

    @property
    def started(self) -> bool:
        return self.sentence_index >= 0

    def find_block(self, block_id: int, in_pool: bool) -> Block | None:
        blocks = self.pool if in_pool else self.placed
        for block in blocks:
            if block.id == block_id:
                return block
        return None
