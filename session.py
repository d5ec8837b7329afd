"""Drill progression state machine.

A session walks the learner through a lesson one sentence at a time. For
every drill in the active sentence the learner first rebuilds the scrambled
prompt words in order, then types the full phrase. Only the typed phrase is
scored.

State changes go through ``reduce``, a pure function from (state, action) to
a new state. ``DrillSession`` wraps it with the feedback delays.
"""

import logging
import random
import re
import time
from enum import Enum
from typing import Callable, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict

from classifier import classify
from config import SessionConfig
from markup import parse
from models import Block, Drill, Feedback, Sentence, SessionState
from render import SentenceView, render_state
from timers import ScheduledTask, TaskScheduler

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_ORDERING = "awaiting_ordering"
    AWAITING_ANSWER = "awaiting_answer"
    FEEDBACK_CORRECT = "feedback_correct"
    FEEDBACK_INVALID = "feedback_invalid"
    SENTENCE_COMPLETE = "sentence_complete"
    ALL_COMPLETE = "all_complete"


# ============================================================================
# Actions
# ============================================================================


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class Advance(_Action):
    """Move on to the next sentence (the "Next" control)."""

    kind: Literal["advance"] = "advance"


class MoveBlock(_Action):
    """Move one block between the pool and the placed row."""

    kind: Literal["move_block"] = "move_block"
    block_id: int
    from_pool: bool = True


class SetFreeText(_Action):
    kind: Literal["set_free_text"] = "set_free_text"
    text: str


class Submit(_Action):
    kind: Literal["submit"] = "submit"
    text: str


class SuccessElapsed(_Action):
    """Fired once the success message has been shown long enough."""

    kind: Literal["success_elapsed"] = "success_elapsed"
    generation: int


class InvalidElapsed(_Action):
    """Fired once the invalid-answer flash has been shown long enough."""

    kind: Literal["invalid_elapsed"] = "invalid_elapsed"
    generation: int


Action = Union[Advance, MoveBlock, SetFreeText, Submit, SuccessElapsed, InvalidElapsed]


# ============================================================================
# Answer checking
# ============================================================================


def normalize(text: str) -> str:
    """Lower-case text and drop everything but ASCII letters and digits."""
    return re.sub(r"[^a-z0-9]", "", text.lower())


def answers_match(given: str, correct: str) -> bool:
    """Compare answers ignoring case, spacing and punctuation."""
    return normalize(given) == normalize(correct)


# ============================================================================
# Selectors
# ============================================================================


def active_sentence(sentences: Sequence[Sentence], state: SessionState) -> Sentence | None:
    if 0 <= state.sentence_index < len(sentences):
        return sentences[state.sentence_index]
    return None


def active_drill(sentences: Sequence[Sentence], state: SessionState) -> Drill | None:
    """The drill the learner is working on, or None if no drill is open."""
    sentence = active_sentence(sentences, state)
    if sentence is None:
        return None
    return sentence.get_drill(state.drill_index)


def is_sentence_finished(sentences: Sequence[Sentence], state: SessionState) -> bool:
    """True once every drill of the current sentence is done.

    Also true before the session starts and for sentences without drills.
    """
    sentence = active_sentence(sentences, state)
    if sentence is None:
        return True
    return state.drill_index >= sentence.drill_count


def is_all_complete(sentences: Sequence[Sentence], state: SessionState) -> bool:
    if not sentences:
        return True
    return state.sentence_index == len(sentences) - 1 and is_sentence_finished(
        sentences, state
    )


def can_advance(sentences: Sequence[Sentence], state: SessionState) -> bool:
    """Whether the "Next" control is enabled.

    There is no skip: a sentence with open drills stays locked until they
    are answered.
    """
    if not sentences:
        return False
    if not state.started:
        return True
    return (
        is_sentence_finished(sentences, state)
        and state.sentence_index < len(sentences) - 1
    )


def phase(sentences: Sequence[Sentence], state: SessionState) -> Phase:
    if not sentences:
        return Phase.ALL_COMPLETE
    if not state.started:
        return Phase.NOT_STARTED
    if state.feedback == Feedback.CORRECT:
        return Phase.FEEDBACK_CORRECT
    if state.feedback == Feedback.INVALID:
        return Phase.FEEDBACK_INVALID
    if is_sentence_finished(sentences, state):
        if is_all_complete(sentences, state):
            return Phase.ALL_COMPLETE
        return Phase.SENTENCE_COMPLETE
    if state.pool:
        return Phase.AWAITING_ORDERING
    return Phase.AWAITING_ANSWER


# ============================================================================
# Transitions
# ============================================================================


def make_blocks(drill: Drill) -> list[Block]:
    """Split a drill's prompt into blocks identified by position."""
    return [
        Block(id=i, text=word, word_type=classify(word))
        for i, word in enumerate(drill.words)
    ]


def init_drill(
    state: SessionState,
    sentence: Sentence,
    drill_index: int,
    rng: random.Random,
    shuffle: bool = True,
) -> SessionState:
    """Open a drill: scramble its blocks and clear the learner's input."""
    drill = sentence.get_drill(drill_index)
    blocks = make_blocks(drill) if drill else []
    if shuffle:
        rng.shuffle(blocks)

    return state.model_copy(
        update={
            "drill_index": drill_index,
            "pool": tuple(blocks),
            "placed": (),
            "free_text": "",
            "feedback": Feedback.IDLE,
        }
    )


def _bump(state: SessionState, **changes) -> SessionState:
    changes["generation"] = state.generation + 1
    return state.model_copy(update=changes)


def _advance(
    state: SessionState,
    sentences: Sequence[Sentence],
    rng: random.Random,
    shuffle: bool,
) -> SessionState:
    if not can_advance(sentences, state):
        logger.debug(
            "Advance ignored at sentence %d, drill %d",
            state.sentence_index,
            state.drill_index,
        )
        return state

    next_index = state.sentence_index + 1
    next_state = _bump(
        state,
        sentence_index=next_index,
        drill_index=0,
        pool=(),
        placed=(),
        free_text="",
        feedback=Feedback.IDLE,
    )

    sentence = sentences[next_index]
    if sentence.has_drills:
        next_state = init_drill(next_state, sentence, 0, rng, shuffle)
    return next_state


def _move_block(
    state: SessionState, action: MoveBlock, sentences: Sequence[Sentence]
) -> SessionState:
    if active_drill(sentences, state) is None or state.feedback == Feedback.CORRECT:
        return state

    block = state.find_block(action.block_id, in_pool=action.from_pool)
    if block is None:
        logger.debug("No block %d in %s", action.block_id, "pool" if action.from_pool else "answer")
        return state

    if action.from_pool:
        pool = tuple(b for b in state.pool if b.id != block.id)
        placed = state.placed + (block,)
    else:
        placed = tuple(b for b in state.placed if b.id != block.id)
        pool = state.pool + (block,)

    return _bump(state, pool=pool, placed=placed, feedback=Feedback.IDLE)


def _set_free_text(
    state: SessionState, action: SetFreeText, sentences: Sequence[Sentence]
) -> SessionState:
    if active_drill(sentences, state) is None or state.feedback == Feedback.CORRECT:
        return state
    return _bump(state, free_text=action.text, feedback=Feedback.IDLE)


def _submit(
    state: SessionState, action: Submit, sentences: Sequence[Sentence]
) -> SessionState:
    drill = active_drill(sentences, state)
    if drill is None or state.feedback == Feedback.CORRECT:
        logger.debug("Submit ignored: no open drill")
        return state

    if state.pool:
        feedback = Feedback.INVALID
    elif answers_match(action.text, drill.correct):
        feedback = Feedback.CORRECT
    else:
        feedback = Feedback.INVALID

    return _bump(state, free_text=action.text, feedback=feedback)


def _success_elapsed(
    state: SessionState,
    action: SuccessElapsed,
    sentences: Sequence[Sentence],
    rng: random.Random,
    shuffle: bool,
) -> SessionState:
    if action.generation != state.generation or state.feedback != Feedback.CORRECT:
        logger.debug("Dropping stale success callback (generation %d)", action.generation)
        return state

    sentence = active_sentence(sentences, state)
    next_drill = state.drill_index + 1
    if next_drill < sentence.drill_count:
        return init_drill(_bump(state), sentence, next_drill, rng, shuffle)

    return _bump(
        state,
        drill_index=sentence.drill_count,
        pool=(),
        placed=(),
        free_text="",
        feedback=Feedback.IDLE,
    )


def _invalid_elapsed(state: SessionState, action: InvalidElapsed) -> SessionState:
    if action.generation != state.generation or state.feedback != Feedback.INVALID:
        logger.debug("Dropping stale invalid callback (generation %d)", action.generation)
        return state
    return _bump(state, feedback=Feedback.IDLE)


def reduce(
    state: SessionState,
    action: Action,
    sentences: Sequence[Sentence],
    rng: random.Random | None = None,
    shuffle: bool = True,
) -> SessionState:
    """Apply one action to a session state.

    Args:
        state: Current snapshot (left untouched).
        action: What happened.
        sentences: The parsed lesson.
        rng: Source of randomness for scrambling blocks.
        shuffle: Scramble blocks when a drill opens.

    Returns:
        The next snapshot. Actions that do not apply return ``state`` itself.
    """
    rng = rng or random.Random()

    if isinstance(action, Advance):
        return _advance(state, sentences, rng, shuffle)
    if isinstance(action, MoveBlock):
        return _move_block(state, action, sentences)
    if isinstance(action, SetFreeText):
        return _set_free_text(state, action, sentences)
    if isinstance(action, Submit):
        return _submit(state, action, sentences)
    if isinstance(action, SuccessElapsed):
        return _success_elapsed(state, action, sentences, rng, shuffle)
    if isinstance(action, InvalidElapsed):
        return _invalid_elapsed(state, action)
    raise TypeError(f"Unknown action: {action!r}")


# ============================================================================
# Session controller
# ============================================================================


class DrillSession:
    """One learning run over a parsed lesson.

    Holds the current snapshot and schedules the delayed follow-up after a
    submission. Any effective action cancels whatever follow-up is pending.
    """

    def __init__(
        self,
        sentences: Sequence[Sentence],
        config: SessionConfig | None = None,
        scheduler: TaskScheduler | None = None,
        rng: random.Random | None = None,
    ):
        self.sentences = list(sentences)
        self.config = config or SessionConfig()
        self.scheduler = scheduler or TaskScheduler()
        self.rng = rng or random.Random(self.config.seed)
        self.state = SessionState()
        self._pending: ScheduledTask | None = None

    @classmethod
    def from_text(cls, text: str, config: SessionConfig | None = None, **kwargs) -> "DrillSession":
        config = config or SessionConfig()
        return cls(parse(text, config.terminators), config=config, **kwargs)

    def dispatch(self, action: Action) -> SessionState:
        previous = self.state
        self.state = reduce(
            previous, action, self.sentences, self.rng, self.config.shuffle_blocks
        )

        if self.state.generation != previous.generation:
            self._cancel_pending()
            if isinstance(action, Submit):
                self._schedule_follow_up()
        return self.state

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_follow_up(self) -> None:
        generation = self.state.generation
        if self.state.feedback == Feedback.CORRECT:
            delay = self.config.success_delay
            follow_up: Action = SuccessElapsed(generation=generation)
        elif self.state.feedback == Feedback.INVALID:
            delay = self.config.invalid_delay
            follow_up = InvalidElapsed(generation=generation)
        else:
            return

        self._pending = self.scheduler.call_later(
            delay, lambda: self.dispatch(follow_up), label=follow_up.kind
        )

    # -- user actions -------------------------------------------------------

    def advance(self) -> SessionState:
        return self.dispatch(Advance())

    def move_block(self, block_id: int, from_pool: bool = True) -> SessionState:
        return self.dispatch(MoveBlock(block_id=block_id, from_pool=from_pool))

    def set_free_text(self, text: str) -> SessionState:
        return self.dispatch(SetFreeText(text=text))

    def submit(self, text: str) -> SessionState:
        return self.dispatch(Submit(text=text))

    # -- timers -------------------------------------------------------------

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and self._pending.active

    def run_pending(self) -> int:
        return self.scheduler.run_pending()

    def settle(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Wait out any pending feedback delay and apply its transition."""
        while True:
            deadline = self.scheduler.next_deadline()
            if deadline is None:
                return
            wait = deadline - self.scheduler.clock()
            if wait > 0:
                sleep(wait)
            self.scheduler.run_pending(now=max(self.scheduler.clock(), deadline))

    # -- derived state ------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return phase(self.sentences, self.state)

    @property
    def can_advance(self) -> bool:
        return can_advance(self.sentences, self.state)

    @property
    def active_sentence(self) -> Sentence | None:
        return active_sentence(self.sentences, self.state)

    @property
    def active_drill(self) -> Drill | None:
        return active_drill(self.sentences, self.state)

    @property
    def is_complete(self) -> bool:
        return is_all_complete(self.sentences, self.state)

    def render(self) -> list[SentenceView]:
        return render_state(self.sentences, self.state)
