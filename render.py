"""Projection of session state onto what each drill token should show.

Nothing here is stored; views are rebuilt from the sentences and the current
snapshot whenever the presentation needs them.
"""

from typing import Sequence

from pydantic import BaseModel

from models import (
    DRILL_PLACEHOLDER,
    DrillToken,
    RenderTag,
    Sentence,
    SessionState,
    TextToken,
)


class TokenView(BaseModel):
    token: TextToken | DrillToken
    tag: RenderTag | None = None  # None for literal text
    text: str = ""  # What to display: literal text, answer, or placeholder


class SentenceView(BaseModel):
    index: int
    sentence: Sentence
    active: bool
    tokens: list[TokenView]


def tag_for(drill_index: int, sentence_index: int, state: SessionState) -> RenderTag:
    """Render tag of one drill token.

    Every drill in an earlier sentence counts as completed; earlier sentences
    are never revisited.
    """
    if sentence_index < state.sentence_index:
        return RenderTag.COMPLETED
    if drill_index < state.drill_index:
        return RenderTag.COMPLETED
    if drill_index == state.drill_index:
        return RenderTag.CURRENT
    return RenderTag.FUTURE


def render_sentence(
    sentence: Sentence, sentence_index: int, state: SessionState
) -> SentenceView:
    views = []
    for token in sentence.tokens:
        if isinstance(token, TextToken):
            views.append(TokenView(token=token, text=token.content))
            continue

        tag = tag_for(token.drill_index, sentence_index, state)
        if tag == RenderTag.COMPLETED:
            text = sentence.drills[token.drill_index].correct
        else:
            text = DRILL_PLACEHOLDER
        views.append(TokenView(token=token, tag=tag, text=text))

    return SentenceView(
        index=sentence_index,
        sentence=sentence,
        active=sentence_index == state.sentence_index,
        tokens=views,
    )


def render_state(sentences: Sequence[Sentence], state: SessionState) -> list[SentenceView]:
    """Views for every sentence up to and including the current one."""
    return [
        render_sentence(sentence, index, state)
        for index, sentence in enumerate(sentences)
        if index <= state.sentence_index
    ]
