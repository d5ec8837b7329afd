"""Lesson markup parser.

Turns an annotated paragraph into sentences of literal text and drills.
Drills are written inline as ``{answer|prompt|meaning}``:

    Last week {he had gone to a film set|go to a film set|去电影片场}.

The parser never fails. Anything that does not match the drill syntax is kept
as literal text.
"""

import logging
import re

from models import Drill, DrillToken, Sentence, TextToken

logger = logging.getLogger(__name__)

DEFAULT_TERMINATORS = ".?!。？！"

# Each field stops at the nearest "|" or "}"; braces cannot nest.
DRILL_PATTERN = re.compile(r"\{([^|{}]+?)\|([^|{}]+?)\|([^|{}]+?)\}")


def segment(text: str, terminators: str = DEFAULT_TERMINATORS) -> list[str]:
    """Split text into trimmed sentences.

    A sentence ends after a run of terminator characters, so "..." or "!?"
    count as a single boundary. Terminators inside a closed ``{...}`` span do
    not split; an unclosed "{" is ordinary text.

    Args:
        text: Raw lesson text.
        terminators: Characters that end a sentence.

    Returns:
        Non-empty sentence strings in order of appearance.
    """
    fragments = []
    start = 0
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        if char == "{":
            close = text.find("}", i + 1)
            next_open = text.find("{", i + 1)
            if close != -1 and (next_open == -1 or close < next_open):
                i = close + 1
                continue
        elif char in terminators:
            while i < length and text[i] in terminators:
                i += 1
            fragments.append(text[start:i])
            start = i
            continue
        i += 1

    fragments.append(text[start:])
    return [fragment.strip() for fragment in fragments if fragment.strip()]


def parse_sentence(raw: str) -> Sentence:
    """Decompose one sentence into text and drill tokens."""
    tokens: list[TextToken | DrillToken] = []
    drills: list[Drill] = []
    last_end = 0

    for match in DRILL_PATTERN.finditer(raw):
        correct, base, meaning = (field.strip() for field in match.groups())
        if not (correct and base and meaning):
            # Blank field: leave the whole span as literal text
            logger.debug("Ignoring drill with empty field: %r", match.group(0))
            continue

        if match.start() > last_end:
            tokens.append(TextToken(content=raw[last_end : match.start()]))

        tokens.append(DrillToken(drill_index=len(drills)))
        drills.append(Drill(correct=correct, base=base, meaning=meaning))
        last_end = match.end()

    if last_end < len(raw):
        tokens.append(TextToken(content=raw[last_end:]))

    if not drills:
        return Sentence(full_text=raw, tokens=[TextToken(content=raw)], drills=None)

    return Sentence(full_text=raw, tokens=tokens, drills=drills)


def parse(text: str, terminators: str = DEFAULT_TERMINATORS) -> list[Sentence]:
    """Parse annotated lesson text into sentences.

    Args:
        text: Raw lesson text with ``{answer|prompt|meaning}`` drills.
        terminators: Characters that end a sentence.

    Returns:
        Sentences in order. Empty input gives an empty list.
    """
    sentences = [parse_sentence(raw) for raw in segment(text, terminators)]
    logger.debug(
        "Parsed %d sentences with %d drills",
        len(sentences),
        sum(s.drill_count for s in sentences),
    )
    return sentences

