"""Coarse part-of-speech lookup used to color word chips.

A wrong guess only changes a chip's color, never whether an answer is right.
"""

import re

from models import WordType

VERBS = frozenset(
    """
    go do make take get have has had did made took got be is am are was were
    play watch look see saw went study learn eat ate drink drank run ran walk
    swim write wrote read listen speak spoke come came buy bought sell sold
    think thought know knew want needed loved liked help call ask answer wait
    visit start finish open close wash clean push spend collect turn check
    perform encounter realize face give chase prepare sort add involve lose
    deal
    """.split()
)

PREPOSITIONS = frozenset(
    """
    in on at of for with about to from up down into out over under after
    before by between through
    """.split()
)

ADJECTIVES = frozenset(
    """
    good bad big small long short happy sad nice fine great late early hard
    easy busy free fast slow hot cold warm cool beautiful interesting boring
    difficult popular healthy different same similar wrong angry funny deep
    messy personal tough
    """.split()
)

# Checked in order; anything unlisted is a noun
_LOOKUP_ORDER = [
    (VERBS, WordType.VERB),
    (PREPOSITIONS, WordType.PREPOSITION),
    (ADJECTIVES, WordType.ADJECTIVE),
]


def classify(word: str) -> WordType:
    """Guess the word type of a single prompt word."""
    key = re.sub(r"[^a-z]", "", word.lower())
    for words, word_type in _LOOKUP_ORDER:
        if key in words:
            return word_type
    return WordType.NOUN
