"""Shared pytest fixtures for the Phrase Master test suite."""

import random

import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import SessionConfig
from markup import parse
from models import Sentence
from session import DrillSession
from timers import TaskScheduler


class FakeClock:
    """Manually advanced clock for scheduler tests."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        """Drop-in for time.sleep that just moves the clock."""
        self.advance(seconds)


SAMPLE_LESSON = (
    "Hello there. "
    "Yesterday {he had gone to a film set|go to a film set|去电影片场} with friends. "
    "{To be honest|to be honest|老实说}, he {wanted to give up|give up|放弃} that day!"
)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_LESSON


@pytest.fixture
def sample_sentences() -> list[Sentence]:
    """Three sentences: no drills, one drill, two drills."""
    return parse(SAMPLE_LESSON)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ordered_config() -> SessionConfig:
    """Config that keeps prompt words in their written order."""
    return SessionConfig(shuffle_blocks=False, success_delay=1.2, invalid_delay=0.5)


@pytest.fixture
def session(sample_sentences, ordered_config, fake_clock) -> DrillSession:
    """A session on the sample lesson driven by a fake clock."""
    return DrillSession(
        sample_sentences,
        config=ordered_config,
        scheduler=TaskScheduler(clock=fake_clock),
        rng=random.Random(0),
    )


def place_all(session: DrillSession) -> None:
    """Move every pool block to the answer row in pool order."""
    for block in list(session.state.pool):
        session.move_block(block.id, from_pool=True)
