"""Unit tests for the pure drill state transitions."""

import random

import pytest

from markup import parse
from models import Block, Feedback, SessionState
from session import (
    Advance,
    InvalidElapsed,
    MoveBlock,
    Phase,
    SetFreeText,
    Submit,
    SuccessElapsed,
    active_drill,
    answers_match,
    can_advance,
    is_all_complete,
    is_sentence_finished,
    make_blocks,
    normalize,
    phase,
    reduce,
)


def step(state, action, sentences, shuffle=False):
    return reduce(state, action, sentences, random.Random(1), shuffle)


def run(sentences, *actions, shuffle=False, state=None):
    if state is None:
        state = SessionState()
    for action in actions:
        state = step(state, action, sentences, shuffle)
    return state


def place_all(state, sentences):
    for block in list(state.pool):
        state = step(state, MoveBlock(block_id=block.id), sentences)
    return state


class TestNormalize:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("He Had Gone.", "hehadgone"),
            ("  it's   NOT easy!! ", "itsnoteasy"),
            ("22-year-old", "22yearold"),
            ("老实说", ""),
            ("", ""),
        ],
    )
    def test_normalize(self, text, expected):
        assert normalize(text) == expected

    @pytest.mark.parametrize(
        "text", ["He Had Gone.", "Ünïcödé—and “quotes”", "a  b\tc\n", "???", "X1 y2"]
    )
    def test_idempotent(self, text):
        assert normalize(normalize(text)) == normalize(text)

    def test_answers_match_ignores_case_and_punctuation(self):
        assert answers_match("He Had Gone.", "he had gone")
        assert answers_match("hehadgone", "he had gone")
        assert not answers_match("he has gone", "he had gone")


class TestMakeBlocks:
    def test_blocks_take_position_as_id(self, sample_sentences):
        drill = sample_sentences[1].drills[0]
        blocks = make_blocks(drill)

        assert [b.id for b in blocks] == [0, 1, 2, 3, 4]
        assert [b.text for b in blocks] == ["go", "to", "a", "film", "set"]

    def test_blocks_are_classified(self, sample_sentences):
        blocks = make_blocks(sample_sentences[1].drills[0])

        assert blocks[0].word_type.value == "verb"
        assert blocks[1].word_type.value == "preposition"


class TestAdvance:
    def test_start_moves_to_first_sentence(self, sample_sentences):
        state = run(sample_sentences, Advance())

        assert state.sentence_index == 0
        assert state.drill_index == 0
        assert state.pool == ()

    def test_start_opens_first_drill_when_present(self):
        sentences = parse("{He had gone|had gone|去}. Bye.")
        state = run(sentences, Advance())

        assert state.sentence_index == 0
        assert sorted(b.text for b in state.pool) == ["gone", "had"]
        assert state.feedback == Feedback.IDLE

    def test_locked_while_drills_open(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        assert state.sentence_index == 1

        locked = step(state, Advance(), sample_sentences)

        assert locked is state

    def test_moves_on_after_sentence_finished(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        state = place_all(state, sample_sentences)
        state = step(state, Submit(text="He had gone to a film set"), sample_sentences)
        state = step(state, SuccessElapsed(generation=state.generation), sample_sentences)
        assert is_sentence_finished(sample_sentences, state)

        state = step(state, Advance(), sample_sentences)

        assert state.sentence_index == 2
        assert state.drill_index == 0
        assert [b.text for b in state.pool] == ["to", "be", "honest"]

    def test_terminal_at_last_sentence(self):
        sentences = parse("One. Two.")
        state = run(sentences, Advance(), Advance())
        assert is_all_complete(sentences, state)

        assert step(state, Advance(), sentences) is state

    def test_empty_lesson_never_starts(self):
        state = SessionState()
        assert step(state, Advance(), []) is state
        assert phase([], state) == Phase.ALL_COMPLETE

    def test_shuffle_keeps_the_same_blocks(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance(), shuffle=True)

        assert sorted(b.id for b in state.pool) == [0, 1, 2, 3, 4]


class TestMoveBlock:
    @pytest.fixture
    def open_state(self, sample_sentences):
        return run(sample_sentences, Advance(), Advance())

    def test_pick_appends_to_placed(self, open_state, sample_sentences):
        state = step(open_state, MoveBlock(block_id=3), sample_sentences)
        state = step(state, MoveBlock(block_id=0), sample_sentences)

        assert [b.id for b in state.placed] == [3, 0]
        assert [b.id for b in state.pool] == [1, 2, 4]

    def test_unpick_returns_block_to_end_of_pool(self, open_state, sample_sentences):
        state = step(open_state, MoveBlock(block_id=0), sample_sentences)
        state = step(state, MoveBlock(block_id=0, from_pool=False), sample_sentences)

        assert state.placed == ()
        assert [b.id for b in state.pool] == [1, 2, 3, 4, 0]

    def test_unknown_block_is_ignored(self, open_state, sample_sentences):
        assert step(open_state, MoveBlock(block_id=42), sample_sentences) is open_state
        assert (
            step(open_state, MoveBlock(block_id=0, from_pool=False), sample_sentences)
            is open_state
        )

    def test_locked_after_correct_answer(self, open_state, sample_sentences):
        state = place_all(open_state, sample_sentences)
        state = step(state, Submit(text="he had gone to a film set"), sample_sentences)
        assert state.feedback == Feedback.CORRECT

        assert (
            step(state, MoveBlock(block_id=0, from_pool=False), sample_sentences)
            is state
        )

    def test_ignored_without_open_drill(self, sample_sentences):
        state = run(sample_sentences, Advance())
        assert step(state, MoveBlock(block_id=0), sample_sentences) is state

    def test_clears_invalid_feedback(self, open_state, sample_sentences):
        state = step(open_state, Submit(text="anything"), sample_sentences)
        assert state.feedback == Feedback.INVALID

        state = step(state, MoveBlock(block_id=1), sample_sentences)

        assert state.feedback == Feedback.IDLE


class TestSubmit:
    @pytest.fixture
    def ready_state(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        return place_all(state, sample_sentences)

    def test_correct_answer(self, ready_state, sample_sentences):
        state = step(ready_state, Submit(text="He had gone to a film set."), sample_sentences)

        assert state.feedback == Feedback.CORRECT
        assert state.free_text == "He had gone to a film set."

    def test_wrong_answer(self, ready_state, sample_sentences):
        state = step(ready_state, Submit(text="go to a film set"), sample_sentences)

        assert state.feedback == Feedback.INVALID
        assert len(state.placed) == 5

    def test_blocked_while_pool_not_empty(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())

        state = step(state, Submit(text="he had gone to a film set"), sample_sentences)

        assert state.feedback == Feedback.INVALID

    def test_word_order_is_not_scored(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        for block_id in [4, 3, 2, 1, 0]:
            state = step(state, MoveBlock(block_id=block_id), sample_sentences)

        state = step(state, Submit(text="he had gone to a film set"), sample_sentences)

        assert state.feedback == Feedback.CORRECT

    def test_ignored_without_open_drill(self, sample_sentences):
        before = SessionState()
        assert step(before, Submit(text="x"), sample_sentences) is before

        started = run(sample_sentences, Advance())
        assert step(started, Submit(text="x"), sample_sentences) is started

    def test_ignored_once_correct(self, ready_state, sample_sentences):
        state = step(ready_state, Submit(text="he had gone to a film set"), sample_sentences)

        assert step(state, Submit(text="wrong"), sample_sentences) is state

    def test_scenario_single_word_pool(self):
        sentences = parse("Hi. {He had gone|go|go there}.")
        state = run(sentences, Advance(), Advance())
        assert [b.text for b in state.pool] == ["go"]

        state = step(state, MoveBlock(block_id=0), sentences)
        state = step(state, Submit(text="he had gone"), sentences)

        assert state.feedback == Feedback.CORRECT


class TestDeferredActions:
    def _solve(self, state, sentences, answer):
        state = place_all(state, sentences)
        return step(state, Submit(text=answer), sentences)

    def test_success_on_only_drill_clears_input(self, sample_sentences):
        sentences = sample_sentences
        state = run(sentences, Advance(), Advance())
        state = self._solve(state, sentences, "he had gone to a film set")
        state = step(state, SuccessElapsed(generation=state.generation), sentences)

        # Only one drill in sentence 1
        assert state.drill_index == 1
        assert state.feedback == Feedback.IDLE
        assert state.pool == () and state.placed == ()

    def test_success_opens_following_drill(self, sample_sentences):
        sentences = sample_sentences
        state = run(sentences, Advance(), Advance())
        state = self._solve(state, sentences, "he had gone to a film set")
        state = run(sentences, SuccessElapsed(generation=state.generation), Advance(), state=state)
        state = self._solve(state, sentences, "to be honest")
        state = step(state, SuccessElapsed(generation=state.generation), sentences)

        assert state.sentence_index == 2
        assert state.drill_index == 1
        assert [b.text for b in state.pool] == ["give", "up"]
        assert state.free_text == ""

    def test_last_drill_does_not_advance_sentence(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        state = self._solve(state, sample_sentences, "he had gone to a film set")
        state = step(state, SuccessElapsed(generation=state.generation), sample_sentences)

        assert state.sentence_index == 1
        assert phase(sample_sentences, state) == Phase.SENTENCE_COMPLETE
        assert can_advance(sample_sentences, state)

    def test_invalid_elapsed_resets_feedback_only(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        state = self._solve(state, sample_sentences, "nope")
        state = step(state, InvalidElapsed(generation=state.generation), sample_sentences)

        assert state.feedback == Feedback.IDLE
        assert state.free_text == "nope"
        assert len(state.placed) == 5

    def test_stale_callbacks_are_ignored(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        state = self._solve(state, sample_sentences, "nope")
        stale = state.generation
        state = step(state, SetFreeText(text="he had"), sample_sentences)

        assert step(state, InvalidElapsed(generation=stale), sample_sentences) is state
        assert step(state, SuccessElapsed(generation=state.generation), sample_sentences) is state

    def test_set_free_text_ignored_once_correct(self, sample_sentences):
        state = run(sample_sentences, Advance(), Advance())
        state = self._solve(state, sample_sentences, "he had gone to a film set")

        assert step(state, SetFreeText(text="x"), sample_sentences) is state


class TestPhase:
    def test_walkthrough(self, sample_sentences):
        s = sample_sentences
        state = SessionState()
        assert phase(s, state) == Phase.NOT_STARTED

        state = step(state, Advance(), s)
        assert phase(s, state) == Phase.SENTENCE_COMPLETE

        state = step(state, Advance(), s)
        assert phase(s, state) == Phase.AWAITING_ORDERING
        assert active_drill(s, state).meaning == "去电影片场"

        state = place_all(state, s)
        assert phase(s, state) == Phase.AWAITING_ANSWER

        state = step(state, Submit(text="wrong"), s)
        assert phase(s, state) == Phase.FEEDBACK_INVALID

        state = step(state, Submit(text="he had gone to a film set"), s)
        assert phase(s, state) == Phase.FEEDBACK_CORRECT

    def test_all_complete(self):
        sentences = parse("Only one.")
        state = run(sentences, Advance())

        assert phase(sentences, state) == Phase.ALL_COMPLETE
        assert not can_advance(sentences, state)


class TestMonotonicity:
    @pytest.mark.parametrize("seed", range(5))
    def test_progress_never_moves_backwards(self, sample_sentences, seed):
        rng = random.Random(seed)
        answers = ["he had gone to a film set", "to be honest", "wanted to give up", "nope"]
        state = SessionState()
        progress = (state.sentence_index, state.drill_index)

        for _ in range(300):
            choice = rng.randrange(6)
            if choice == 0:
                action = Advance()
            elif choice == 1 and (state.pool or state.placed):
                blocks = list(state.pool) + list(state.placed)
                block = rng.choice(blocks)
                action = MoveBlock(block_id=block.id, from_pool=block in state.pool)
            elif choice == 2:
                action = Submit(text=rng.choice(answers))
            elif choice == 3:
                action = SuccessElapsed(generation=state.generation)
            elif choice == 4:
                action = InvalidElapsed(generation=state.generation)
            else:
                action = SetFreeText(text=rng.choice(answers))

            state = reduce(state, action, sample_sentences, rng)
            current = (state.sentence_index, state.drill_index)
            assert current >= progress
            progress = current

        assert isinstance(state, SessionState)

    def test_snapshots_are_not_mutated(self, sample_sentences):
        before = run(sample_sentences, Advance(), Advance())
        pool = before.pool

        step(before, MoveBlock(block_id=0), sample_sentences)

        assert before.pool == pool
        assert before.placed == ()


def test_unknown_action_rejected(sample_sentences):
    with pytest.raises(TypeError):
        reduce(SessionState(), Block(id=0, text="x"), sample_sentences)
