from random import Random

import pytest

from bots.nine_point import NinePointBot, ai_decision
from kabu66.cards import NineCard, Suit
from kabu66.ninepoint import Decision
from kabu66.rules_schema import Difficulty


class FixedRoll:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class NoRoll:
    def random(self):
        raise AssertionError("rng should not be consulted")


def hand(*values):
    return [NineCard(Suit.CLUBS, value) for value in values]


@pytest.mark.parametrize(
    "difficulty, threshold",
    [(Difficulty.EASY, 4), (Difficulty.MEDIUM, 5), (Difficulty.HARD, 6)],
)
def test_stands_above_threshold_and_draws_below(difficulty, threshold):
    above = hand(threshold + 1) if threshold < 9 else hand(9)
    below = hand(threshold - 1)
    assert ai_decision(above, difficulty, rng=FixedRoll(0.99)) is Decision.STAND
    assert ai_decision(below, difficulty, rng=FixedRoll(0.99)) is Decision.DRAW


def test_medium_is_deterministic():
    assert ai_decision(hand(2, 3), "medium", rng=NoRoll()) is Decision.STAND
    assert ai_decision(hand(1, 3), "medium", rng=NoRoll()) is Decision.DRAW
    assert ai_decision(hand(10, 10), "medium", rng=NoRoll()) is Decision.DRAW


def test_easy_sometimes_stands_early():
    assert ai_decision(hand(1, 1), Difficulty.EASY, rng=FixedRoll(0.1)) is Decision.STAND
    assert ai_decision(hand(1, 1), Difficulty.EASY, rng=FixedRoll(0.5)) is Decision.DRAW
    assert ai_decision(hand(2, 2), Difficulty.EASY, rng=NoRoll()) is Decision.STAND


def test_hard_sometimes_draws_on_its_threshold():
    assert ai_decision(hand(3, 3), Difficulty.HARD, rng=FixedRoll(0.05)) is Decision.DRAW
    assert ai_decision(hand(3, 3), Difficulty.HARD, rng=FixedRoll(0.5)) is Decision.STAND
    assert ai_decision(hand(3, 4), Difficulty.HARD, rng=NoRoll()) is Decision.STAND
    assert ai_decision(hand(2, 3), Difficulty.HARD, rng=NoRoll()) is Decision.DRAW


def test_seeded_bots_replay_the_same_choices():
    hands = [hand(a, b) for a in range(1, 11) for b in range(1, 11)]
    first = NinePointBot(Difficulty.EASY, rng=Random(11))
    second = NinePointBot(Difficulty.EASY, rng=Random(11))
    assert [first.decide(h) for h in hands] == [second(h) for h in hands]


def test_easy_early_stand_rate_is_roughly_thirty_percent():
    bot = NinePointBot(Difficulty.EASY, rng=Random(12))
    decisions = [bot.decide(hand(1, 2)) for _ in range(2000)]
    rate = decisions.count(Decision.STAND) / len(decisions)
    assert 0.25 < rate < 0.35


def test_random_source_is_required():
    with pytest.raises(TypeError):
        ai_decision(hand(1, 1), Difficulty.EASY)
