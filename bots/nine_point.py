"""Stand/draw policy for the Nine-Point AI."""

from __future__ import annotations

from random import Random
from typing import Optional, Sequence, Union

from kabu66.cards import NineCard
from kabu66.ninepoint import Decision, hand_value
from kabu66.rules_schema import Difficulty, NinePointRules

from .base import BotStrategy


def ai_decision(
    cards: Sequence[NineCard],
    difficulty: Union[Difficulty, str],
    rng: Random,
    rules: Optional[NinePointRules] = None,
) -> Decision:
    """Stand once the hand reaches the difficulty's threshold, else draw.

    Easy sometimes stands early; hard sometimes draws on a hand sitting
    exactly on its threshold. ``rng`` is only consulted when one of those
    perturbations could apply.
    """
    rules = rules or NinePointRules()
    difficulty = Difficulty(difficulty)
    value = hand_value(cards)
    threshold = rules.stand_thresholds[difficulty]

    if value >= threshold:
        probability = rules.borderline_draw_probability.get(difficulty, 0.0)
        if value == threshold and probability > 0 and rng.random() < probability:
            return Decision.DRAW
        return Decision.STAND

    probability = rules.early_stand_probability.get(difficulty, 0.0)
    if probability > 0 and rng.random() < probability:
        return Decision.STAND
    return Decision.DRAW


class NinePointBot(BotStrategy):
    name = "NinePoint"

    def __init__(
        self,
        difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
        rng: Optional[Random] = None,
        rules: Optional[NinePointRules] = None,
    ) -> None:
        super().__init__(difficulty, rng)
        self.rules = rules or NinePointRules()

    def decide(self, cards: Sequence[NineCard]) -> Decision:
        return ai_decision(cards, self.difficulty, self.rng, self.rules)

    __call__ = decide
