"""Card-choice policy for the Sixty-Six AI."""

from __future__ import annotations

from random import Random
from typing import Optional, Sequence, Union

from kabu66.cards import Card, Suit, card_strength
from kabu66.mechanics import legal_plays
from kabu66.rules_schema import Difficulty, SixtySixRules
from kabu66.scoring import Side
from kabu66.state import GameState, marriage_bonus
from kabu66.trick import trick_winner

from .base import BotStrategy


def _cheapest(cards: Sequence[Card], trump: Optional[Suit]) -> Card:
    return min(cards, key=lambda c: (card_strength(c), c.suit is trump, c.point_value()))


def ai_choose_card(
    hand: Sequence[Card],
    led_card: Optional[Card],
    difficulty: Union[Difficulty, str],
    *,
    rng: Random,
    trump: Optional[Suit] = None,
    stock_empty: bool = False,
    trick_number: int = 1,
    rules: Optional[SixtySixRules] = None,
) -> Card:
    """Pick a card from ``legal_plays``.

    Easy plays a random legal card. Medium takes the trick with its cheapest
    winning card when it can, otherwise sheds its cheapest card. Hard also
    leads a marriage card when one scores.
    """
    difficulty = Difficulty(difficulty)
    legal = legal_plays(hand, led_card, trump, stock_empty)
    if not legal:
        raise ValueError("Cannot choose a card from an empty hand.")

    if difficulty is Difficulty.EASY:
        return rng.choice(legal)

    if led_card is not None:
        leader = Side.PLAYER
        winning = [card for card in legal if trick_winner(led_card, card, trump, leader) is leader.other]
        if winning:
            return _cheapest(winning, trump)
        return _cheapest(legal, trump)

    if difficulty is Difficulty.HARD:
        scoring = [
            card
            for card in legal
            if marriage_bonus(list(hand), card, trump, trick_number, rules) > 0
        ]
        if scoring:
            return max(scoring, key=lambda c: (marriage_bonus(list(hand), c, trump, trick_number, rules), -card_strength(c)))

    return _cheapest(legal, trump)


class SixtySixBot(BotStrategy):
    name = "SixtySix"

    def choose_card(self, state: GameState, side: Side) -> Card:
        return ai_choose_card(
            state.hand(side),
            state.led_card(),
            self.difficulty,
            trump=state.trump_suit,
            stock_empty=state.stock_empty(),
            rng=self.rng,
            trick_number=state.trick_number,
            rules=state.rules,
        )

    def wants_exchange(self, state: GameState, side: Side) -> bool:
        return self.difficulty is Difficulty.HARD and state.can_exchange_trump(side)
