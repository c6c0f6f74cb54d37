"""Trick representation and resolution for Sixty-Six."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .cards import Card, Suit, card_strength
from .scoring import Side


class TrickError(RuntimeError):
    """Raised when trick play breaks ordering constraints."""


def trick_winner(led_card: Card, response_card: Card, trump: Optional[Suit], leader: Side) -> Side:
    """Return the side that takes the trick.

    The leader is passed explicitly so the result never depends on which
    physical card belongs to whom.
    """
    follower = leader.other
    if led_card.suit is response_card.suit:
        return leader if card_strength(led_card) > card_strength(response_card) else follower
    if trump is not None:
        if led_card.suit is trump:
            return leader
        if response_card.suit is trump:
            return follower
    return leader


def trick_points(cards: Iterable[Card]) -> int:
    return sum(card.point_value() for card in cards)


@dataclass
class Trick:
    leader: Side
    plays: List[Tuple[Side, Card]] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.plays

    def is_full(self) -> bool:
        return len(self.plays) == 2

    def add_play(self, side: Side, card: Card) -> None:
        if self.is_full():
            raise TrickError("Trick already complete.")
        if not self.plays and side is not self.leader:
            raise TrickError("Only the leader can start the trick.")
        if self.plays and side is self.plays[0][0]:
            raise TrickError("Leader cannot play twice in the same trick.")
        self.plays.append((side, card))

    def led_card(self) -> Optional[Card]:
        return self.plays[0][1] if self.plays else None

    def card_of(self, side: Side) -> Optional[Card]:
        return next((card for played_by, card in self.plays if played_by is side), None)

    def winner(self, trump: Optional[Suit]) -> Side:
        if not self.is_full():
            raise TrickError("Cannot determine the winner of an incomplete trick.")
        return trick_winner(self.plays[0][1], self.plays[1][1], trump, self.leader)

    def points(self) -> int:
        return trick_points(card for _, card in self.plays)
