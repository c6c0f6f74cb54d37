"""Hand scoring and round resolution for Nine-Point (Oicho-Kabu)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .cards import NineCard
from .scoring import RoundOutcome

MAX_HAND_SIZE = 3

HAND_NAMES: dict[int, str] = {
    0: "Buta",
    1: "Pin",
    2: "Nizou",
    3: "Santa",
    4: "Yotsuya",
    5: "Goke",
    6: "Roppou",
    7: "Naki",
    8: "Oicho",
    9: "Kabu",
}


class InvalidHand(ValueError):
    """Raised when a hand is outside the sizes the rules allow."""


class SpecialKind(Enum):
    NONE = "none"
    FOUR_ACE = "shippin"
    NINE_ACE = "kuppin"
    PAIR = "arashi"


SPECIAL_TIERS: dict[SpecialKind, int] = {
    SpecialKind.NONE: 0,
    SpecialKind.FOUR_ACE: 1,
    SpecialKind.NINE_ACE: 1,
    SpecialKind.PAIR: 2,
}


@dataclass(frozen=True)
class SpecialHand:
    kind: SpecialKind
    name: str = ""

    @property
    def tier(self) -> int:
        return SPECIAL_TIERS[self.kind]

    @property
    def is_special(self) -> bool:
        return self.kind is not SpecialKind.NONE


NO_SPECIAL = SpecialHand(SpecialKind.NONE)


def hand_value(cards: Sequence[NineCard]) -> int:
    """Return the hand's value: sum of card values modulo 10."""
    if not 1 <= len(cards) <= MAX_HAND_SIZE:
        raise InvalidHand(f"Hands hold 1 to {MAX_HAND_SIZE} cards, got {len(cards)}.")
    return sum(card.value for card in cards) % 10


def hand_name(value: int) -> str:
    name = HAND_NAMES.get(value)
    return f"{name} ({value})" if name else str(value)


def special_hand(cards: Sequence[NineCard]) -> SpecialHand:
    """Classify a two-card hand. Any other hand size is never special."""
    if len(cards) != 2:
        return NO_SPECIAL
    first, second = cards[0].value, cards[1].value
    if first == second:
        return SpecialHand(SpecialKind.PAIR, f"Arashi ({first}-{second})")
    values = {first, second}
    if values == {9, 1}:
        return SpecialHand(SpecialKind.NINE_ACE, "Kuppin (9-1)")
    if values == {4, 1}:
        return SpecialHand(SpecialKind.FOUR_ACE, "Shippin (4-1)")
    return NO_SPECIAL


def determine_round_winner(
    player_cards: Sequence[NineCard], opponent_cards: Sequence[NineCard]
) -> RoundOutcome:
    """Resolve a showdown.

    A higher special tier wins outright. Equal tiers fall back to the numeric
    hand value; equal values are a draw.
    """
    player_tier = special_hand(player_cards).tier
    opponent_tier = special_hand(opponent_cards).tier
    if player_tier != opponent_tier:
        return RoundOutcome.PLAYER if player_tier > opponent_tier else RoundOutcome.OPPONENT

    player_value = hand_value(player_cards)
    opponent_value = hand_value(opponent_cards)
    if player_value > opponent_value:
        return RoundOutcome.PLAYER
    if opponent_value > player_value:
        return RoundOutcome.OPPONENT
    return RoundOutcome.DRAW


class Decision(Enum):
    DRAW = "draw"
    STAND = "stand"
