"""Card-related data structures and helpers for Nine-Point and Sixty-Six."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Mapping, Optional, Set, TypeVar, Union


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    NINE = "9"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    TEN = "10"
    ACE = "A"

    def __str__(self) -> str:
        return self.value


SUITS: list[Suit] = [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]

# Sixty-Six card point values.
CARD_POINTS: dict[Rank, int] = {
    Rank.NINE: 0,
    Rank.JACK: 2,
    Rank.QUEEN: 3,
    Rank.KING: 4,
    Rank.TEN: 10,
    Rank.ACE: 11,
}

# Rank order from lowest to highest for trick resolution.
RANK_ORDER: list[Rank] = [
    Rank.NINE,
    Rank.JACK,
    Rank.QUEEN,
    Rank.KING,
    Rank.TEN,
    Rank.ACE,
]

RANK_STRENGTH: dict[Rank, int] = {rank: index for index, rank in enumerate(RANK_ORDER)}

MARRIAGE_RANKS = frozenset({Rank.QUEEN, Rank.KING})

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.HEARTS: "H",
    Suit.DIAMONDS: "D",
    Suit.CLUBS: "C",
    Suit.SPADES: "S",
}

RED_SUIT_COLOR = "#C7243A"
BLACK_SUIT_COLOR = "#1A1A1A"

RANK_NAMES: dict[Rank, str] = {
    Rank.ACE: "Ace",
    Rank.TEN: "10",
    Rank.KING: "King",
    Rank.QUEEN: "Queen",
    Rank.JACK: "Jack",
    Rank.NINE: "9",
}


@dataclass(frozen=True)
class Card:
    """Immutable Sixty-Six card. ``face_up`` is display state only."""

    rank: Rank
    suit: Suit
    face_up: bool = field(default=False, compare=False)

    def point_value(self) -> int:
        return CARD_POINTS[self.rank]


@dataclass(frozen=True)
class NineCard:
    """Immutable Nine-Point card with a pip value from 1 to 10."""

    suit: Suit
    value: int
    face_up: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not 1 <= self.value <= 10:
            raise ValueError(f"Card value must be between 1 and 10, got {self.value}.")


AnyCard = Union[Card, NineCard]
CardT = TypeVar("CardT", Card, NineCard)


def revealed(card: CardT) -> CardT:
    return card if card.face_up else replace(card, face_up=True)


def hidden(card: CardT) -> CardT:
    return replace(card, face_up=False) if card.face_up else card


def card_strength(card: Card) -> int:
    """Return an integer strength used for ordering cards within a suit."""
    return RANK_STRENGTH[card.rank]


def is_complete_marriage(cards: Iterable[Card], suit: Suit) -> bool:
    """Return True if the iterable contains both K and Q of the given suit."""
    seen: Set[Rank] = {card.rank for card in cards if card.suit is suit}
    return Rank.KING in seen and Rank.QUEEN in seen


def suit_symbol(suit: Suit) -> str:
    return SUIT_SYMBOLS[suit]


def suit_color(suit: Suit) -> str:
    return RED_SUIT_COLOR if suit in (Suit.HEARTS, Suit.DIAMONDS) else BLACK_SUIT_COLOR


def serialize_card(card: AnyCard) -> dict[str, object]:
    if isinstance(card, NineCard):
        return {"suit": card.suit.value, "value": card.value, "face_up": card.face_up}
    return {"rank": card.rank.value, "suit": card.suit.value, "face_up": card.face_up}


def deserialize_card(payload: Mapping[str, object]) -> AnyCard:
    suit = Suit(str(payload["suit"]).lower())
    face_up = bool(payload.get("face_up", False))
    if "value" in payload:
        return NineCard(suit, int(payload["value"]), face_up=face_up)  # type: ignore[arg-type]
    return Card(Rank(str(payload["rank"]).upper()), suit, face_up=face_up)


def card_label(card: AnyCard) -> str:
    if isinstance(card, NineCard):
        return f"{card.value} of {card.suit.value.title()}"
    return f"{RANK_NAMES[card.rank]} of {card.suit.value.title()}"


def find_card(cards: Iterable[Card], rank: Rank, suit: Suit) -> Optional[Card]:
    return next((card for card in cards if card.rank is rank and card.suit is suit), None)
