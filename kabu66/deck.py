"""Deck creation, shuffling and dealing utilities."""

from __future__ import annotations

from enum import Enum
from random import Random
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import SUITS, AnyCard, Card, CardT, NineCard, RANK_ORDER, hidden, revealed

NINE_POINT_DECK_SIZE = 40
SIXTY_SIX_DECK_SIZE = 24


class DeckIntegrityError(RuntimeError):
    """Raised when a card is duplicated or lost."""


class DeckKind(Enum):
    NINE_POINT = "nine_point"
    SIXTY_SIX = "sixty_six"


def build_nine_point_deck() -> List[NineCard]:
    """Return the ordered 40-card deck (values 1-10 in four suits)."""
    return [NineCard(suit, value) for suit in SUITS for value in range(1, 11)]


def build_sixty_six_deck() -> List[Card]:
    """Return the ordered 24-card deck."""
    return [Card(rank, suit) for suit in SUITS for rank in reversed(RANK_ORDER)]


def shuffle(deck: Sequence[CardT], rng: Optional[Random] = None) -> List[CardT]:
    """Return a uniformly shuffled copy of ``deck``."""
    if rng is None:
        rng = Random()
    cards = list(deck)
    rng.shuffle(cards)
    return cards


def create_deck(kind: DeckKind, rng: Optional[Random] = None) -> List[AnyCard]:
    if kind is DeckKind.NINE_POINT:
        return shuffle(build_nine_point_deck(), rng)
    return shuffle(build_sixty_six_deck(), rng)


def deal(deck: Sequence[CardT], count: int) -> Tuple[List[CardT], List[CardT]]:
    """Take the first ``count`` cards face up; return them and the remainder."""
    if count < 0:
        raise ValueError("Cannot deal a negative number of cards.")
    if count > len(deck):
        raise DeckIntegrityError(f"Cannot deal {count} cards from a deck of {len(deck)}.")
    cards = [revealed(card) for card in deck[:count]]
    return cards, list(deck[count:])


def draw_one(deck: Sequence[CardT]) -> Tuple[Optional[CardT], List[CardT]]:
    """Draw the top card face up. ``None`` signals an exhausted stock."""
    if not deck:
        return None, list(deck)
    return revealed(deck[0]), list(deck[1:])


def ensure_unique(cards: Iterable[AnyCard]) -> None:
    seen: set[AnyCard] = set()
    for card in cards:
        if card in seen:
            raise DeckIntegrityError(f"Duplicate card detected: {card}")
        seen.add(card)


def deal_sixty_six(
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
    hand_size: int = 6,
) -> Tuple[List[Card], List[Card], Optional[Card], List[Card]]:
    """Deal two hands, turn up the trump card and return the face-down stock.

    Returns ``(player_hand, opponent_hand, trump_card, stock)``. The trump
    card stays face up as the last card of the stock.
    """
    if deck is not None:
        cards = list(deck)
    else:
        cards = shuffle(build_sixty_six_deck(), rng)
    ensure_unique(cards)
    if len(cards) < 2 * hand_size:
        raise DeckIntegrityError("Deck too small for two hands.")

    player_hand, remaining = deal(cards, hand_size)
    opponent_hand, remaining = deal(remaining, hand_size)
    trump_card, stock = draw_one(remaining)
    return player_hand, [hidden(card) for card in opponent_hand], trump_card, [hidden(card) for card in stock]
