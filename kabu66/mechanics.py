"""Legal move generation for Sixty-Six."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .cards import Card, Suit


def legal_plays(
    hand: Iterable[Card],
    led_card: Optional[Card],
    trump: Optional[Suit],
    stock_empty: bool,
) -> List[Card]:
    """Return the subset of ``hand`` that may be played, in hand order.

    Following suit always comes first. Trump is only forced once the stock
    is exhausted or closed and the led suit cannot be followed.
    """
    cards = list(hand)
    if led_card is None:
        return cards

    in_led = [card for card in cards if card.suit is led_card.suit]
    if in_led:
        return in_led

    if stock_empty and trump is not None:
        trump_cards = [card for card in cards if card.suit is trump]
        if trump_cards:
            return trump_cards

    return cards


def is_legal_play(
    card: Card,
    hand: Iterable[Card],
    led_card: Optional[Card],
    trump: Optional[Suit],
    stock_empty: bool,
) -> bool:
    return card in legal_plays(hand, led_card, trump, stock_empty)
