from collections import Counter
from random import Random

import pytest

from kabu66.cards import Card, NineCard, Rank, Suit
from kabu66.deck import (
    DeckIntegrityError,
    DeckKind,
    build_nine_point_deck,
    build_sixty_six_deck,
    create_deck,
    deal,
    deal_sixty_six,
    draw_one,
    ensure_unique,
    shuffle,
)


def test_deck_sizes_and_uniqueness():
    nine = build_nine_point_deck()
    sixty_six = build_sixty_six_deck()
    assert len(nine) == 40
    assert len(set(nine)) == 40
    assert len(sixty_six) == 24
    assert len(set(sixty_six)) == 24
    assert all(not card.face_up for card in nine + sixty_six)


def test_create_deck_is_shuffled_permutation():
    deck = create_deck(DeckKind.SIXTY_SIX, Random(3))
    assert Counter(deck) == Counter(build_sixty_six_deck())
    assert create_deck(DeckKind.SIXTY_SIX, Random(3)) == deck


def test_shuffle_does_not_mutate_input():
    deck = build_nine_point_deck()
    original = list(deck)
    shuffled = shuffle(deck, Random(1))
    assert deck == original
    assert sorted(shuffled, key=lambda c: (c.suit.value, c.value)) == sorted(
        original, key=lambda c: (c.suit.value, c.value)
    )


def test_deal_returns_face_up_cards_and_new_remainder():
    deck = build_nine_point_deck()
    cards, remaining = deal(deck, 2)
    assert cards == deck[:2]
    assert all(card.face_up for card in cards)
    assert remaining == deck[2:]
    assert len(deck) == 40
    assert not deck[0].face_up


def test_deal_more_than_available_fails_loudly():
    with pytest.raises(DeckIntegrityError):
        deal([NineCard(Suit.HEARTS, 1)], 2)


def test_draw_one_from_empty_deck_returns_none():
    card, remaining = draw_one([])
    assert card is None
    assert remaining == []


def test_draw_one_takes_top_card():
    deck = [Card(Rank.ACE, Suit.SPADES), Card(Rank.NINE, Suit.HEARTS)]
    card, remaining = draw_one(deck)
    assert card == Card(Rank.ACE, Suit.SPADES)
    assert card.face_up
    assert remaining == [Card(Rank.NINE, Suit.HEARTS)]
    assert len(deck) == 2


@pytest.mark.parametrize("seed", range(20))
def test_no_card_is_lost_or_duplicated(seed):
    rng = Random(seed)
    original = create_deck(DeckKind.NINE_POINT, rng)
    remaining = list(original)
    handed_out = []
    while remaining:
        if rng.random() < 0.5:
            cards, remaining = deal(remaining, rng.randint(0, min(3, len(remaining))))
            handed_out.extend(cards)
        else:
            card, remaining = draw_one(remaining)
            handed_out.append(card)
    card, remaining = draw_one(remaining)
    assert card is None
    assert Counter(handed_out + remaining) == Counter(original)


def test_ensure_unique_rejects_duplicates():
    with pytest.raises(DeckIntegrityError):
        ensure_unique([Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.SPADES, face_up=True)])


def test_deal_sixty_six_layout():
    player, opponent, trump_card, stock = deal_sixty_six(rng=Random(5))
    assert len(player) == 6
    assert len(opponent) == 6
    assert trump_card is not None and trump_card.face_up
    assert len(stock) == 11
    assert all(card.face_up for card in player)
    assert not any(card.face_up for card in opponent + stock)
    assert Counter(player + opponent + [trump_card] + stock) == Counter(build_sixty_six_deck())


def test_shuffle_positions_are_uniform():
    deck = build_sixty_six_deck()
    size = len(deck)
    trials = 10_000
    rng = Random(2024)
    counts = {card: [0] * size for card in deck}
    for _ in range(trials):
        for position, card in enumerate(shuffle(deck, rng)):
            counts[card][position] += 1

    expected = trials / size
    total = 0.0
    for card, positions in counts.items():
        chi_square = sum((observed - expected) ** 2 / expected for observed in positions)
        # 23 degrees of freedom; p < 1e-6 is far above this bound.
        assert chi_square < 80, (card, chi_square)
        total += chi_square
    # 529 degrees of freedom overall.
    assert total < 725
