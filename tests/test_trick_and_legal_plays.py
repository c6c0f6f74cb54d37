import pytest

from kabu66.cards import Card, Rank, Suit
from kabu66.mechanics import is_legal_play, legal_plays
from kabu66.scoring import Side
from kabu66.trick import Trick, TrickError, trick_points, trick_winner


def test_higher_card_of_led_suit_wins():
    winner = trick_winner(Card(Rank.QUEEN, Suit.SPADES), Card(Rank.KING, Suit.SPADES), Suit.HEARTS, Side.PLAYER)
    assert winner is Side.OPPONENT


def test_ten_outranks_king():
    winner = trick_winner(Card(Rank.TEN, Suit.CLUBS), Card(Rank.KING, Suit.CLUBS), None, Side.OPPONENT)
    assert winner is Side.OPPONENT


def test_trump_beats_led_suit():
    winner = trick_winner(Card(Rank.JACK, Suit.HEARTS), Card(Rank.NINE, Suit.DIAMONDS), Suit.DIAMONDS, Side.PLAYER)
    assert winner is Side.OPPONENT


def test_off_suit_non_trump_loses_to_leader():
    winner = trick_winner(Card(Rank.TEN, Suit.CLUBS), Card(Rank.ACE, Suit.SPADES), Suit.HEARTS, Side.OPPONENT)
    assert winner is Side.OPPONENT


def test_led_trump_beats_off_suit():
    winner = trick_winner(Card(Rank.NINE, Suit.HEARTS), Card(Rank.ACE, Suit.SPADES), Suit.HEARTS, Side.PLAYER)
    assert winner is Side.PLAYER


def test_trick_points():
    assert trick_points([Card(Rank.ACE, Suit.HEARTS), Card(Rank.TEN, Suit.HEARTS)]) == 21
    assert trick_points([Card(Rank.NINE, Suit.HEARTS), Card(Rank.JACK, Suit.CLUBS)]) == 2


def test_trick_enforces_play_order():
    trick = Trick(leader=Side.PLAYER)
    with pytest.raises(TrickError):
        trick.add_play(Side.OPPONENT, Card(Rank.ACE, Suit.HEARTS))
    trick.add_play(Side.PLAYER, Card(Rank.QUEEN, Suit.SPADES))
    with pytest.raises(TrickError):
        trick.add_play(Side.PLAYER, Card(Rank.KING, Suit.SPADES))
    with pytest.raises(TrickError):
        trick.winner(Suit.HEARTS)
    trick.add_play(Side.OPPONENT, Card(Rank.KING, Suit.SPADES))
    assert trick.is_full()
    assert trick.winner(Suit.HEARTS) is Side.OPPONENT
    assert trick.points() == 7
    assert trick.card_of(Side.OPPONENT) == Card(Rank.KING, Suit.SPADES)
    with pytest.raises(TrickError):
        trick.add_play(Side.OPPONENT, Card(Rank.ACE, Suit.HEARTS))


HAND = [
    Card(Rank.ACE, Suit.SPADES),
    Card(Rank.NINE, Suit.HEARTS),
    Card(Rank.KING, Suit.HEARTS),
    Card(Rank.JACK, Suit.CLUBS),
]


def test_any_card_may_lead():
    assert legal_plays(HAND, None, Suit.HEARTS, stock_empty=True) == HAND


def test_must_follow_suit():
    led = Card(Rank.TEN, Suit.SPADES)
    assert legal_plays(HAND, led, Suit.HEARTS, stock_empty=False) == [Card(Rank.ACE, Suit.SPADES)]


def test_following_suit_takes_priority_over_trump():
    led = Card(Rank.TEN, Suit.CLUBS)
    assert legal_plays(HAND, led, Suit.HEARTS, stock_empty=True) == [Card(Rank.JACK, Suit.CLUBS)]


def test_any_card_when_void_while_stock_remains():
    led = Card(Rank.TEN, Suit.DIAMONDS)
    assert legal_plays(HAND, led, Suit.HEARTS, stock_empty=False) == HAND


def test_trump_forced_when_void_and_stock_empty():
    led = Card(Rank.TEN, Suit.DIAMONDS)
    assert legal_plays(HAND, led, Suit.HEARTS, stock_empty=True) == [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.KING, Suit.HEARTS),
    ]
    assert not is_legal_play(Card(Rank.ACE, Suit.SPADES), HAND, led, Suit.HEARTS, stock_empty=True)


def test_any_card_when_void_without_trump():
    led = Card(Rank.TEN, Suit.DIAMONDS)
    hand = [Card(Rank.ACE, Suit.SPADES), Card(Rank.JACK, Suit.CLUBS)]
    assert legal_plays(hand, led, Suit.HEARTS, stock_empty=True) == hand
