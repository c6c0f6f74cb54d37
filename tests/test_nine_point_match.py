from random import Random

import pytest

from kabu66.cards import NineCard, Suit
from kabu66.deck import build_nine_point_deck
from kabu66.game import NinePointMatch, Phase, PhaseError
from kabu66.ninepoint import Decision
from kabu66.scoring import MatchOutcome, RoundOutcome


def stacked(*cards):
    rest = [card for card in build_nine_point_deck() if card not in cards]
    return list(cards) + rest


PLAYER_KABU = stacked(
    NineCard(Suit.HEARTS, 4),
    NineCard(Suit.HEARTS, 5),
    NineCard(Suit.SPADES, 1),
    NineCard(Suit.SPADES, 2),
)


def always(decision):
    return lambda cards: decision


def test_start_round_deals_two_cards_each():
    match = NinePointMatch(rng=Random(1))
    match.start_round()
    assert match.phase is Phase.PLAYER_TURN
    assert len(match.player.cards) == 2
    assert len(match.opponent.cards) == 2
    assert len(match.deck) == 36
    assert all(card.face_up for card in match.player.cards)
    assert not any(card.face_up for card in match.opponent.cards)


def test_player_stand_then_opponent_resolves_round():
    match = NinePointMatch(rng=Random(1))
    match.start_round(PLAYER_KABU)
    match.player_stand()
    assert match.phase is Phase.OPPONENT_TURN

    report = match.play_opponent_turn(always(Decision.STAND))
    assert report.round_outcome is RoundOutcome.PLAYER
    assert report.match_outcome is None
    assert match.phase is Phase.ROUND_END
    assert match.player_wins == 1
    assert all(card.face_up for card in match.opponent.cards)


def test_player_cannot_act_twice():
    match = NinePointMatch(rng=Random(2))
    match.start_round()
    card = match.player_draw()
    assert card is not None
    assert len(match.player.cards) == 3
    with pytest.raises(PhaseError):
        match.player_draw()
    with pytest.raises(PhaseError):
        match.player_stand()
    assert len(match.player.cards) == 3


def test_drawing_from_empty_deck_counts_as_stand():
    cards = [
        NineCard(Suit.HEARTS, 1),
        NineCard(Suit.HEARTS, 2),
        NineCard(Suit.CLUBS, 3),
        NineCard(Suit.CLUBS, 4),
    ]
    match = NinePointMatch(rng=Random(3))
    match.start_round(cards)
    assert match.player_draw() is None
    assert match.player.has_stood
    assert len(match.player.cards) == 2
    assert match.phase is Phase.OPPONENT_TURN

    match.play_opponent_turn(always(Decision.DRAW))
    assert len(match.opponent.cards) == 2
    assert match.phase is Phase.ROUND_END


def test_opponent_draw_loop_stops_at_three_cards():
    calls = []

    def decide(cards):
        calls.append(len(cards))
        return Decision.DRAW

    match = NinePointMatch(rng=Random(4))
    match.start_round()
    match.player_stand()
    match.play_opponent_turn(decide)
    assert len(match.opponent.cards) == 3
    assert calls == [2]
    assert match.opponent.has_drawn


def test_actions_out_of_phase_are_rejected():
    match = NinePointMatch(rng=Random(5))
    with pytest.raises(PhaseError):
        match.player_draw()
    match.start_round()
    with pytest.raises(PhaseError):
        match.play_opponent_turn(always(Decision.STAND))
    with pytest.raises(PhaseError):
        match.next_round()


def test_match_ends_after_exactly_five_rounds():
    match = NinePointMatch(rng=Random(6))
    match.start_round(PLAYER_KABU)
    for round_number in range(1, 6):
        assert match.current_round == round_number
        match.player_stand()
        report = match.play_opponent_turn(always(Decision.STAND))
        if round_number < 5:
            assert match.phase is Phase.ROUND_END
            assert report.match_outcome is None
            match.next_round(PLAYER_KABU)

    assert match.phase is Phase.GAME_END
    assert match.player_wins == 5
    assert len(match.history) == 5
    assert match.last_report.match_outcome is MatchOutcome.WIN
    assert match.match_outcome is MatchOutcome.WIN
    with pytest.raises(PhaseError):
        match.next_round()


def test_match_outcome_counts_draws_as_neither_side():
    match = NinePointMatch(rng=Random(7))
    drawn_deal = stacked(
        NineCard(Suit.HEARTS, 3),
        NineCard(Suit.HEARTS, 4),
        NineCard(Suit.SPADES, 3),
        NineCard(Suit.SPADES, 4),
    )
    match.start_round(drawn_deal)
    for round_number in range(1, 6):
        match.player_stand()
        match.play_opponent_turn(always(Decision.STAND))
        if round_number < 5:
            match.next_round(drawn_deal)
    assert match.draws == 5
    assert match.match_outcome is MatchOutcome.DRAW
