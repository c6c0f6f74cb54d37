"""Deal state management for Sixty-Six."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .cards import MARRIAGE_RANKS, Card, Rank, Suit, find_card, hidden, is_complete_marriage, revealed
from .deck import draw_one, ensure_unique
from .mechanics import legal_plays
from .rules_schema import SixtySixRules
from .scoring import DealEnd, Side, compare_scores, game_points
from .trick import Trick, TrickError


class InvalidPlay(RuntimeError):
    """Raised when an illegal card play is attempted."""


class InvalidExchange(InvalidPlay):
    """Raised when the trump nine cannot be exchanged."""


class InvalidClose(InvalidPlay):
    """Raised when the stock cannot be closed."""


def marriage_bonus(
    hand: List[Card],
    played_card: Card,
    trump: Optional[Suit],
    trick_number: int,
    rules: Optional[SixtySixRules] = None,
) -> int:
    """Bonus for playing a Queen or King while holding its partner.

    ``hand`` is the hand before the card leaves it. Marriages do not count in
    the first trick.
    """
    rules = rules or SixtySixRules()
    if trick_number <= 1:
        return 0
    if played_card.rank not in MARRIAGE_RANKS:
        return 0
    if played_card not in hand or not is_complete_marriage(hand, played_card.suit):
        return 0
    if trump is not None and played_card.suit is trump:
        return rules.trump_marriage_points
    return rules.plain_marriage_points


def draw_from_talon(
    stock: List[Card], trump_card: Optional[Card]
) -> Tuple[Optional[Card], List[Card], Optional[Card]]:
    """Draw the next card; the face-up trump card comes last."""
    card, remaining = draw_one(stock)
    if card is not None:
        return card, remaining, trump_card
    if trump_card is not None:
        return trump_card, remaining, None
    return None, remaining, None


@dataclass
class SideState:
    hand: List[Card]
    tricks_won: List[Tuple[Card, Card]] = field(default_factory=list)
    score: int = 0
    marriage_bonus: int = 0
    game_points: int = 0

    def trick_points(self) -> int:
        return self.score - self.marriage_bonus


@dataclass(frozen=True)
class TrickRecord:
    number: int
    leader: Side
    led_card: Card
    response_card: Card
    winner: Side
    points: int


@dataclass(frozen=True)
class MarriageRecord:
    side: Side
    suit: Suit
    points: int
    trick_number: int


@dataclass
class GameState:
    """A single Sixty-Six deal from the first lead to the final trick."""

    player_hand: List[Card]
    opponent_hand: List[Card]
    stock: List[Card]
    trump_card: Optional[Card]
    leader: Side
    rules: SixtySixRules = field(default_factory=SixtySixRules)

    sides: Dict[Side, SideState] = field(init=False)
    trump_suit: Optional[Suit] = field(init=False)
    current_side: Side = field(init=False)
    current_trick: Trick = field(init=False)
    trick_number: int = field(init=False, default=1)
    stock_closed: bool = field(init=False, default=False)
    closed_by: Optional[Side] = field(init=False, default=None)
    last_trick: Optional[TrickRecord] = field(init=False, default=None)
    trick_history: List[TrickRecord] = field(init=False, default_factory=list)
    marriages: List[MarriageRecord] = field(init=False, default_factory=list)
    finished: bool = field(init=False, default=False)
    winner: Optional[Side] = field(init=False, default=None)
    end: Optional[DealEnd] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.sides = {
            Side.PLAYER: SideState(hand=[revealed(card) for card in self.player_hand]),
            Side.OPPONENT: SideState(hand=[hidden(card) for card in self.opponent_hand]),
        }
        self.stock = list(self.stock)
        self.trump_card = revealed(self.trump_card) if self.trump_card is not None else None
        self.trump_suit = self.trump_card.suit if self.trump_card is not None else None
        self.current_side = self.leader
        self.current_trick = Trick(leader=self.leader)
        ensure_unique(self.all_cards())

    # Queries -----------------------------------------------------------

    def hand(self, side: Side) -> List[Card]:
        return self.sides[side].hand

    def score(self, side: Side) -> int:
        return self.sides[side].score

    def talon_size(self) -> int:
        return len(self.stock) + (1 if self.trump_card is not None else 0)

    def stock_empty(self) -> bool:
        return self.stock_closed or self.talon_size() == 0

    def led_card(self) -> Optional[Card]:
        return self.current_trick.led_card()

    def all_cards(self) -> List[Card]:
        cards: List[Card] = list(self.stock)
        if self.trump_card is not None:
            cards.append(self.trump_card)
        for side_state in self.sides.values():
            cards.extend(side_state.hand)
            for led, response in side_state.tricks_won:
                cards.extend((led, response))
        cards.extend(card for _, card in self.current_trick.plays)
        return cards

    def available_moves(self, side: Side) -> List[Card]:
        self._ensure_turn(side)
        return legal_plays(self.hand(side), self.led_card(), self.trump_suit, self.stock_empty())

    def trump_nine(self, side: Side) -> Optional[Card]:
        if self.trump_suit is None:
            return None
        return find_card(self.hand(side), Rank.NINE, self.trump_suit)

    def can_exchange_trump(self, side: Side) -> bool:
        return self._exchange_blocker(side) is None

    def can_close_stock(self, side: Side) -> bool:
        return self._close_blocker(side) is None

    def is_finished(self) -> bool:
        return self.finished

    # Actions -----------------------------------------------------------

    def play_card(self, side: Side, card: Card) -> Optional[TrickRecord]:
        """Play ``card`` for ``side``; return the record if it completes the trick."""
        hand = self.hand(side)
        if card not in hand:
            raise InvalidPlay("Card not present in hand.")
        if card not in self.available_moves(side):
            raise InvalidPlay(f"Card {card.rank} of {card.suit} is not legal in this context.")

        bonus = marriage_bonus(hand, card, self.trump_suit, self.trick_number, self.rules)
        try:
            self.current_trick.add_play(side, revealed(card))
        except TrickError as exc:
            raise InvalidPlay(str(exc)) from exc
        hand.remove(card)

        if bonus:
            self.sides[side].marriage_bonus += bonus
            self.sides[side].score += bonus
            self.marriages.append(MarriageRecord(side, card.suit, bonus, self.trick_number))

        if self.current_trick.is_full():
            return self._complete_trick()
        self.current_side = side.other
        return None

    def exchange_trump_for_nine(self, side: Side) -> Card:
        """Swap the trump nine for the face-up trump card; return the card taken."""
        blocker = self._exchange_blocker(side)
        if blocker is not None:
            raise InvalidExchange(blocker)
        nine = self.trump_nine(side)
        assert nine is not None and self.trump_card is not None
        taken = self.trump_card
        hand = self.hand(side)
        hand.remove(nine)
        hand.append(revealed(taken) if side is Side.PLAYER else hidden(taken))
        self.trump_card = revealed(nine)
        return taken

    def close_stock(self, side: Side) -> None:
        blocker = self._close_blocker(side)
        if blocker is not None:
            raise InvalidClose(blocker)
        self.stock_closed = True
        self.closed_by = side

    # Internals ---------------------------------------------------------

    def _complete_trick(self) -> TrickRecord:
        trick = self.current_trick
        leader = trick.leader
        led_card = trick.plays[0][1]
        response_card = trick.plays[1][1]
        winner = trick.winner(self.trump_suit)
        points = trick.points()

        winner_state = self.sides[winner]
        winner_state.score += points
        winner_state.tricks_won.append((led_card, response_card))
        record = TrickRecord(self.trick_number, leader, led_card, response_card, winner, points)
        self.trick_history.append(record)
        self.last_trick = record

        self.leader = winner
        self.current_side = winner
        self.current_trick = Trick(leader=winner)

        target = self.rules.target_score
        player_score = self.score(Side.PLAYER)
        opponent_score = self.score(Side.OPPONENT)
        if player_score >= target or opponent_score >= target:
            if player_score >= target and opponent_score >= target:
                deal_winner = compare_scores(player_score, opponent_score)
            else:
                deal_winner = Side.PLAYER if player_score >= target else Side.OPPONENT
            self._finish(deal_winner, DealEnd.REACHED_TARGET)
            return record

        if not self.stock_closed:
            self._refill(first=winner)
        self.trick_number += 1

        if not self.hand(Side.PLAYER) and not self.hand(Side.OPPONENT):
            if self.closed_by is not None and self.score(self.closed_by) < target:
                self._finish(self.closed_by.other, DealEnd.CLOSER_FAILED)
            else:
                self._finish(winner, DealEnd.LAST_TRICK)
        return record

    def _refill(self, first: Side) -> None:
        for side in (first, first.other):
            hand = self.hand(side)
            if len(hand) >= self.rules.hand_size:
                continue
            card, self.stock, self.trump_card = draw_from_talon(self.stock, self.trump_card)
            if card is None:
                return
            hand.append(revealed(card) if side is Side.PLAYER else hidden(card))

    def _finish(self, winner: Optional[Side], end: DealEnd) -> None:
        if self.finished:
            return
        self.finished = True
        self.winner = winner
        self.end = end
        if winner is not None:
            loser_state = self.sides[winner.other]
            self.sides[winner].game_points += game_points(
                end,
                loser_score=loser_state.score,
                loser_tricks=len(loser_state.tricks_won),
                schneider_score=self.rules.schneider_score,
            )

    def _ensure_turn(self, side: Side) -> None:
        if self.finished:
            raise InvalidPlay("The deal is already over.")
        if side is not self.current_side:
            raise InvalidPlay("Not this side's turn.")

    def _leading_blocker(self, side: Side) -> Optional[str]:
        if self.finished:
            return "The deal is already over."
        if side is not self.current_side:
            return "Not this side's turn."
        if not self.current_trick.is_empty():
            return "Only the side about to lead may do this."
        return None

    def _exchange_blocker(self, side: Side) -> Optional[str]:
        blocker = self._leading_blocker(side)
        if blocker is not None:
            return blocker
        if self.trick_number <= 1:
            return "The trump nine cannot be exchanged before the second trick."
        if self.stock_closed or self.trump_card is None or not self.stock:
            return "The trump card is no longer available."
        if self.trump_nine(side) is None:
            return "The trump nine is not in hand."
        return None

    def _close_blocker(self, side: Side) -> Optional[str]:
        blocker = self._leading_blocker(side)
        if blocker is not None:
            return blocker
        if self.stock_closed:
            return "The stock is already closed."
        if self.talon_size() == 0:
            return "The stock is already exhausted."
        return None
