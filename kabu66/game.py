"""Round and match orchestration for Nine-Point and Sixty-Six."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Callable, List, Optional, Sequence

from .cards import Card, NineCard, hidden, revealed
from .deck import build_nine_point_deck, deal, deal_sixty_six, draw_one, ensure_unique, shuffle
from .ninepoint import Decision, determine_round_winner
from .rules_schema import NinePointRules, SixtySixRules
from .scoring import MatchOutcome, RoundOutcome, RoundReport, Side, match_outcome_from_wins
from .state import GameState, TrickRecord

logger = logging.getLogger(__name__)


class Phase(Enum):
    DEALING = "dealing"
    PLAYER_TURN = "player_turn"
    OPPONENT_TURN = "opponent_turn"
    TRICK_RESULT = "trick_result"
    ROUND_END = "round_end"
    GAME_END = "game_end"


class PhaseError(RuntimeError):
    """Raised when an action is attempted outside its phase."""


def turn_phase(side: Side) -> Phase:
    return Phase.PLAYER_TURN if side is Side.PLAYER else Phase.OPPONENT_TURN


def _ensure_phase(current: Phase, expected: Phase) -> None:
    if current is not expected:
        raise PhaseError(f"Action not allowed in phase {current.value}. Expected {expected.value}.")


@dataclass
class NinePointHand:
    cards: List[NineCard] = field(default_factory=list)
    has_folded: bool = False
    has_stood: bool = False
    has_drawn: bool = False

    def reset(self, cards: Sequence[NineCard]) -> None:
        self.cards = list(cards)
        self.has_folded = False
        self.has_stood = False
        self.has_drawn = False


NineDecider = Callable[[Sequence[NineCard]], Decision]


@dataclass
class NinePointMatch:
    """Five rounds of Nine-Point against the AI."""

    rng: Optional[Random] = None
    rules: NinePointRules = field(default_factory=NinePointRules)

    deck: List[NineCard] = field(init=False, default_factory=list)
    player: NinePointHand = field(init=False, default_factory=NinePointHand)
    opponent: NinePointHand = field(init=False, default_factory=NinePointHand)
    current_round: int = field(init=False, default=1)
    phase: Phase = field(init=False, default=Phase.DEALING)
    player_wins: int = field(init=False, default=0)
    opponent_wins: int = field(init=False, default=0)
    draws: int = field(init=False, default=0)
    history: List[RoundReport] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = Random()

    @property
    def max_rounds(self) -> int:
        return self.rules.max_rounds

    @property
    def last_report(self) -> Optional[RoundReport]:
        return self.history[-1] if self.history else None

    @property
    def match_outcome(self) -> Optional[MatchOutcome]:
        if self.phase is not Phase.GAME_END:
            return None
        return match_outcome_from_wins(self.player_wins, self.opponent_wins)

    def start_round(self, deck: Optional[Sequence[NineCard]] = None) -> None:
        _ensure_phase(self.phase, Phase.DEALING)
        cards = list(deck) if deck is not None else shuffle(build_nine_point_deck(), self.rng)
        ensure_unique(cards)
        size = self.rules.initial_hand_size
        player_cards, remaining = deal(cards, size)
        opponent_cards, remaining = deal(remaining, size)
        self.player.reset(player_cards)
        self.opponent.reset([hidden(card) for card in opponent_cards])
        self.deck = remaining
        self.phase = Phase.PLAYER_TURN
        logger.debug("Nine-Point round %d dealt", self.current_round)

    def player_draw(self) -> Optional[NineCard]:
        """Draw the single extra card. An empty deck counts as standing."""
        _ensure_phase(self.phase, Phase.PLAYER_TURN)
        if self.player.has_drawn or self.player.has_stood:
            raise PhaseError("The player has already acted this round.")
        if len(self.player.cards) >= self.rules.max_hand_size:
            raise PhaseError("The hand is already full.")
        card, self.deck = draw_one(self.deck)
        if card is None:
            self.player.has_stood = True
        else:
            self.player.cards.append(card)
            self.player.has_drawn = True
        self.phase = Phase.OPPONENT_TURN
        return card

    def player_stand(self) -> None:
        _ensure_phase(self.phase, Phase.PLAYER_TURN)
        if self.player.has_stood:
            raise PhaseError("The player has already stood.")
        self.player.has_stood = True
        self.phase = Phase.OPPONENT_TURN

    def play_opponent_turn(self, decide: NineDecider) -> RoundReport:
        """Run the AI's draw loop and resolve the round."""
        _ensure_phase(self.phase, Phase.OPPONENT_TURN)
        cards = [revealed(card) for card in self.opponent.cards]
        deck = list(self.deck)
        drew = False
        while len(cards) < self.rules.max_hand_size and deck:
            if decide(cards) is not Decision.DRAW:
                break
            card, deck = draw_one(deck)
            assert card is not None
            cards.append(card)
            drew = True

        self.opponent.cards = cards
        self.opponent.has_drawn = drew
        self.opponent.has_stood = True
        self.deck = deck
        return self._resolve_round()

    def next_round(self, deck: Optional[Sequence[NineCard]] = None) -> None:
        _ensure_phase(self.phase, Phase.ROUND_END)
        self.current_round += 1
        self.phase = Phase.DEALING
        self.start_round(deck)

    def _resolve_round(self) -> RoundReport:
        outcome = determine_round_winner(self.player.cards, self.opponent.cards)
        if outcome is RoundOutcome.PLAYER:
            self.player_wins += 1
        elif outcome is RoundOutcome.OPPONENT:
            self.opponent_wins += 1
        else:
            self.draws += 1

        match_outcome: Optional[MatchOutcome] = None
        if self.current_round >= self.max_rounds:
            self.phase = Phase.GAME_END
            match_outcome = match_outcome_from_wins(self.player_wins, self.opponent_wins)
            logger.info(
                "Nine-Point match over: %s (%d-%d, %d draws)",
                match_outcome.value,
                self.player_wins,
                self.opponent_wins,
                self.draws,
            )
        else:
            self.phase = Phase.ROUND_END

        report = RoundReport(round_outcome=outcome, match_outcome=match_outcome)
        self.history.append(report)
        logger.debug("Nine-Point round %d: %s", self.current_round, outcome.value)
        return report


@dataclass
class SixtySixMatch:
    """One Sixty-Six deal played until a side reaches the target score."""

    rng: Optional[Random] = None
    rules: SixtySixRules = field(default_factory=SixtySixRules)
    deck: Optional[Sequence[Card]] = None
    first_leader: Optional[Side] = None

    state: Optional[GameState] = field(init=False, default=None)
    phase: Phase = field(init=False, default=Phase.DEALING)
    report: Optional[RoundReport] = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = Random()

    def start(self) -> GameState:
        _ensure_phase(self.phase, Phase.DEALING)
        assert self.rng is not None
        leader = self.first_leader
        if leader is None:
            leader = Side.PLAYER if self.rng.random() < 0.5 else Side.OPPONENT
        player_hand, opponent_hand, trump_card, stock = deal_sixty_six(
            rng=self.rng, deck=self.deck, hand_size=self.rules.hand_size
        )
        self.state = GameState(
            player_hand=player_hand,
            opponent_hand=opponent_hand,
            stock=stock,
            trump_card=trump_card,
            leader=leader,
            rules=self.rules,
        )
        self.phase = turn_phase(leader)
        logger.debug("Sixty-Six dealt, %s leads", leader.value)
        return self.state

    @property
    def trick_number(self) -> int:
        return self._require_state().trick_number

    @property
    def match_outcome(self) -> Optional[MatchOutcome]:
        return self.report.match_outcome if self.report is not None else None

    def play_card(self, side: Side, card: Card) -> Optional[TrickRecord]:
        _ensure_phase(self.phase, turn_phase(side))
        state = self._require_state()
        record = state.play_card(side, card)
        if record is None:
            self.phase = turn_phase(state.current_side)
        elif state.is_finished():
            self._finish()
        else:
            self.phase = Phase.TRICK_RESULT
        return record

    def continue_after_trick(self) -> None:
        _ensure_phase(self.phase, Phase.TRICK_RESULT)
        self.phase = turn_phase(self._require_state().current_side)

    def exchange_trump_for_nine(self, side: Side) -> Card:
        _ensure_phase(self.phase, turn_phase(side))
        return self._require_state().exchange_trump_for_nine(side)

    def close_stock(self, side: Side) -> None:
        _ensure_phase(self.phase, turn_phase(side))
        self._require_state().close_stock(side)

    def _finish(self) -> None:
        state = self._require_state()
        outcome = RoundOutcome.for_side(state.winner)
        self.report = RoundReport(round_outcome=outcome, match_outcome=MatchOutcome.from_round_outcome(outcome))
        self.phase = Phase.GAME_END
        logger.info(
            "Sixty-Six over after trick %d: %s (%d-%d)",
            state.trick_number,
            outcome.value,
            state.score(Side.PLAYER),
            state.score(Side.OPPONENT),
        )

    def _require_state(self) -> GameState:
        if self.state is None:
            raise PhaseError("The deal has not started.")
        return self.state
