"""Controllers that drive a match for UI consumers."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from random import Random
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from bots.nine_point import NinePointBot
from bots.sixty_six import SixtySixBot

from .cards import AnyCard, Card, NineCard, card_label, deserialize_card, serialize_card
from .game import NinePointHand, NinePointMatch, Phase, PhaseError, SixtySixMatch
from .ninepoint import hand_name, hand_value, special_hand
from .rules_schema import Difficulty, GameSettings, NinePointRules, SixtySixRules
from .scheduler import ScheduledCall, Scheduler, TimerScheduler
from .scoring import MatchOutcome, RoundReport, Side
from .state import GameState, InvalidPlay, TrickRecord
from .stats import StatsRecorder

logger = logging.getLogger(__name__)

CardPayload = Union[Card, Mapping[str, Any]]


@dataclass(frozen=True)
class ActionResult:
    accepted: bool
    reason: Optional[str] = None
    report: Optional[RoundReport] = None

    def __bool__(self) -> bool:
        return self.accepted


@dataclass(frozen=True)
class CardView:
    card: dict
    label: str


@dataclass(frozen=True)
class NineHandView:
    cards: Tuple[CardView, ...]
    value: Optional[int]
    value_name: Optional[str]
    special: Optional[str]
    has_folded: bool
    has_stood: bool
    has_drawn: bool


@dataclass(frozen=True)
class NinePointView:
    match_id: str
    phase: str
    current_round: int
    max_rounds: int
    deck_size: int
    player: NineHandView
    opponent: NineHandView
    player_wins: int
    opponent_wins: int
    draws: int
    last_report: Optional[dict]
    ai_pending: bool


@dataclass(frozen=True)
class TrickPlayView:
    side: str
    card: CardView


@dataclass(frozen=True)
class TrickResultView:
    number: int
    leader: str
    plays: Tuple[TrickPlayView, ...]
    winner: str
    points: int


@dataclass(frozen=True)
class SixtySixSideView:
    hand: Tuple[CardView, ...]
    hand_size: int
    score: int
    marriage_bonus: int
    tricks_won: int
    game_points: int


@dataclass(frozen=True)
class SixtySixView:
    match_id: str
    phase: str
    trick_number: int
    trump: Optional[CardView]
    trump_suit: Optional[str]
    stock_size: int
    stock_closed: bool
    leader: Optional[str]
    current_trick: Tuple[TrickPlayView, ...]
    last_trick: Optional[TrickResultView]
    player: SixtySixSideView
    opponent: SixtySixSideView
    legal_moves: Tuple[CardView, ...]
    can_exchange_trump: bool
    can_close_stock: bool
    report: Optional[dict]
    ai_pending: bool


HIDDEN_CARD = CardView(card={"face_up": False}, label="Face-down card")


def _card_view(card: AnyCard) -> CardView:
    if not card.face_up:
        return HIDDEN_CARD
    return CardView(card=serialize_card(card), label=card_label(card))


def _card_views(cards: Sequence[AnyCard]) -> Tuple[CardView, ...]:
    return tuple(_card_view(card) for card in cards)


def _coerce_card(payload: CardPayload) -> Card:
    if isinstance(payload, Card):
        return payload
    try:
        card = deserialize_card(payload)
    except (KeyError, ValueError, TypeError) as exc:
        raise InvalidPlay("Malformed card payload.") from exc
    if not isinstance(card, Card):
        raise InvalidPlay("Expected a Sixty-Six card.")
    return card


class _MatchController:
    """Shared turn arbitration, AI scheduling and stats bookkeeping."""

    def __init__(
        self,
        *,
        difficulty: Union[Difficulty, str, None] = None,
        rng: Optional[Random] = None,
        scheduler: Optional[Scheduler] = None,
        recorder: Optional[StatsRecorder] = None,
        settings: Optional[GameSettings] = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.difficulty = Difficulty(difficulty) if difficulty is not None else self.settings.ai_difficulty
        self.rng = rng if rng is not None else Random()
        self.scheduler = scheduler or TimerScheduler()
        self.recorder = recorder or StatsRecorder()
        self.match_id = ""
        self._lock = threading.RLock()
        self._pending: Optional[ScheduledCall] = None
        self._generation = 0
        self._paused = False
        self._closed = False
        self._listeners: List[Callable[[Any], None]] = []

    # Lifecycle ---------------------------------------------------------

    def subscribe(self, listener: Callable[[Any], None]) -> None:
        self._listeners.append(listener)

    @property
    def ai_pending(self) -> bool:
        return self._pending is not None

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        with self._lock:
            self._paused = True
            self._cancel_pending()

    def resume(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._paused = False
            self._schedule_next()

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
            self._cancel_pending()

    def complete_match(self) -> bool:
        """Feed the finished match to the stats recorder; repeats are ignored."""
        with self._lock:
            outcome = self.match_outcome()
            if outcome is None:
                return False
            return self.recorder.record(self.match_id, outcome)

    # Hooks for subclasses ----------------------------------------------

    def match_outcome(self) -> Optional[MatchOutcome]:
        raise NotImplementedError

    def view(self) -> Any:
        raise NotImplementedError

    def _scheduled_step(self) -> Optional[Callable[[], None]]:
        """Return the automatic step to run next, if any."""
        raise NotImplementedError

    # Internals ---------------------------------------------------------

    def _new_match_id(self) -> None:
        self._cancel_pending()
        self.match_id = uuid.uuid4().hex

    def _attempt(self, action: Callable[[], Any]) -> ActionResult:
        with self._lock:
            if self._closed:
                return ActionResult(False, "The game has been closed.")
            if self._paused:
                return ActionResult(False, "The game is paused.")
            try:
                report = action()
            except (PhaseError, InvalidPlay) as exc:
                logger.debug("Rejected action: %s", exc)
                return ActionResult(False, str(exc))
            self._after_change()
            return ActionResult(True, report=report if isinstance(report, RoundReport) else None)

    def _after_change(self) -> None:
        if self.match_outcome() is not None:
            self.complete_match()
        self._schedule_next()
        view = self.view()
        for listener in list(self._listeners):
            listener(view)

    def _schedule_next(self) -> None:
        if self._paused or self._closed or self._pending is not None:
            return
        step = self._scheduled_step()
        if step is None:
            return
        generation = self._generation
        self._pending = self.scheduler.call_later(
            self.settings.ai_delay_seconds, lambda: self._run_scheduled(generation, step)
        )

    def _run_scheduled(self, generation: int, step: Callable[[], None]) -> None:
        with self._lock:
            if generation != self._generation or self._paused or self._closed:
                return
            self._pending = None
            if self._scheduled_step() is None:
                return
            step()
            self._after_change()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._generation += 1


class NinePointController(_MatchController):
    """Play Nine-Point matches against the AI."""

    def __init__(
        self,
        *,
        rules: Optional[NinePointRules] = None,
        bot: Optional[NinePointBot] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.rules = rules or NinePointRules()
        self.bot = bot or NinePointBot(self.difficulty, rng=self.rng, rules=self.rules)
        self.match = NinePointMatch(rng=self.rng, rules=self.rules)

    def new_match(self, deck: Optional[Sequence[NineCard]] = None) -> NinePointView:
        with self._lock:
            self._new_match_id()
            self.match = NinePointMatch(rng=self.rng, rules=self.rules)
            self.match.start_round(deck)
            logger.info("Started Nine-Point match %s (%s)", self.match_id, self.difficulty.value)
            self._after_change()
            return self.view()

    def draw(self) -> ActionResult:
        return self._attempt(self.match.player_draw)

    def stand(self) -> ActionResult:
        return self._attempt(self.match.player_stand)

    def next_round(self, deck: Optional[Sequence[NineCard]] = None) -> ActionResult:
        return self._attempt(lambda: self.match.next_round(deck))

    def match_outcome(self) -> Optional[MatchOutcome]:
        return self.match.match_outcome

    def _scheduled_step(self) -> Optional[Callable[[], None]]:
        if self.match.phase is Phase.OPPONENT_TURN:
            return lambda: self.match.play_opponent_turn(self.bot.decide)
        return None

    def view(self) -> NinePointView:
        match = self.match
        report = match.last_report
        return NinePointView(
            match_id=self.match_id,
            phase=match.phase.value,
            current_round=match.current_round,
            max_rounds=match.max_rounds,
            deck_size=len(match.deck),
            player=self._hand_view(match.player),
            opponent=self._hand_view(match.opponent),
            player_wins=match.player_wins,
            opponent_wins=match.opponent_wins,
            draws=match.draws,
            last_report=report.to_payload() if report is not None and match.phase in (Phase.ROUND_END, Phase.GAME_END) else None,
            ai_pending=self.ai_pending,
        )

    @staticmethod
    def _hand_view(hand: NinePointHand) -> NineHandView:
        cards = hand.cards
        visible = bool(cards) and all(card.face_up for card in cards)
        value = hand_value(cards) if visible else None
        special = special_hand(cards) if visible else None
        return NineHandView(
            cards=_card_views(cards),
            value=value,
            value_name=hand_name(value) if value is not None else None,
            special=special.name if special is not None and special.is_special else None,
            has_folded=hand.has_folded,
            has_stood=hand.has_stood,
            has_drawn=hand.has_drawn,
        )


class SixtySixController(_MatchController):
    """Play Sixty-Six against the AI."""

    def __init__(
        self,
        *,
        rules: Optional[SixtySixRules] = None,
        bot: Optional[SixtySixBot] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.rules = rules or SixtySixRules()
        self.bot = bot or SixtySixBot(self.difficulty, rng=self.rng)
        self.match = SixtySixMatch(rng=self.rng, rules=self.rules)

    def new_match(
        self,
        deck: Optional[Sequence[Card]] = None,
        first_leader: Optional[Side] = None,
    ) -> SixtySixView:
        with self._lock:
            self._new_match_id()
            self.match = SixtySixMatch(rng=self.rng, rules=self.rules, deck=deck, first_leader=first_leader)
            self.match.start()
            logger.info("Started Sixty-Six match %s (%s)", self.match_id, self.difficulty.value)
            self._after_change()
            return self.view()

    @property
    def state(self) -> GameState:
        if self.match.state is None:
            raise PhaseError("No active deal.")
        return self.match.state

    def play_card(self, card: CardPayload) -> ActionResult:
        def action() -> Optional[RoundReport]:
            self.match.play_card(Side.PLAYER, _coerce_card(card))
            return self.match.report

        return self._attempt(action)

    def exchange_trump_for_nine(self) -> ActionResult:
        return self._attempt(lambda: self.match.exchange_trump_for_nine(Side.PLAYER))

    def close_stock(self) -> ActionResult:
        return self._attempt(lambda: self.match.close_stock(Side.PLAYER))

    def continue_after_trick(self) -> ActionResult:
        with self._lock:
            if self.match.phase is Phase.TRICK_RESULT:
                self._cancel_pending()
            return self._attempt(self.match.continue_after_trick)

    def match_outcome(self) -> Optional[MatchOutcome]:
        return self.match.match_outcome

    def _scheduled_step(self) -> Optional[Callable[[], None]]:
        if self.match.phase is Phase.TRICK_RESULT:
            return self.match.continue_after_trick
        if self.match.phase is Phase.OPPONENT_TURN:
            return self._ai_move
        return None

    def _ai_move(self) -> None:
        state = self.state
        if self.bot.wants_exchange(state, Side.OPPONENT):
            taken = self.match.exchange_trump_for_nine(Side.OPPONENT)
            logger.debug("AI exchanged the trump nine for %s", card_label(taken))
        card = self.bot.choose_card(state, Side.OPPONENT)
        self.match.play_card(Side.OPPONENT, card)

    def view(self) -> SixtySixView:
        match = self.match
        state = match.state
        if state is None:
            return self._dealing_view()
        legal: List[Card] = []
        if match.phase is Phase.PLAYER_TURN:
            legal = state.available_moves(Side.PLAYER)
        leading = match.phase is Phase.PLAYER_TURN
        return SixtySixView(
            match_id=self.match_id,
            phase=match.phase.value,
            trick_number=state.trick_number,
            trump=_card_view(state.trump_card) if state.trump_card is not None else None,
            trump_suit=state.trump_suit.value if state.trump_suit is not None else None,
            stock_size=state.talon_size(),
            stock_closed=state.stock_closed,
            leader=state.leader.value,
            current_trick=tuple(
                TrickPlayView(side=side.value, card=_card_view(card)) for side, card in state.current_trick.plays
            ),
            last_trick=self._trick_view(state.last_trick),
            player=self._side_view(state, Side.PLAYER),
            opponent=self._side_view(state, Side.OPPONENT),
            legal_moves=_card_views(legal),
            can_exchange_trump=leading and state.can_exchange_trump(Side.PLAYER),
            can_close_stock=leading and state.can_close_stock(Side.PLAYER),
            report=match.report.to_payload() if match.report is not None else None,
            ai_pending=self.ai_pending,
        )

    def _dealing_view(self) -> SixtySixView:
        empty_side = SixtySixSideView(hand=(), hand_size=0, score=0, marriage_bonus=0, tricks_won=0, game_points=0)
        return SixtySixView(
            match_id=self.match_id,
            phase=self.match.phase.value,
            trick_number=0,
            trump=None,
            trump_suit=None,
            stock_size=0,
            stock_closed=False,
            leader=None,
            current_trick=(),
            last_trick=None,
            player=empty_side,
            opponent=empty_side,
            legal_moves=(),
            can_exchange_trump=False,
            can_close_stock=False,
            report=None,
            ai_pending=self.ai_pending,
        )

    @staticmethod
    def _side_view(state: GameState, side: Side) -> SixtySixSideView:
        side_state = state.sides[side]
        return SixtySixSideView(
            hand=_card_views(side_state.hand),
            hand_size=len(side_state.hand),
            score=side_state.score,
            marriage_bonus=side_state.marriage_bonus,
            tricks_won=len(side_state.tricks_won),
            game_points=side_state.game_points,
        )

    @staticmethod
    def _trick_view(record: Optional[TrickRecord]) -> Optional[TrickResultView]:
        if record is None:
            return None
        return TrickResultView(
            number=record.number,
            leader=record.leader.value,
            plays=(
                TrickPlayView(side=record.leader.value, card=_card_view(record.led_card)),
                TrickPlayView(side=record.leader.other.value, card=_card_view(record.response_card)),
            ),
            winner=record.winner.value,
            points=record.points,
        )
