"""Outcome types and end-of-deal scoring helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Side(Enum):
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


class RoundOutcome(Enum):
    PLAYER = "player"
    OPPONENT = "opponent"
    DRAW = "draw"

    @classmethod
    def for_side(cls, side: Optional[Side]) -> "RoundOutcome":
        if side is None:
            return cls.DRAW
        return cls.PLAYER if side is Side.PLAYER else cls.OPPONENT


class MatchOutcome(Enum):
    """Match result from the human player's perspective."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"

    @classmethod
    def from_round_outcome(cls, outcome: RoundOutcome) -> "MatchOutcome":
        if outcome is RoundOutcome.PLAYER:
            return cls.WIN
        if outcome is RoundOutcome.OPPONENT:
            return cls.LOSS
        return cls.DRAW


@dataclass(frozen=True)
class RoundReport:
    """Emitted once per completed round; ``match_outcome`` only on the last."""

    round_outcome: RoundOutcome
    match_outcome: Optional[MatchOutcome] = None

    @property
    def is_match_over(self) -> bool:
        return self.match_outcome is not None

    def to_payload(self) -> dict[str, Optional[str]]:
        payload: dict[str, Optional[str]] = {"round_outcome": self.round_outcome.value}
        if self.match_outcome is not None:
            payload["match_outcome"] = self.match_outcome.value
        return payload


def match_outcome_from_wins(player_wins: int, opponent_wins: int) -> MatchOutcome:
    if player_wins > opponent_wins:
        return MatchOutcome.WIN
    if opponent_wins > player_wins:
        return MatchOutcome.LOSS
    return MatchOutcome.DRAW


def compare_scores(player_score: int, opponent_score: int) -> Optional[Side]:
    """Return the side with the higher score, or None on a tie."""
    if player_score > opponent_score:
        return Side.PLAYER
    if opponent_score > player_score:
        return Side.OPPONENT
    return None


class DealEnd(Enum):
    REACHED_TARGET = "reached_target"
    LAST_TRICK = "last_trick"
    CLOSER_FAILED = "closer_failed"


def game_points(
    end: DealEnd,
    *,
    loser_score: int,
    loser_tricks: int,
    schneider_score: int = 33,
) -> int:
    """Game points for the deal winner under the classic 66 schedule."""
    if loser_tricks == 0:
        return 3
    if end is DealEnd.CLOSER_FAILED:
        return 2
    if loser_score < schneider_score:
        return 2
    return 1
