"""Cumulative win/loss/draw statistics."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from .scoring import MatchOutcome

logger = logging.getLogger(__name__)


class GameStats(BaseModel):
    total_wins: int = Field(0, ge=0)
    total_losses: int = Field(0, ge=0)
    total_draws: int = Field(0, ge=0)
    games_played: int = Field(0, ge=0)

    def with_outcome(self, outcome: MatchOutcome) -> "GameStats":
        update = {"games_played": self.games_played + 1}
        if outcome is MatchOutcome.WIN:
            update["total_wins"] = self.total_wins + 1
        elif outcome is MatchOutcome.LOSS:
            update["total_losses"] = self.total_losses + 1
        else:
            update["total_draws"] = self.total_draws + 1
        return self.model_copy(update=update)


class StatsStore(Protocol):
    def load_stats(self) -> GameStats: ...

    def save_stats(self, stats: GameStats) -> None: ...


class InMemoryStatsStore:
    def __init__(self, stats: Optional[GameStats] = None) -> None:
        self.stats = stats or GameStats()

    def load_stats(self) -> GameStats:
        return self.stats

    def save_stats(self, stats: GameStats) -> None:
        self.stats = stats


class StatsRecorder:
    """Apply each match outcome to the store exactly once.

    Matches finish one at a time, so only the last recorded id is kept.
    """

    def __init__(self, store: Optional[StatsStore] = None) -> None:
        self.store: StatsStore = store if store is not None else InMemoryStatsStore()
        self.last_match_id: Optional[str] = None
        self._lock = threading.Lock()

    def record(self, match_id: str, outcome: MatchOutcome) -> bool:
        """Return True if the outcome was applied, False for a repeat."""
        with self._lock:
            if match_id == self.last_match_id:
                logger.debug("Match %s already recorded", match_id)
                return False
            stats = self.store.load_stats().with_outcome(outcome)
            self.store.save_stats(stats)
            self.last_match_id = match_id
        logger.info("Recorded %s for match %s (%d played)", outcome.value, match_id, stats.games_played)
        return True

    def reset(self) -> None:
        with self._lock:
            self.store.save_stats(GameStats())

    @property
    def stats(self) -> GameStats:
        return self.store.load_stats()
