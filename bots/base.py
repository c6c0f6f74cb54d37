"""Common bot strategy interfaces."""

from __future__ import annotations

from random import Random
from typing import Optional, Union

from kabu66.rules_schema import Difficulty


class BotStrategy:
    """Base class for AI opponents.

    Every random choice a bot makes is drawn from ``rng`` so a seeded source
    replays the same decisions.
    """

    name: str = "BaseBot"

    def __init__(self, difficulty: Union[Difficulty, str] = Difficulty.MEDIUM, rng: Optional[Random] = None) -> None:
        self.difficulty = Difficulty(difficulty)
        self._rng = rng if rng is not None else Random()

    @property
    def rng(self) -> Random:
        return self._rng

    def __repr__(self) -> str:
        return f"{type(self).__name__}(difficulty={self.difficulty.value!r})"
