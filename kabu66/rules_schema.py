"""Validation schema for rule constants and app settings."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class NinePointRules(BaseModel):
    max_rounds: int = Field(5, ge=1, description="Rounds per match.")
    initial_hand_size: int = Field(2, ge=1, le=3)
    max_hand_size: int = Field(3, ge=2, le=3)
    stand_thresholds: dict[Difficulty, int] = Field(
        default_factory=lambda: {Difficulty.EASY: 4, Difficulty.MEDIUM: 5, Difficulty.HARD: 6},
        description="AI stands once its hand value reaches the threshold.",
    )
    early_stand_probability: dict[Difficulty, float] = Field(
        default_factory=lambda: {Difficulty.EASY: 0.3, Difficulty.MEDIUM: 0.0, Difficulty.HARD: 0.0},
        description="Chance of standing below the threshold.",
    )
    borderline_draw_probability: dict[Difficulty, float] = Field(
        default_factory=lambda: {Difficulty.EASY: 0.0, Difficulty.MEDIUM: 0.0, Difficulty.HARD: 0.1},
        description="Chance of drawing on a hand exactly at the threshold.",
    )

    @field_validator("stand_thresholds")
    @classmethod
    def validate_thresholds(cls, value: dict[Difficulty, int]) -> dict[Difficulty, int]:
        missing = set(Difficulty) - set(value)
        if missing:
            raise ValueError(f"Missing thresholds for {sorted(d.value for d in missing)}.")
        for difficulty, threshold in value.items():
            if not 0 <= threshold <= 9:
                raise ValueError(f"Threshold for {difficulty.value} must be within 0-9.")
        return value

    @field_validator("early_stand_probability", "borderline_draw_probability")
    @classmethod
    def validate_probabilities(cls, value: dict[Difficulty, float]) -> dict[Difficulty, float]:
        for difficulty, probability in value.items():
            if not 0.0 <= probability <= 1.0:
                raise ValueError(f"Probability for {difficulty.value} must be within 0-1.")
        return value

    @model_validator(mode="after")
    def check_hand_sizes(self) -> "NinePointRules":
        if self.initial_hand_size > self.max_hand_size:
            raise ValueError("Initial hand size cannot exceed the maximum hand size.")
        return self


class SixtySixRules(BaseModel):
    hand_size: int = Field(6, ge=1, le=11)
    target_score: int = Field(66, ge=1, description="Score that ends the deal immediately.")
    trump_marriage_points: int = Field(40, ge=0)
    plain_marriage_points: int = Field(20, ge=0)
    schneider_score: int = Field(33, ge=0, description="Loser below this concedes an extra game point.")


class GameSettings(BaseModel):
    sound_enabled: bool = True
    vibration_enabled: bool = True
    animation_speed: Literal["slow", "normal", "fast"] = "normal"
    ai_difficulty: Difficulty = Difficulty.MEDIUM
    music_enabled: bool = True
    music_volume: float = Field(0.5, ge=0.0, le=1.0)
    selected_music: Literal["traditional", "peaceful", "energetic"] = "traditional"
    ai_delay_seconds: float = Field(0.8, ge=0.0, description="Pause before the AI acts.")
