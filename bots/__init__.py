"""AI opponents for Nine-Point and Sixty-Six."""

from .nine_point import NinePointBot, ai_decision
from .sixty_six import SixtySixBot, ai_choose_card

__all__ = ["NinePointBot", "SixtySixBot", "ai_decision", "ai_choose_card"]
