"""Rules engine for the Nine-Point and Sixty-Six card games."""

__all__ = [
    "cards",
    "deck",
    "ninepoint",
    "trick",
    "mechanics",
    "state",
    "scoring",
    "game",
    "scheduler",
    "service",
    "stats",
    "persistence",
    "rules_schema",
]
