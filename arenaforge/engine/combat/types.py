"""Shared types and enums for the combat engine."""

from enum import Enum

# Verdict recorded when neither fighter wins
DRAW = "Draw"


class FighterSize(Enum):
    """Physical size classes."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class FighterBuild(Enum):
    """Body build classes."""

    THIN = "thin"
    AVERAGE = "average"
    MUSCULAR = "muscular"
    HEAVY = "heavy"


class CombatMode(Enum):
    """How damage is rolled for a battle."""

    BALANCED = "balanced"
    UNDERDOG = "underdog"


class RandomEvent(Enum):
    """Notable roll outcomes recorded on a round."""

    CRITICAL_HIT = "critical hit"
    DODGE = "dodge"
    ENVIRONMENTAL_HIT = "environmental hit"
    UNDERDOG_DODGE = "underdog dodge"
    WEAK_SPOT = "weak spot"
    UNDERDOG_COLLAPSE = "underdog collapse"
