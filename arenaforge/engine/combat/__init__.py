"""Combat resolution between two fighters."""

from .balancing import (
    FIGHTER_ARCHETYPES,
    BalanceResult,
    FighterArchetype,
    balance_all_fighters,
    balance_fighter,
    classify_fighter,
    generate_balanced_stats,
)
from .models import (
    Arena,
    BattleLog,
    Fighter,
    FighterStats,
    HealthAfter,
    RoundRecord,
    StatsUsed,
    WinLossRecord,
)
from .resolver import CombatResolver, resolve_battle
from .rng import Roller
from .types import DRAW, CombatMode, FighterBuild, FighterSize, RandomEvent

__all__ = [
    "FIGHTER_ARCHETYPES",
    "BalanceResult",
    "FighterArchetype",
    "balance_all_fighters",
    "balance_fighter",
    "classify_fighter",
    "generate_balanced_stats",
    "Arena",
    "BattleLog",
    "Fighter",
    "FighterStats",
    "HealthAfter",
    "RoundRecord",
    "StatsUsed",
    "WinLossRecord",
    "CombatResolver",
    "resolve_battle",
    "Roller",
    "DRAW",
    "CombatMode",
    "FighterBuild",
    "FighterSize",
    "RandomEvent",
]
