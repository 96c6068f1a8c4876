"""Archetype-based stat rebalancing for imported fighters."""

import logging

from pydantic import BaseModel, Field

from .models import Fighter, FighterStats
from .rng import Roller

logger = logging.getLogger(__name__)


class FighterArchetype(BaseModel):
    """Stat ranges (inclusive) for a class of fighter."""

    name: str
    health_range: tuple[int, int]
    strength_range: tuple[int, int]
    agility_range: tuple[int, int]
    defense_range: tuple[int, int]
    luck_range: tuple[int, int]
    magic_range: tuple[int, int] | None = None
    ranged_range: tuple[int, int] | None = None
    intelligence_range: tuple[int, int] | None = None
    unique_abilities: list[str] | None = None


class BalanceResult(BaseModel):
    """Outcome of rebalancing one fighter."""

    name: str
    archetype: str
    old_stats: FighterStats
    new_stats: FighterStats
    balanced_fighter: Fighter


FIGHTER_ARCHETYPES: dict[str, FighterArchetype] = {
    "regular_human": FighterArchetype(
        name="Regular Human",
        health_range=(80, 120),
        strength_range=(15, 40),
        agility_range=(30, 60),
        defense_range=(15, 30),
        luck_range=(10, 25),
        intelligence_range=(20, 40),
    ),
    "peak_human": FighterArchetype(
        name="Peak Human",
        health_range=(100, 150),
        strength_range=(35, 50),
        agility_range=(50, 70),
        defense_range=(20, 35),
        luck_range=(15, 25),
        intelligence_range=(25, 45),
        unique_abilities=["Martial Arts", "Combat Training"],
    ),
    "force_user": FighterArchetype(
        name="Force User",
        health_range=(120, 180),
        strength_range=(40, 60),
        agility_range=(45, 75),
        defense_range=(25, 40),
        luck_range=(20, 35),
        magic_range=(50, 80),
        ranged_range=(30, 60),
        intelligence_range=(30, 50),
        unique_abilities=["Force Push", "Force Choke", "Lightsaber Combat"],
    ),
    "sith_lord": FighterArchetype(
        name="Sith Lord",
        health_range=(150, 200),
        strength_range=(50, 70),
        agility_range=(40, 65),
        defense_range=(30, 45),
        luck_range=(25, 40),
        magic_range=(70, 90),
        ranged_range=(50, 80),
        intelligence_range=(40, 60),
        unique_abilities=[
            "Force Lightning",
            "Force Choke",
            "Dark Side Powers",
            "Lightsaber Mastery",
        ],
    ),
    "large_animal": FighterArchetype(
        name="Large Animal",
        health_range=(200, 400),
        strength_range=(40, 80),
        agility_range=(25, 50),
        defense_range=(30, 60),
        luck_range=(8, 20),
        intelligence_range=(5, 15),
    ),
    "legendary_monster": FighterArchetype(
        name="Legendary Monster",
        health_range=(800, 2000),
        strength_range=(150, 200),
        agility_range=(5, 20),
        defense_range=(60, 100),
        luck_range=(10, 25),
        magic_range=(0, 50),
        ranged_range=(50, 100),
        intelligence_range=(8, 25),
        unique_abilities=["Atomic Breath", "Tail Whip", "Monster Strength"],
    ),
    "rodent": FighterArchetype(
        name="Rodent",
        health_range=(3, 9),
        strength_range=(1, 5),
        agility_range=(60, 95),
        defense_range=(1, 8),
        luck_range=(15, 30),
        intelligence_range=(2, 3),
        unique_abilities=["Quick Escape"],
    ),
}

# Checked in order; the first archetype with a matching keyword wins
ARCHETYPE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("rodent", ("mouse", "rat", "rodent")),
    ("sith_lord", ("darth", "vader", "sith")),
    ("force_user", ("jedi", "force")),
    ("legendary_monster", ("godzilla", "kaiju", "dragon")),
    (
        "peak_human",
        ("bruce", "lee", "stephen", "siegal", "victor", "martel", "martial", "champion"),
    ),
    ("large_animal", ("bear", "tiger", "lion", "shark", "wolf")),
]


def classify_fighter(name: str) -> str:
    """Map a fighter name to an archetype key, defaulting to regular_human."""
    lower_name = name.lower()
    for archetype_key, keywords in ARCHETYPE_KEYWORDS:
        if any(keyword in lower_name for keyword in keywords):
            return archetype_key
    return "regular_human"


def generate_balanced_stats(
    archetype: FighterArchetype, current_stats: FighterStats, roller: Roller
) -> FighterStats:
    """Reroll stats inside the archetype's ranges.

    Age, size and build are kept. Optional stats are only replaced when the
    archetype defines a range for them.
    """
    health = roller.randint(*archetype.health_range)
    updates: dict[str, object] = {
        "health": health,
        "max_health": health,
        "strength": roller.randint(*archetype.strength_range),
        "agility": roller.randint(*archetype.agility_range),
        "defense": roller.randint(*archetype.defense_range),
        "luck": roller.randint(*archetype.luck_range),
    }
    if archetype.magic_range:
        updates["magic"] = roller.randint(*archetype.magic_range)
    if archetype.ranged_range:
        updates["ranged"] = roller.randint(*archetype.ranged_range)
    if archetype.intelligence_range:
        updates["intelligence"] = roller.randint(*archetype.intelligence_range)
    if archetype.unique_abilities:
        updates["unique_abilities"] = list(archetype.unique_abilities)

    return current_stats.model_copy(update=updates)


def balance_fighter(fighter: Fighter, roller: Roller) -> BalanceResult:
    """Classify a fighter by name and reroll its stats for that archetype."""
    archetype = FIGHTER_ARCHETYPES[classify_fighter(fighter.name)]
    new_stats = generate_balanced_stats(archetype, fighter.stats, roller)

    logger.debug(
        f"Balanced {fighter.name} as {archetype.name}: "
        f"health {fighter.stats.health} -> {new_stats.health}, "
        f"strength {fighter.stats.strength} -> {new_stats.strength}"
    )

    return BalanceResult(
        name=fighter.name,
        archetype=archetype.name,
        old_stats=fighter.stats,
        new_stats=new_stats,
        balanced_fighter=fighter.model_copy(update={"stats": new_stats}),
    )


def balance_all_fighters(fighters: list[Fighter], roller: Roller) -> list[BalanceResult]:
    results = [balance_fighter(fighter, roller) for fighter in fighters]
    logger.info(f"Balanced {len(results)} fighters")
    return results
