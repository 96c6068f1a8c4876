"""Pytest configuration and shared fixtures.

Fixtures here build fighters, arenas and rollers for every test module. Use
scripted_roller when a test needs to force a specific branch of the combat
rules instead of searching for a seed that happens to hit it.
"""

from collections.abc import Callable, Iterable

import pytest

from arenaforge.engine.combat.models import Arena, Fighter, FighterStats
from arenaforge.engine.combat.rng import Roller


class ScriptedRoller(Roller):
    """Roller whose chance checks and uniform draws are fixed in advance.

    Chance results are consumed in order (False once the script runs out);
    uniform draws always return `factor`; picks take the first item. Shuffles
    still use a seeded generator.
    """

    def __init__(self, chances: Iterable[bool] = (), factor: float = 1.0):
        super().__init__(seed=0)
        self._chances = list(chances)
        self.factor = factor
        self.chance_calls: list[float] = []

    def chance(self, probability: float) -> bool:
        self.chance_calls.append(probability)
        return self._chances.pop(0) if self._chances else False

    def uniform(self, low: float, high: float) -> float:
        return self.factor

    def pick(self, items):
        return items[0]


# =============================================================================
# SHARED FIXTURES - Available to all test modules
# =============================================================================


@pytest.fixture
def fighter_factory() -> Callable[..., Fighter]:
    """Build fighters with sensible defaults; override any stat by keyword."""

    def make_fighter(
        name: str,
        health: int = 100,
        strength: int = 20,
        agility: int = 30,
        defense: int = 10,
        luck: int = 10,
        fighter_id: str | None = None,
        **extra_stats,
    ) -> Fighter:
        return Fighter(
            id=fighter_id or name.lower().replace(" ", "-"),
            name=name,
            stats=FighterStats(
                health=health,
                max_health=health,
                strength=strength,
                agility=agility,
                defense=defense,
                luck=luck,
                **extra_stats,
            ),
        )

    return make_fighter


@pytest.fixture
def roster(fighter_factory: Callable[..., Fighter]) -> Callable[[int], list[Fighter]]:
    """Build a roster of n distinct fighters."""

    def make_roster(n: int) -> list[Fighter]:
        return [
            fighter_factory(f"Fighter {i}", health=90 + i * 5, strength=18 + i)
            for i in range(1, n + 1)
        ]

    return make_roster


@pytest.fixture
def arena() -> Arena:
    return Arena(
        id="colosseum",
        name="Colosseum",
        description="Sand, pillars and a roaring crowd",
        environmental_objects=["broken column", "marble throne", "sand-covered ground"],
    )


@pytest.fixture
def empty_arena() -> Arena:
    return Arena(id="void", name="The Void")


@pytest.fixture
def roller() -> Roller:
    return Roller(seed=1234)


@pytest.fixture
def scripted_roller() -> Callable[..., ScriptedRoller]:
    return ScriptedRoller


# =============================================================================
# PYTEST CONFIGURATION HOOKS
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
