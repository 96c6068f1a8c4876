"""Data models for fighters, arenas and battle logs."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from .types import CombatMode, FighterBuild, FighterSize, RandomEvent


class WinLossRecord(BaseModel):
    """Career record carried on a fighter profile."""

    wins: int = 0
    losses: int = 0
    draws: int = 0


class FighterStats(BaseModel):
    """Stat block consulted by the combat resolver."""

    health: int
    max_health: int
    strength: int = Field(..., ge=0)
    agility: int = Field(..., ge=0)
    defense: int = Field(..., ge=0)
    luck: int = Field(..., ge=0)
    age: int = 25
    size: FighterSize = FighterSize.MEDIUM
    build: FighterBuild = FighterBuild.AVERAGE
    magic: int | None = None
    ranged: int | None = None
    intelligence: int | None = None
    unique_abilities: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def default_max_health(cls, data: Any) -> Any:
        # Older fighter records were saved without max_health
        if isinstance(data, dict) and data.get("max_health") is None:
            data = {**data, "max_health": data.get("health")}
        return data

    @model_validator(mode="after")
    def validate_health(self) -> "FighterStats":
        if not 0 <= self.health <= self.max_health:
            raise ValueError(
                f"health must be between 0 and max_health ({self.max_health}), "
                f"got {self.health}"
            )
        return self


class Fighter(BaseModel):
    """A fighter profile. Treated as read-only by the engine."""

    id: str
    name: str
    image_url: str = ""
    description: str = ""
    stats: FighterStats
    win_loss_record: WinLossRecord = Field(default_factory=WinLossRecord)

    @property
    def power(self) -> int:
        """Strength scaled by current health, used to detect mismatches."""
        return self.stats.strength * self.stats.health


class Arena(BaseModel):
    """Battle location. Environmental objects flavour and boost some hits."""

    id: str
    name: str
    image_url: str = ""
    description: str | None = None
    environmental_objects: list[str] = Field(default_factory=list)


class StatsUsed(BaseModel):
    """Stats consulted while resolving one round."""

    attacker_strength: int
    attacker_agility: int
    attacker_luck: int
    defender_defense: int
    defender_agility: int


class HealthAfter(BaseModel):
    """Health of both fighters once the round has been applied."""

    attacker: int
    defender: int
class RoundRecord(BaseModel):
    """A single resolved round.

    Names are for display; results are attributed through the ids.
    """

    round: int
    attacker: str
    defender: str
    attacker_id: str
    defender_id: str
    damage: int
    stats_used: StatsUsed
    health_after: HealthAfter
    random_event: RandomEvent | None = None
    arena_objects_used: str | None = None


class BattleLog(BaseModel):
    """Ordered round records plus the verdict."""

    winner: str  # Winner's display name, or DRAW
    winner_id: str | None = None  # None for a draw
    rounds: list[RoundRecord] = Field(default_factory=list)
    mode: CombatMode = CombatMode.BALANCED
    max_rounds: int | None = None

    @property
    def is_draw(self) -> bool:
        return self.winner_id is None

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    @property
    def total_damage(self) -> int:
        return sum(r.damage for r in self.rounds)

    def damage_dealt_by(self, fighter_id: str) -> int:
        """Sum of damage dealt while attacking."""
        return sum(r.damage for r in self.rounds if r.attacker_id == fighter_id)

    def damage_taken_by(self, fighter_id: str) -> int:
        """Sum of damage received while defending."""
        return sum(r.damage for r in self.rounds if r.defender_id == fighter_id)

    def largest_hit_by(self, fighter_id: str) -> int:
        return max(
            (r.damage for r in self.rounds if r.attacker_id == fighter_id), default=0
        )
