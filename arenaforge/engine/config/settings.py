"""Configuration settings and data models."""

import json
import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("arena_config.json")


class CombatConfig(BaseModel):
    """Tunable constants for the combat resolver.

    The underdog rules are asymmetric balancing choices rather than laws of the
    simulation, so every number the resolver consults lives here.
    """

    # Underdog mode
    underdog_power_ratio: float = Field(
        default=2.0, description="Power ratio at which underdog mode starts"
    )
    underdog_dodge_divisor: float = Field(
        default=40.0, description="Underdog dodge chance is (agility + luck) / divisor"
    )
    underdog_counter_multiplier: float = Field(
        default=0.5, description="Share of strength dealt after a successful dodge"
    )
    weak_spot_chance: float = Field(
        default=0.10, description="Chance a successful dodge finds a weak spot"
    )
    weak_spot_fraction: float = Field(
        default=0.8, description="Share of the favorite's health taken by a weak spot"
    )
    favorite_damage_min: float = Field(default=0.8)
    favorite_damage_max: float = Field(default=1.2)
    favorite_environment_chance: float = Field(default=0.20)
    favorite_environment_multiplier: float = Field(default=1.5)

    # Balanced mode
    damage_min: float = Field(default=0.6, description="Low end of the strength roll")
    damage_max: float = Field(default=1.4, description="High end of the strength roll")
    defense_factor: float = Field(
        default=0.3, description="Share of defender defense subtracted from each hit"
    )
    min_damage: int = Field(default=1, description="Floor for a landed balanced hit")
    critical_chance: float = Field(default=0.15)
    critical_multiplier: float = Field(default=1.5)
    dodge_chance: float = Field(default=0.10)
    agility_dodge_divisor: float = Field(
        default=20.0, description="Defender full-dodge chance is agility / divisor"
    )
    environment_chance: float = Field(default=0.10)
    environment_multiplier: float = Field(default=1.3)

    @field_validator(
        "weak_spot_chance",
        "favorite_environment_chance",
        "critical_chance",
        "dodge_chance",
        "environment_chance",
    )
    @classmethod
    def validate_probability(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Probability must be between 0 and 1, got {v}")
        return v

    @field_validator(
        "underdog_power_ratio", "underdog_dodge_divisor", "agility_dodge_divisor"
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_ranges(self) -> "CombatConfig":
        if self.damage_min > self.damage_max:
            raise ValueError("damage_min cannot exceed damage_max")
        if self.favorite_damage_min > self.favorite_damage_max:
            raise ValueError("favorite_damage_min cannot exceed favorite_damage_max")
        return self


class ArenaConfig(BaseModel):
    """Arena used when a match has no arena assigned."""

    id: str = Field(default="tournament-arena")
    name: str = Field(default="Tournament Arena")
    image_url: str = Field(default="")
    description: str = Field(default="A neutral arena for tournament battles")
    environmental_objects: list[str] = Field(
        default=["walls", "floor", "ceiling"],
        description="Objects fighters can use during combat",
    )


class TournamentConfig(BaseModel):
    """Tournament progression settings."""

    max_rounds: int = Field(default=6, description="Combat round cap per match")
    max_rematches: int = Field(
        default=3, description="Rematches attempted before a drawn match is seeded out"
    )
    default_arena: ArenaConfig = Field(default_factory=ArenaConfig)

    @field_validator("max_rounds")
    @classmethod
    def validate_max_rounds(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_rounds must be at least 1, got {v}")
        return v

    @field_validator("max_rematches")
    @classmethod
    def validate_max_rematches(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"max_rematches cannot be negative, got {v}")
        return v


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    random_seed: int | None = Field(
        default=None, description="Seed for reproducible battles (None = fresh entropy)"
    )


class AppConfig(BaseModel):
    """Complete application configuration."""

    combat: CombatConfig = Field(default_factory=CombatConfig)
    tournament: TournamentConfig = Field(default_factory=TournamentConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from a JSON or YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        unknown_sections = set(data) - {"combat", "tournament", "system"}
        if unknown_sections:
            raise ValueError(f"Unknown config sections: {sorted(unknown_sections)}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_unset=True),
                f,
                default_flow_style=False,
                indent=2,
            )


def get_default_config(config_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load arena_config.json when present, otherwise fall back to defaults."""
    if config_path.exists():
        logger.info(f"Loading configuration from {config_path}")
        return AppConfig.load_from_file(config_path)
    return AppConfig()
