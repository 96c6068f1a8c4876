"""Engine configuration."""

from .settings import (
    AppConfig,
    ArenaConfig,
    CombatConfig,
    SystemConfig,
    TournamentConfig,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "ArenaConfig",
    "CombatConfig",
    "SystemConfig",
    "TournamentConfig",
    "get_default_config",
]
