"""Exception hierarchy for the battle and tournament engine."""


class ArenaForgeError(Exception):
    """Base class for all engine errors."""


class InvalidBattleInputError(ArenaForgeError, ValueError):
    """Raised when a battle cannot be resolved from the given inputs."""


class InvalidRosterError(ArenaForgeError, ValueError):
    """Raised when a bracket cannot be built from the given roster."""


class TournamentStateError(ArenaForgeError):
    """Raised when a tournament operation does not fit its current state."""
