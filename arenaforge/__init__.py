"""ArenaForge battle and tournament engine."""
