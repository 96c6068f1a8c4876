#!/usr/bin/env python3
"""Main entry point for the ArenaForge tournament engine."""

import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter

from arenaforge.engine.combat.models import Arena, Fighter
from arenaforge.engine.combat.rng import Roller
from arenaforge.engine.config.settings import AppConfig, get_default_config
from arenaforge.engine.tournaments.manager import TournamentManager
from arenaforge.engine.tournaments.models import TournamentProgressUpdate


def setup_logging(level: str = "INFO"):
    """Configure logging for command line runs."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def print_usage():
    """Print usage information."""
    print("ArenaForge Tournament Engine")
    print("=" * 40)
    print("Run a single-elimination tournament from a roster file:")
    print("   python main.py fighters.json")
    print()
    print("Options:")
    print("   --arenas FILE   JSON list of arenas to draw from")
    print("   --config FILE   JSON or YAML configuration (default: arena_config.json)")
    print("   --seed N        Seed the dice for a reproducible tournament")
    print()


def _option(name: str) -> str | None:
    if name in sys.argv:
        index = sys.argv.index(name)
        if index + 1 < len(sys.argv):
            return sys.argv[index + 1]
    return None


def _load_list(path: Path, model: type) -> list:
    with open(path, "r", encoding="utf-8") as f:
        return TypeAdapter(list[model]).validate_python(json.load(f))


def print_update(update: TournamentProgressUpdate) -> None:
    print(f"[round {update.round_number}] {update.message}")


def main():
    """Main entry point."""
    if len(sys.argv) < 2 or "--help" in sys.argv or "-h" in sys.argv:
        print_usage()
        return

    config_path = _option("--config")
    config = AppConfig.load_from_file(Path(config_path)) if config_path else get_default_config()
    setup_logging(config.system.log_level)

    seed = _option("--seed")
    roller = Roller(int(seed) if seed is not None else config.system.random_seed)

    fighters = _load_list(Path(sys.argv[1]), Fighter)
    arenas_path = _option("--arenas")
    arenas = _load_list(Path(arenas_path), Arena) if arenas_path else None

    manager = TournamentManager(config=config, roller=roller)
    manager.add_progress_callback(print_update)
    manager.create_tournament(fighters, arenas=arenas)
    tournament = manager.run_tournament()

    print()
    print(f"🏆 {tournament.name}: {tournament.winner.name if tournament.winner else 'no winner'}")
    for entry in manager.get_leaderboard().entries:
        print(
            f"   {entry.name}: {entry.wins}W-{entry.losses}L, "
            f"{entry.total_damage_dealt} damage dealt"
        )


if __name__ == "__main__":
    main()
