"""Career leaderboard aggregated from finished battles."""

import logging
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from arenaforge.engine.combat.models import BattleLog, Fighter, FighterStats
from .models import TournamentMatch

logger = logging.getLogger(__name__)


class BattleRecord(BaseModel):
    """A finished battle as kept by the replay archive."""

    fighter_a: Fighter
    fighter_b: Fighter
    arena_name: str
    battle_log: BattleLog
    timestamp: datetime = Field(default_factory=datetime.now)


class LeaderboardEntry(BaseModel):
    """Career totals for one fighter."""

    fighter_id: str
    name: str
    total_battles: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_rate: float = 0.0  # Percentage
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    average_damage_dealt: float = 0.0
    average_damage_taken: float = 0.0
    average_rounds_survived: float = 0.0
    total_rounds: int = 0
    current_stats: FighterStats
    opponents: list[str] = Field(default_factory=list)
    arenas: list[str] = Field(default_factory=list)
    last_battle: datetime
    image_url: str = ""


class Leaderboard(BaseModel):
    entries: list[LeaderboardEntry]
    total_battles: int
    last_updated: datetime = Field(default_factory=datetime.now)


def battle_record_from_match(match: TournamentMatch) -> BattleRecord | None:
    """Archive form of a fought match, or None for byes and unplayed matches."""
    if match.fighter_a is None or match.fighter_b is None or match.battle_log is None:
        return None
    return BattleRecord(
        fighter_a=match.fighter_a,
        fighter_b=match.fighter_b,
        arena_name=match.arena.name if match.arena else "Tournament Arena",
        battle_log=match.battle_log,
    )


def _apply_battle(
    entry: LeaderboardEntry,
    fighter: Fighter,
    opponent: Fighter,
    record: BattleRecord,
) -> None:
    log = record.battle_log
    entry.total_battles += 1

    if log.is_draw:
        entry.draws += 1
    elif log.winner_id == fighter.id:
        entry.wins += 1
    else:
        entry.losses += 1

    if opponent.name not in entry.opponents:
        entry.opponents.append(opponent.name)
    if record.arena_name not in entry.arenas:
        entry.arenas.append(record.arena_name)

    if record.timestamp > entry.last_battle:
        entry.last_battle = record.timestamp
        entry.name = fighter.name
        entry.current_stats = fighter.stats
        entry.image_url = fighter.image_url

    entry.total_damage_dealt += log.damage_dealt_by(fighter.id)
    entry.total_damage_taken += log.damage_taken_by(fighter.id)
    entry.total_rounds += log.total_rounds


def build_leaderboard(records: Iterable[BattleRecord]) -> Leaderboard:
    """Rank fighters by win rate, then wins, then average damage dealt."""
    entries: dict[str, LeaderboardEntry] = {}
    total_battles = 0

    for record in records:
        total_battles += 1
        pairings = (
            (record.fighter_a, record.fighter_b),
            (record.fighter_b, record.fighter_a),
        )
        for fighter, opponent in pairings:
            entry = entries.get(fighter.id)
            if entry is None:
                entry = LeaderboardEntry(
                    fighter_id=fighter.id,
                    name=fighter.name,
                    current_stats=fighter.stats,
                    last_battle=record.timestamp,
                    image_url=fighter.image_url,
                )
                entries[fighter.id] = entry
            _apply_battle(entry, fighter, opponent, record)

    for entry in entries.values():
        if entry.total_battles:
            entry.win_rate = entry.wins / entry.total_battles * 100
            entry.average_damage_dealt = entry.total_damage_dealt / entry.total_battles
            entry.average_damage_taken = entry.total_damage_taken / entry.total_battles
            entry.average_rounds_survived = entry.total_rounds / entry.total_battles

    ranked = sorted(
        entries.values(),
        key=lambda e: (e.win_rate, e.wins, e.average_damage_dealt),
        reverse=True,
    )
    logger.info(f"Built leaderboard of {len(ranked)} fighters from {total_battles} battles")
    return Leaderboard(entries=ranked, total_battles=total_battles)
