"""Cross-match statistics and notable moments for tournament commentary."""

import logging
from datetime import datetime

from arenaforge.engine.combat.models import BattleLog, Fighter
from .bracket import count_playable_matches
from .models import (
    CommentaryContext,
    FighterTournamentStats,
    MomentImpact,
    MomentType,
    Tournament,
    TournamentHistoricalData,
    TournamentMatch,
    TournamentMoment,
)

logger = logging.getLogger(__name__)

# Notable moment thresholds
DOMINANCE_MAX_ROUNDS = 3
DOMINANCE_MIN_DAMAGE = 200
DRAMA_MIN_ROUNDS = 10
SKILL_MIN_DAMAGE = 300


def analyze_fighting_style(fighter: Fighter) -> str:
    """Label a fighter's style from its stat profile."""
    stats = fighter.stats
    intelligence = stats.intelligence or 0

    if stats.strength > 150 and stats.health > 800:
        return "Powerhouse Bruiser"
    if stats.agility > 80 and intelligence > 70:
        return "Tactical Speedster"
    if stats.defense > 80 and stats.health > 700:
        return "Defensive Tank"
    if intelligence > 80 and stats.agility > 70:
        return "Strategic Mastermind"
    if stats.strength > 120 and stats.agility > 70:
        return "Balanced Warrior"
    return "Adaptive Fighter"


def initialize_historical_data(tournament: Tournament) -> TournamentHistoricalData:
    """Zeroed statistics for every fighter on the roster."""
    return TournamentHistoricalData(
        tournament_id=tournament.id,
        total_matches=count_playable_matches(tournament.brackets),
        fighter_stats=[
            FighterTournamentStats(
                fighter_id=fighter.id,
                fighter_name=fighter.name,
                fighting_style=analyze_fighting_style(fighter),
            )
            for fighter in tournament.fighters
        ],
    )


def classify_notable_moment(total_rounds: int, total_damage: int) -> MomentType | None:
    """Dominance is checked before drama, drama before skill."""
    if total_rounds <= DOMINANCE_MAX_ROUNDS and total_damage > DOMINANCE_MIN_DAMAGE:
        return MomentType.DOMINANCE
    if total_rounds >= DRAMA_MIN_ROUNDS:
        return MomentType.DRAMA
    if total_damage > SKILL_MIN_DAMAGE:
        return MomentType.SKILL
    return None


def _record_result(
    stats: FighterTournamentStats,
    won: bool,
    damage_dealt: int,
    damage_taken: int,
    rounds: int,
    biggest_hit: int,
    round_number: int,
) -> FighterTournamentStats:
    if stats.eliminated:
        logger.warning(f"Ignoring result for eliminated fighter {stats.fighter_name}")
        return stats

    matches_played = stats.matches_played + 1
    wins = stats.wins + (1 if won else 0)
    losses = stats.losses + (0 if won else 1)
    total_dealt = stats.total_damage_dealt + damage_dealt

    if won:
        quickest = rounds if stats.quickest_victory is None else min(stats.quickest_victory, rounds)
        journey = f"Advanced to round {round_number + 1} with {wins} victories"
    else:
        quickest = stats.quickest_victory
        journey = f"Eliminated in round {round_number} after {matches_played} matches"

    return stats.model_copy(
        update={
            "matches_played": matches_played,
            "wins": wins,
            "losses": losses,
            "total_damage_dealt": total_dealt,
            "total_damage_taken": stats.total_damage_taken + damage_taken,
            "average_damage_per_round": total_dealt / matches_played,
            "quickest_victory": quickest,
            "longest_battle": max(stats.longest_battle or 0, rounds),
            "most_damaging_attack": max(stats.most_damaging_attack or 0, biggest_hit),
            "eliminated": not won,
            "tournament_journey": journey,
        }
    )


def update_fighter_stats(
    stats: list[FighterTournamentStats],
    match: TournamentMatch,
    battle_log: BattleLog | None,
) -> list[FighterTournamentStats]:
    """Fold one completed match into the winner's and loser's counters.

    Byes (no opponent or no log) leave the stats untouched.
    """
    loser = match.loser
    if match.winner is None or loser is None or battle_log is None:
        return stats

    winner = match.winner
    rounds = battle_log.total_rounds
    results = {
        winner.id: (
            True,
            battle_log.damage_dealt_by(winner.id),
            battle_log.damage_taken_by(winner.id),
            battle_log.largest_hit_by(winner.id),
        ),
        loser.id: (
            False,
            battle_log.damage_dealt_by(loser.id),
            battle_log.damage_taken_by(loser.id),
            battle_log.largest_hit_by(loser.id),
        ),
    }

    updated: list[FighterTournamentStats] = []
    for entry in stats:
        if entry.fighter_id in results:
            won, dealt, taken, biggest_hit = results[entry.fighter_id]
            entry = _record_result(entry, won, dealt, taken, rounds, biggest_hit, match.round)
        updated.append(entry)
    return updated


def create_notable_moment(
    match: TournamentMatch, battle_log: BattleLog | None
) -> TournamentMoment | None:
    if match.fighter_a is None or match.fighter_b is None or battle_log is None:
        return None

    rounds = battle_log.total_rounds
    total_damage = battle_log.total_damage
    moment_type = classify_notable_moment(rounds, total_damage)
    if moment_type is None:
        return None

    winner_name = match.winner.name if match.winner else "Unknown"
    if moment_type == MomentType.DOMINANCE:
        description = f"{winner_name} dominated with a quick victory in {rounds} rounds"
        impact = MomentImpact.HIGH
    elif moment_type == MomentType.DRAMA:
        description = (
            f"{match.fighter_a.name} vs {match.fighter_b.name} went the distance "
            f"in an epic {rounds}-round battle"
        )
        impact = MomentImpact.HIGH
    else:
        description = f"{winner_name} showcased incredible power with {total_damage} total damage"
        impact = MomentImpact.MEDIUM

    timestamp = datetime.now()
    return TournamentMoment(
        id=f"moment-{match.id}-{int(timestamp.timestamp() * 1000)}",
        type=moment_type,
        description=description,
        match_id=match.id,
        round=match.round,
        fighters=[match.fighter_a.name, match.fighter_b.name],
        impact=impact,
        timestamp=timestamp,
    )


def update_historical_data(
    historical: TournamentHistoricalData,
    match: TournamentMatch,
    battle_log: BattleLog | None = None,
) -> TournamentHistoricalData:
    """Return a copy of the historical data with one completed match folded in.

    The match's own battle log is used when none is passed.
    """
    battle_log = battle_log or match.battle_log
    updated = historical.model_copy(deep=True)
    updated.completed_matches += 1
    updated.fighter_stats = update_fighter_stats(updated.fighter_stats, match, battle_log)

    moment = create_notable_moment(match, battle_log)
    if moment:
        updated.notable_moments.append(moment)
        logger.info(f"Notable moment ({moment.type.value}): {moment.description}")

    if battle_log and match.fighter_a and match.fighter_b:
        rounds = battle_log.total_rounds
        total_damage = battle_log.total_damage
        winner_name = match.winner.name if match.winner else "Unknown"

        if rounds <= DOMINANCE_MAX_ROUNDS and total_damage > DOMINANCE_MIN_DAMAGE:
            updated.dominant_performances.append(
                f"{winner_name} dominated in {rounds} rounds with {total_damage} damage"
            )
        if rounds >= DRAMA_MIN_ROUNDS:
            updated.tournament_highlights.append(
                f"{match.fighter_a.name} vs {match.fighter_b.name} - Epic {rounds}-round battle"
            )

    return updated


def get_remaining_fighters(
    tournament: Tournament, historical: TournamentHistoricalData
) -> list[str]:
    eliminated = {s.fighter_id for s in historical.fighter_stats if s.eliminated}
    return [f.name for f in tournament.fighters if f.id not in eliminated]


def get_current_stakes(match: TournamentMatch, tournament: Tournament) -> str:
    if match.round == tournament.total_rounds:
        return "Championship match"
    if match.round == tournament.total_rounds - 1:
        return "Semi-finals"
    if match.round == 1:
        return "Opening round"
    return f"Round {match.round}"


def build_commentary_context(
    tournament: Tournament,
    match: TournamentMatch,
    historical: TournamentHistoricalData,
) -> CommentaryContext:
    """Collect what the commentary generator needs to talk about a match."""
    progress = (
        historical.completed_matches / historical.total_matches * 100
        if historical.total_matches
        else 0.0
    )
    return CommentaryContext(
        completed_matches=historical.completed_matches,
        remaining_fighters=get_remaining_fighters(tournament, historical),
        notable_moments=[m.description for m in historical.notable_moments],
        tournament_progress=progress,
        current_stakes=get_current_stakes(match, tournament),
    )
