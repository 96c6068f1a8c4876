"""Tests for the career leaderboard."""

from datetime import datetime, timedelta

from arenaforge.engine.combat.models import BattleLog, HealthAfter, RoundRecord, StatsUsed
from arenaforge.engine.combat.types import DRAW
from arenaforge.engine.tournaments.leaderboard import (
    BattleRecord,
    battle_record_from_match,
    build_leaderboard,
)
from arenaforge.engine.tournaments.models import MatchStatus, TournamentMatch

START = datetime(2025, 1, 1, 12, 0)


def _record(fighter_a, fighter_b, winner, damage_a, damage_b, minutes=0, arena="Dojo"):
    rounds = [
        RoundRecord(
            round=1,
            attacker=fighter_a.name,
            defender=fighter_b.name,
            attacker_id=fighter_a.id,
            defender_id=fighter_b.id,
            damage=damage_a,
            stats_used=StatsUsed(
                attacker_strength=1, attacker_agility=1, attacker_luck=1,
                defender_defense=1, defender_agility=1,
            ),
            health_after=HealthAfter(attacker=100, defender=100 - damage_a),
        ),
        RoundRecord(
            round=2,
            attacker=fighter_b.name,
            defender=fighter_a.name,
            attacker_id=fighter_b.id,
            defender_id=fighter_a.id,
            damage=damage_b,
            stats_used=StatsUsed(
                attacker_strength=1, attacker_agility=1, attacker_luck=1,
                defender_defense=1, defender_agility=1,
            ),
            health_after=HealthAfter(attacker=100 - damage_a, defender=100 - damage_b),
        ),
    ]
    return BattleRecord(
        fighter_a=fighter_a,
        fighter_b=fighter_b,
        arena_name=arena,
        battle_log=BattleLog(
            winner=winner.name if winner else DRAW,
            winner_id=winner.id if winner else None,
            rounds=rounds,
        ),
        timestamp=START + timedelta(minutes=minutes),
    )


def test_ranking_and_totals(fighter_factory) -> None:
    ryu, ken, guile = (fighter_factory(n) for n in ("Ryu", "Ken", "Guile"))
    records = [
        _record(ryu, ken, ryu, 30, 10),
        _record(ryu, guile, ryu, 25, 20, minutes=5, arena="Rooftop"),
        _record(ken, guile, ken, 40, 5, minutes=10),
    ]

    leaderboard = build_leaderboard(records)

    assert leaderboard.total_battles == 3
    assert [e.name for e in leaderboard.entries] == ["Ryu", "Ken", "Guile"]

    ryu_entry = leaderboard.entries[0]
    assert (ryu_entry.wins, ryu_entry.losses, ryu_entry.total_battles) == (2, 0, 2)
    assert ryu_entry.win_rate == 100.0
    assert ryu_entry.total_damage_dealt == 55
    assert ryu_entry.total_damage_taken == 30
    assert ryu_entry.average_damage_dealt == 27.5
    assert ryu_entry.average_rounds_survived == 2.0
    assert ryu_entry.opponents == ["Ken", "Guile"]
    assert ryu_entry.arenas == ["Dojo", "Rooftop"]
    assert ryu_entry.last_battle == START + timedelta(minutes=5)


def test_draws_counted_separately(fighter_factory) -> None:
    ryu, ken = fighter_factory("Ryu"), fighter_factory("Ken")

    leaderboard = build_leaderboard([_record(ryu, ken, None, 10, 10)])

    for entry in leaderboard.entries:
        assert (entry.wins, entry.losses, entry.draws) == (0, 0, 1)
        assert entry.win_rate == 0.0


def test_namesakes_get_their_own_entries(fighter_factory) -> None:
    bruce_a = fighter_factory("Bruce", fighter_id="bruce-a")
    bruce_b = fighter_factory("Bruce", fighter_id="bruce-b")

    leaderboard = build_leaderboard([_record(bruce_a, bruce_b, bruce_b, 30, 45)])

    by_id = {e.fighter_id: e for e in leaderboard.entries}
    assert (by_id["bruce-a"].wins, by_id["bruce-a"].losses) == (0, 1)
    assert (by_id["bruce-b"].wins, by_id["bruce-b"].losses) == (1, 0)
    assert by_id["bruce-a"].total_damage_dealt == 30
    assert by_id["bruce-b"].total_damage_dealt == 45


def test_fighter_named_draw_can_win(fighter_factory) -> None:
    draw = fighter_factory("Draw")
    weak = fighter_factory("Weak")

    leaderboard = build_leaderboard([_record(draw, weak, draw, 60, 10)])

    winner = leaderboard.entries[0]
    assert winner.name == "Draw"
    assert (winner.wins, winner.draws) == (1, 0)


def test_latest_stats_win(fighter_factory) -> None:
    old = fighter_factory("Ryu", strength=20)
    new = fighter_factory("Ryu", strength=45)
    ken = fighter_factory("Ken")

    leaderboard = build_leaderboard(
        [_record(new, ken, new, 10, 5, minutes=30), _record(old, ken, ken, 5, 10)]
    )

    ryu_entry = next(e for e in leaderboard.entries if e.name == "Ryu")
    assert ryu_entry.current_stats.strength == 45


def test_empty_leaderboard() -> None:
    leaderboard = build_leaderboard([])

    assert leaderboard.entries == []
    assert leaderboard.total_battles == 0


def test_unfought_match_has_no_record(fighter_factory) -> None:
    lone = fighter_factory("Lone")
    bye = TournamentMatch(
        id="match-1-2", fighter_a=lone, winner=lone,
        status=MatchStatus.COMPLETED, round=1, match_number=2,
    )

    assert battle_record_from_match(bye) is None
