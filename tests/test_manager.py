"""Tests for the tournament manager."""

import pytest

from arenaforge.engine.combat.models import Arena
from arenaforge.engine.combat.rng import Roller
from arenaforge.engine.config.settings import AppConfig, TournamentConfig
from arenaforge.engine.exceptions import InvalidRosterError, TournamentStateError
from arenaforge.engine.tournaments.manager import TournamentManager
from arenaforge.engine.tournaments.models import (
    MatchStatus,
    TournamentProgressUpdate,
    TournamentStatus,
)


@pytest.fixture
def arenas() -> list[Arena]:
    return [
        Arena(id="dojo", name="Dojo", environmental_objects=["wooden dummy", "paper wall"]),
        Arena(id="rooftop", name="Rooftop", environmental_objects=["water tower"]),
    ]


@pytest.fixture
def updates() -> list[TournamentProgressUpdate]:
    return []


@pytest.fixture
def manager(updates) -> TournamentManager:
    manager = TournamentManager(roller=Roller(seed=21))
    manager.add_progress_callback(updates.append)
    return manager


class TestTournamentRun:
    def test_five_fighter_tournament(self, manager, roster, arenas, updates) -> None:
        fighters = roster(5)
        manager.create_tournament(fighters, name="Spring Cup", arenas=arenas)

        tournament = manager.run_tournament()

        assert tournament.status == TournamentStatus.COMPLETED
        assert tournament.name == "Spring Cup"
        assert tournament.winner is not None
        assert tournament.winner.id in {f.id for f in fighters}
        assert tournament.current_round == tournament.total_rounds == 3

        progress = manager.get_progress()
        assert progress.completed_matches == progress.total_matches == 6
        assert progress.percent_complete == 100.0

        for bracket in tournament.brackets:
            for match in bracket.matches:
                assert match.status == MatchStatus.COMPLETED
                if match.battle_log is not None:
                    assert match.arena.id in {"dojo", "rooftop"}

    def test_only_the_champion_survives(self, manager, roster) -> None:
        manager.create_tournament(roster(6))
        tournament = manager.run_tournament()

        survivors = [s for s in manager.historical.fighter_stats if not s.eliminated]

        assert [s.fighter_id for s in survivors] == [tournament.winner.id]
        assert manager.historical.completed_matches == manager.historical.total_matches

    def test_progress_notifications(self, manager, roster, updates) -> None:
        tournament = manager.create_tournament(roster(5))
        manager.run_tournament()

        types = [u.type for u in updates]
        assert types[0] == "tournament_created"
        assert types[-1] == "tournament_completed"
        assert types.count("match_completed") == 6
        assert [u.round_number for u in updates if u.type == "round_completed"] == [1, 2, 3]
        assert all(u.tournament_id == tournament.id for u in updates)

        messages = [u.message for u in updates]
        assert any("advances on a bye" in m for m in messages)
        assert any("advances by walkover" in m for m in messages)

    def test_same_seed_same_tournament(self, roster) -> None:
        fighters = roster(7)
        runs = []
        for _ in range(2):
            manager = TournamentManager(roller=Roller(seed=8))
            manager.create_tournament(fighters)
            runs.append(manager.run_tournament())

        first, second = runs
        assert first.winner.id == second.winner.id
        for bracket_a, bracket_b in zip(first.brackets, second.brackets):
            for match_a, match_b in zip(bracket_a.matches, bracket_b.matches):
                assert match_a.model_dump(exclude={"battle_log"}) == match_b.model_dump(
                    exclude={"battle_log"}
                )
                if match_a.battle_log is not None:
                    assert match_a.battle_log.model_dump_json() == match_b.battle_log.model_dump_json()

    def test_step_by_step_execution(self, manager, roster) -> None:
        manager.create_tournament(roster(4))

        played = manager.execute_next_match()

        assert played.id == "match-1-1"
        assert played.battle_log is not None
        assert manager.get_match("match-1-1").status == MatchStatus.COMPLETED
        assert manager.tournament.status == TournamentStatus.IN_PROGRESS
        assert manager.get_progress().completed_matches == 1

        final = manager.get_match("match-2-1")
        assert final.fighter_a == played.winner
        assert final.fighter_b is None

    def test_default_arena_when_none_given(self, manager, roster) -> None:
        manager.create_tournament(roster(2))

        played = manager.execute_next_match()

        assert played.arena.name == "Tournament Arena"
        assert manager.tournament.status == TournamentStatus.COMPLETED
        assert manager.tournament.winner == played.winner

    def test_single_arena_sets_tournament_arena_name(self, manager, roster, arenas) -> None:
        tournament = manager.create_tournament(roster(2), arenas=arenas[:1])

        assert tournament.arena_name == "Dojo"


class TestDraws:
    def test_drawn_match_advances_slot_a(self, fighter_factory, scripted_roller) -> None:
        """Twins trade identical hits; after the rematches slot A goes through."""
        roller = scripted_roller()
        config = AppConfig(tournament=TournamentConfig(max_rounds=2, max_rematches=2))
        manager = TournamentManager(config=config, roller=roller)
        manager.create_tournament(
            [fighter_factory("Twin A"), fighter_factory("Twin B")]
        )

        match = manager.execute_next_match()

        assert match.battle_log.is_draw
        assert match.winner == match.fighter_a
        # Three fights of two rounds, three checks per balanced round
        assert len(roller.chance_calls) == 18
        assert manager.tournament.winner == match.fighter_a

        entries = manager.get_leaderboard().entries
        assert [e.draws for e in entries] == [1, 1]

    def test_no_rematches_configured(self, fighter_factory, scripted_roller) -> None:
        roller = scripted_roller()
        config = AppConfig(tournament=TournamentConfig(max_rounds=2, max_rematches=0))
        manager = TournamentManager(config=config, roller=roller)
        manager.create_tournament([fighter_factory("Twin A"), fighter_factory("Twin B")])

        match = manager.execute_next_match()

        assert match.winner == match.fighter_a
        assert len(roller.chance_calls) == 6


class TestFighterIdentity:
    """Results follow fighter ids, whatever the fighters are called."""

    def test_namesake_winner_advances(self, fighter_factory, scripted_roller) -> None:
        # Plain hits of 17 against 22: the stronger Bruce is ahead after six rounds
        manager = TournamentManager(roller=scripted_roller())
        manager.create_tournament(
            [
                fighter_factory("Bruce", strength=20, fighter_id="a"),
                fighter_factory("Bruce", strength=25, fighter_id="b"),
            ]
        )

        match = manager.execute_next_match()

        assert match.battle_log.winner_id == "b"
        assert match.winner.id == "b"
        assert manager.tournament.winner.id == "b"
        assert manager.historical.stats_for("a").total_damage_dealt == 51
        assert manager.historical.stats_for("b").total_damage_dealt == 66

    def test_fighter_named_draw_is_not_replayed(self, fighter_factory, scripted_roller) -> None:
        roller = scripted_roller()
        manager = TournamentManager(roller=roller)
        manager.create_tournament(
            [
                fighter_factory("Draw", strength=30, fighter_id="draw"),
                fighter_factory("Weak", strength=25, fighter_id="weak"),
            ],
            arenas=[Arena(id="pit", name="Pit")],
        )

        match = manager.execute_next_match()

        assert match.battle_log.winner == "Draw"
        assert not match.battle_log.is_draw
        assert manager.tournament.winner.id == "draw"
        # One fight of six balanced rounds, two checks each in an empty arena
        assert len(roller.chance_calls) == 12


class TestErrors:
    def test_closing_match_without_winner(self, manager, roster) -> None:
        manager.create_tournament(roster(4))
        pending = manager.get_match("match-1-1")

        with pytest.raises(TournamentStateError):
            manager._close_match(pending)

    def test_too_few_fighters(self, manager, roster) -> None:
        with pytest.raises(InvalidRosterError):
            manager.create_tournament(roster(1))

    def test_duplicate_fighter_ids(self, manager, fighter_factory) -> None:
        fighters = [
            fighter_factory("Ryu", fighter_id="dup"),
            fighter_factory("Ken", fighter_id="dup"),
        ]

        with pytest.raises(InvalidRosterError):
            manager.create_tournament(fighters)

    def test_no_active_tournament(self, manager) -> None:
        with pytest.raises(TournamentStateError):
            manager.execute_next_match()
        with pytest.raises(TournamentStateError):
            manager.get_progress()

    def test_completed_tournament_rejects_more_matches(self, manager, roster) -> None:
        manager.create_tournament(roster(3))
        manager.run_tournament()

        with pytest.raises(TournamentStateError):
            manager.execute_next_match()

    def test_unknown_match(self, manager, roster) -> None:
        manager.create_tournament(roster(4))

        with pytest.raises(TournamentStateError):
            manager.get_match("match-9-9")

    def test_failing_callback_does_not_stop_tournament(self, manager, roster) -> None:
        def broken(update: TournamentProgressUpdate) -> None:
            raise RuntimeError("observer exploded")

        manager.add_progress_callback(broken)
        manager.create_tournament(roster(4))

        assert manager.run_tournament().status == TournamentStatus.COMPLETED


class TestViews:
    def test_commentary_context_for_final(self, manager, roster) -> None:
        manager.create_tournament(roster(4))
        manager.run_tournament()

        context = manager.get_commentary_context("match-2-1")

        assert context.current_stakes == "Championship match"
        assert context.completed_matches == 3
        assert context.tournament_progress == 100.0
        assert context.remaining_fighters == [manager.tournament.winner.name]

    def test_leaderboard_ranks_champion_first(self, manager, roster) -> None:
        manager.create_tournament(roster(4))
        tournament = manager.run_tournament()

        leaderboard = manager.get_leaderboard()

        assert leaderboard.total_battles == 3
        assert len(leaderboard.entries) == 4
        champion = leaderboard.entries[0]
        if not any(e.draws for e in leaderboard.entries):
            assert champion.name == tournament.winner.name
            assert champion.wins == 2
            assert champion.win_rate == 100.0

    def test_bracket_view(self, manager, roster) -> None:
        manager.create_tournament(roster(8))

        brackets = manager.get_bracket_view()

        assert [len(b.matches) for b in brackets] == [4, 2, 1]
