"""Tournament management and progression."""

import logging
import uuid
from collections.abc import Callable
from typing import TypeAlias

from arenaforge.engine.combat.models import Arena, BattleLog, Fighter
from arenaforge.engine.combat.resolver import CombatResolver
from arenaforge.engine.combat.rng import Roller
from arenaforge.engine.config.settings import AppConfig
from arenaforge.engine.exceptions import InvalidRosterError, TournamentStateError
from .bracket import (
    advance_fighter_to_next_round,
    calculate_total_rounds,
    generate_bracket,
    generate_tournament_name,
    get_next_pending_match,
    get_tournament_progress,
    get_tournament_winner,
    is_round_complete,
    is_tournament_complete,
    replace_match,
    resolve_walkovers,
)
from .history import (
    build_commentary_context,
    initialize_historical_data,
    update_historical_data,
)
from .leaderboard import Leaderboard, battle_record_from_match, build_leaderboard
from .models import (
    CommentaryContext,
    MatchStatus,
    Tournament,
    TournamentBracket,
    TournamentHistoricalData,
    TournamentMatch,
    TournamentProgress,
    TournamentProgressUpdate,
    TournamentStatus,
)

logger = logging.getLogger(__name__)

ProgressCallback: TypeAlias = Callable[[TournamentProgressUpdate], None]


class TournamentManager:
    """Owns one tournament's mutable state and drives it through the engine.

    The bracket, combat and statistics functions it calls are pure; this class
    is the only place state is replaced, and observers registered with
    add_progress_callback are told about every change.
    """

    def __init__(self, config: AppConfig | None = None, roller: Roller | None = None):
        self.config = config or AppConfig()
        self.roller = roller or Roller(self.config.system.random_seed)
        self.resolver = CombatResolver(self.config.combat, self.roller)
        self.tournament: Tournament | None = None
        self.historical: TournamentHistoricalData | None = None
        self.arenas: list[Arena] = []
        self.progress_callbacks: list[ProgressCallback] = []

    def add_progress_callback(self, callback_func: ProgressCallback) -> None:
        """Add callback function for tournament progress updates."""
        self.progress_callbacks.append(callback_func)
        logger.info("Added tournament progress callback")

    def create_tournament(
        self,
        fighters: list[Fighter],
        name: str | None = None,
        arenas: list[Arena] | None = None,
    ) -> Tournament:
        """Create tournament with bracket generation."""
        if len(fighters) < 2:
            raise InvalidRosterError(
                "At least 2 fighters are required to create a tournament"
            )
        fighter_ids = [f.id for f in fighters]
        if len(set(fighter_ids)) != len(fighter_ids):
            raise InvalidRosterError("Fighter ids must be unique within a tournament")

        self.arenas = list(arenas or [])
        brackets = generate_bracket(fighters, self.roller)

        tournament = Tournament(
            id=f"tournament-{uuid.uuid4().hex[:12]}",
            name=name or generate_tournament_name(),
            fighters=list(fighters),
            brackets=brackets,
            total_rounds=calculate_total_rounds(len(fighters)),
            arena_name=self.arenas[0].name if len(self.arenas) == 1 else None,
        )
        self.tournament = tournament
        self.historical = initialize_historical_data(tournament)

        logger.info(
            f"Created tournament {tournament.id} '{tournament.name}' with "
            f"{len(fighters)} fighters over {tournament.total_rounds} rounds"
        )
        self._notify(
            "tournament_created",
            round_number=1,
            message=f"Tournament '{tournament.name}' created with {len(fighters)} fighters",
        )

        # First-round byes are already decided; move those fighters along now
        for match in brackets[0].matches:
            if match.is_bye and match.winner is not None:
                self._close_match(match)

        return self._require_tournament()

    def execute_next_match(self) -> TournamentMatch | None:
        """Fight the next ready match. Returns None when nothing is left to play."""
        tournament = self._require_tournament()
        if tournament.status == TournamentStatus.COMPLETED:
            raise TournamentStateError(f"Tournament {tournament.id} is already completed")

        match = get_next_pending_match(tournament.brackets)
        if match is None:
            return None
        if match.fighter_a is None or match.fighter_b is None:
            raise TournamentStateError(f"Match {match.id} is missing a fighter")

        arena = match.arena or self._pick_arena()
        battle_log, winner = self._fight(match.fighter_a, match.fighter_b, arena, match.id)

        completed = match.model_copy(
            update={
                "status": MatchStatus.COMPLETED,
                "winner": winner,
                "battle_log": battle_log,
                "arena": arena,
            }
        )
        self._close_match(completed)
        return completed

    def run_tournament(self) -> Tournament:
        """Execute matches until a champion is crowned."""
        tournament = self._require_tournament()
        while tournament.status != TournamentStatus.COMPLETED:
            if self.execute_next_match() is None:
                raise TournamentStateError(
                    f"Tournament {tournament.id} has no playable match but is not complete"
                )
            tournament = self._require_tournament()
        return tournament

    def get_progress(self) -> TournamentProgress:
        return get_tournament_progress(self._require_tournament())

    def get_bracket_view(self) -> list[TournamentBracket]:
        return self._require_tournament().brackets

    def get_match(self, match_id: str) -> TournamentMatch:
        for bracket in self._require_tournament().brackets:
            for match in bracket.matches:
                if match.id == match_id:
                    return match
        raise TournamentStateError(f"Match {match_id} not found")

    def get_commentary_context(self, match_id: str) -> CommentaryContext:
        """Context the commentary collaborator needs for one match."""
        if self.historical is None:
            raise TournamentStateError("No active tournament")
        return build_commentary_context(
            self._require_tournament(), self.get_match(match_id), self.historical
        )

    def get_leaderboard(self) -> Leaderboard:
        records = [
            record
            for bracket in self._require_tournament().brackets
            for match in bracket.matches
            if (record := battle_record_from_match(match)) is not None
        ]
        return build_leaderboard(records)

    def _require_tournament(self) -> Tournament:
        if self.tournament is None:
            raise TournamentStateError("No active tournament")
        return self.tournament

    def _pick_arena(self) -> Arena:
        if self.arenas:
            return self.roller.pick(self.arenas)
        return Arena(**self.config.tournament.default_arena.model_dump())

    def _fight(
        self, fighter_a: Fighter, fighter_b: Fighter, arena: Arena, match_id: str
    ) -> tuple[BattleLog, Fighter]:
        """Resolve a match, replaying draws until someone wins.

        Once the rematch budget is spent the fighter in slot A advances.
        """
        max_rounds = self.config.tournament.max_rounds
        max_rematches = self.config.tournament.max_rematches

        battle_log = self.resolver.resolve(fighter_a, fighter_b, arena, max_rounds)
        rematches = 0
        while battle_log.is_draw and rematches < max_rematches:
            rematches += 1
            logger.warning(f"Match {match_id} drawn, rematch {rematches}/{max_rematches}")
            battle_log = self.resolver.resolve(fighter_a, fighter_b, arena, max_rounds)

        if battle_log.is_draw:
            logger.warning(
                f"Match {match_id} still drawn after {max_rematches} rematches, "
                f"{fighter_a.name} advances on seeding"
            )
            return battle_log, fighter_a

        winner = fighter_a if battle_log.winner_id == fighter_a.id else fighter_b
        return battle_log, winner

    def _close_match(self, completed: TournamentMatch) -> None:
        """Record a completed match, advance its winner and settle walkovers."""
        tournament = self._require_tournament()
        if completed.winner is None or self.historical is None:
            raise TournamentStateError(f"Match {completed.id} closed without a winner")

        brackets = replace_match(tournament.brackets, completed)
        brackets = advance_fighter_to_next_round(brackets, completed.winner, completed)
        brackets, walkovers = resolve_walkovers(brackets)

        self.historical = update_historical_data(self.historical, completed)
        for walkover in walkovers:
            self.historical = update_historical_data(self.historical, walkover)

        next_match = get_next_pending_match(brackets)
        updates: dict[str, object] = {
            "brackets": brackets,
            "current_round": next_match.round if next_match else completed.round,
        }
        if is_tournament_complete(brackets):
            updates["status"] = TournamentStatus.COMPLETED
            updates["winner"] = get_tournament_winner(brackets)
        elif completed.battle_log is not None:
            updates["status"] = TournamentStatus.IN_PROGRESS

        self.tournament = tournament.model_copy(update=updates)

        if completed.battle_log is not None:
            self._notify(
                "match_completed",
                round_number=completed.round,
                match_id=completed.id,
                winner=completed.winner.name,
                message=f"Battle completed: {completed.winner.name} wins!",
            )
        else:
            self._notify(
                "match_completed",
                round_number=completed.round,
                match_id=completed.id,
                winner=completed.winner.name,
                message=f"{completed.winner.name} advances on a bye",
            )

        for walkover in walkovers:
            if walkover.winner is None:
                continue
            self._notify(
                "match_completed",
                round_number=walkover.round,
                match_id=walkover.id,
                winner=walkover.winner.name,
                message=f"{walkover.winner.name} advances by walkover",
            )

        for round_number in sorted({completed.round} | {w.round for w in walkovers}):
            if is_round_complete(brackets, round_number):
                self._notify(
                    "round_completed",
                    round_number=round_number,
                    message=f"Round {round_number} completed",
                )

        if self.tournament.status == TournamentStatus.COMPLETED and self.tournament.winner:
            logger.info(
                f"Tournament {tournament.id} completed, winner: {self.tournament.winner.name}"
            )
            self._notify(
                "tournament_completed",
                round_number=completed.round,
                winner=self.tournament.winner.name,
                message=f"{self.tournament.winner.name} is the champion!",
            )

    def _notify(
        self,
        update_type: str,
        round_number: int,
        message: str,
        match_id: str | None = None,
        winner: str | None = None,
    ) -> None:
        tournament = self._require_tournament()
        update = TournamentProgressUpdate(
            tournament_id=tournament.id,
            type=update_type,
            round_number=round_number,
            match_id=match_id,
            winner=winner,
            message=message,
        )
        for callback in self.progress_callbacks:
            try:
                callback(update)
            except Exception as e:
                logger.error(f"Error in tournament progress callback: {e}")
