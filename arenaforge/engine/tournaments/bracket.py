"""Single-elimination bracket generation and advancement.

Everything here is a pure function over bracket lists: inputs are never
mutated, updated brackets are returned as new objects.
"""

import logging
import math
from datetime import datetime

from arenaforge.engine.combat.models import Fighter
from arenaforge.engine.combat.rng import Roller
from arenaforge.engine.exceptions import InvalidRosterError, TournamentStateError
from .models import (
    MatchStatus,
    Tournament,
    TournamentBracket,
    TournamentMatch,
    TournamentProgress,
)

logger = logging.getLogger(__name__)


def generate_tournament_name(now: datetime | None = None) -> str:
    """Name a tournament after its creation time, e.g. 'Tournament Mar 4, 2025 07:30 PM'."""
    now = now or datetime.now()
    return f"Tournament {now.strftime('%b')} {now.day}, {now.year} {now.strftime('%I:%M %p')}"


def calculate_total_rounds(num_fighters: int) -> int:
    """Calculate total rounds needed for a roster size."""
    if num_fighters < 1:
        raise InvalidRosterError(f"Roster must contain at least one fighter, got {num_fighters}")
    return math.ceil(math.log2(num_fighters))


def make_match_id(round_number: int, match_number: int) -> str:
    return f"match-{round_number}-{match_number}"


def generate_bracket(
    fighters: list[Fighter], roller: Roller | None = None
) -> list[TournamentBracket]:
    """Generate a complete single-elimination bracket with random seeding.

    Consecutive fighters of the shuffled roster are paired into round-1
    matches. An odd fighter out gets a bye: a completed match with no
    opponent, no battle log and the fighter already set as winner. Later
    rounds are created as empty pending slots for the advancer to fill.
    """
    if not fighters:
        raise InvalidRosterError("Cannot build a bracket from an empty roster")

    roller = roller or Roller()
    total_rounds = calculate_total_rounds(len(fighters))
    seeded = roller.shuffled(fighters)

    first_round_matches: list[TournamentMatch] = []
    for match_number, index in enumerate(range(0, len(seeded), 2), start=1):
        fighter_a = seeded[index]
        fighter_b = seeded[index + 1] if index + 1 < len(seeded) else None

        if fighter_b is None:
            first_round_matches.append(
                TournamentMatch(
                    id=make_match_id(1, match_number),
                    fighter_a=fighter_a,
                    winner=fighter_a,
                    status=MatchStatus.COMPLETED,
                    round=1,
                    match_number=match_number,
                )
            )
            logger.info(f"{fighter_a.name} receives a first-round bye")
        else:
            first_round_matches.append(
                TournamentMatch(
                    id=make_match_id(1, match_number),
                    fighter_a=fighter_a,
                    fighter_b=fighter_b,
                    round=1,
                    match_number=match_number,
                )
            )

    brackets = [TournamentBracket(round=1, matches=first_round_matches)]

    for round_number in range(2, total_rounds + 1):
        matches_in_round = 2 ** (total_rounds - round_number)
        brackets.append(
            TournamentBracket(
                round=round_number,
                matches=[
                    TournamentMatch(
                        id=make_match_id(round_number, i),
                        round=round_number,
                        match_number=i,
                    )
                    for i in range(1, matches_in_round + 1)
                ],
            )
        )

    logger.info(
        f"Generated bracket for {len(fighters)} fighters: "
        f"{total_rounds} rounds, {len(first_round_matches)} opening matches"
    )
    return brackets


def _find_match(
    brackets: list[TournamentBracket], round_number: int, match_number: int
) -> TournamentMatch | None:
    for bracket in brackets:
        if bracket.round == round_number:
            for match in bracket.matches:
                if match.match_number == match_number:
                    return match
    return None


def replace_match(
    brackets: list[TournamentBracket], updated: TournamentMatch
) -> list[TournamentBracket]:
    """Return brackets with the match at updated's (round, match_number) swapped in."""
    return [
        bracket.model_copy(
            update={
                "matches": [
                    updated if match.match_number == updated.match_number else match
                    for match in bracket.matches
                ]
            }
        )
        if bracket.round == updated.round
        else bracket
        for bracket in brackets
    ]


def advance_fighter_to_next_round(
    brackets: list[TournamentBracket],
    winner: Fighter,
    completed_match: TournamentMatch,
) -> list[TournamentBracket]:
    """Place a match winner into its slot in the following round.

    Odd match numbers feed slot A of match ceil(n / 2), even ones feed slot B.
    When there is no next round (the final was just played) the brackets are
    returned unchanged.
    """
    next_round = completed_match.round + 1
    next_match_number = math.ceil(completed_match.match_number / 2)

    next_match = _find_match(brackets, next_round, next_match_number)
    if next_match is None:
        return brackets

    if completed_match.match_number % 2 == 1:
        updated = next_match.model_copy(update={"fighter_a": winner})
    else:
        updated = next_match.model_copy(update={"fighter_b": winner})

    logger.debug(f"{winner.name} advances to {updated.id}")
    return replace_match(brackets, updated)


def _feeder_alive(
    brackets: list[TournamentBracket],
    dead: set[tuple[int, int]],
    round_number: int,
    match_number: int,
) -> bool:
    """Whether the previous-round match feeding this slot can produce a winner."""
    feeder_round = round_number - 1
    if _find_match(brackets, feeder_round, match_number) is None:
        return False
    return (feeder_round, match_number) not in dead


def find_dead_matches(brackets: list[TournamentBracket]) -> set[tuple[int, int]]:
    """Return (round, match_number) of slots no fighter can ever reach.

    These appear for roster sizes well below the next power of two, e.g. round
    2 match 4 of a nine-fighter bracket.
    """
    dead: set[tuple[int, int]] = set()
    for bracket in sorted(brackets, key=lambda b: b.round):
        if bracket.round == 1:
            continue
        for match in bracket.matches:
            feeders = (match.match_number * 2 - 1, match.match_number * 2)
            if not any(_feeder_alive(brackets, dead, bracket.round, f) for f in feeders):
                dead.add((bracket.round, match.match_number))
    return dead


def _next_walkover(brackets: list[TournamentBracket]) -> TournamentMatch | None:
    dead = find_dead_matches(brackets)
    for bracket in sorted(brackets, key=lambda b: b.round):
        if bracket.round == 1:
            continue
        for match in bracket.matches:
            if match.status != MatchStatus.PENDING:
                continue
            if (match.fighter_a is None) == (match.fighter_b is None):
                continue
            missing_feeder = (
                match.match_number * 2 - 1
                if match.fighter_a is None
                else match.match_number * 2
            )
            if not _feeder_alive(brackets, dead, bracket.round, missing_feeder):
                return match
    return None


def resolve_walkovers(
    brackets: list[TournamentBracket],
) -> tuple[list[TournamentBracket], list[TournamentMatch]]:
    """Complete later-round matches whose opponent slot can never be filled.

    Such a match is closed like a bye and its fighter advanced, repeating
    until no walkover remains. Returns the new brackets and the matches that
    were closed.
    """
    promoted: list[TournamentMatch] = []
    match = _next_walkover(brackets)
    while match is not None:
        present = match.fighter_a or match.fighter_b
        if present is None:
            raise TournamentStateError(f"Walkover {match.id} has no fighter to advance")
        completed = match.model_copy(
            update={"status": MatchStatus.COMPLETED, "winner": present}
        )
        brackets = replace_match(brackets, completed)
        brackets = advance_fighter_to_next_round(brackets, present, completed)
        promoted.append(completed)
        logger.info(f"{present.name} advances from {completed.id} by walkover")
        match = _next_walkover(brackets)
    return brackets, promoted


def is_tournament_complete(brackets: list[TournamentBracket]) -> bool:
    """The final bracket's single match is completed with a winner."""
    if not brackets:
        return False
    final_bracket = max(brackets, key=lambda b: b.round)
    if not final_bracket.matches:
        return False
    final_match = final_bracket.matches[0]
    return final_match.status == MatchStatus.COMPLETED and final_match.winner is not None


def get_tournament_winner(brackets: list[TournamentBracket]) -> Fighter | None:
    if not is_tournament_complete(brackets):
        return None
    final_bracket = max(brackets, key=lambda b: b.round)
    return final_bracket.matches[0].winner


def count_playable_matches(brackets: list[TournamentBracket]) -> int:
    """Total match slots excluding ones no fighter can reach."""
    dead = find_dead_matches(brackets)
    return sum(
        1
        for bracket in brackets
        for match in bracket.matches
        if (match.round, match.match_number) not in dead
    )


def get_tournament_progress(tournament: Tournament) -> TournamentProgress:
    completed = sum(
        1
        for bracket in tournament.brackets
        for match in bracket.matches
        if match.status == MatchStatus.COMPLETED
    )
    return TournamentProgress(
        current_round=tournament.current_round,
        total_rounds=tournament.total_rounds,
        completed_matches=completed,
        total_matches=count_playable_matches(tournament.brackets),
    )


def is_round_complete(brackets: list[TournamentBracket], round_number: int) -> bool:
    """All reachable matches of the round are completed."""
    dead = find_dead_matches(brackets)
    for bracket in brackets:
        if bracket.round == round_number:
            return all(
                match.status == MatchStatus.COMPLETED
                for match in bracket.matches
                if (match.round, match.match_number) not in dead
            )
    return False


def get_next_pending_match(brackets: list[TournamentBracket]) -> TournamentMatch | None:
    """First match, in round order, with both fighters set and still pending."""
    for bracket in sorted(brackets, key=lambda b: b.round):
        for match in bracket.matches:
            if match.is_ready:
                return match
    return None
