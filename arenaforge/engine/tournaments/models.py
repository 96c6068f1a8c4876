"""Tournament system data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from arenaforge.engine.combat.models import Arena, BattleLog, Fighter


class TournamentStatus(Enum):
    """Tournament execution status."""

    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MatchStatus(Enum):
    """Individual match status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MomentType(Enum):
    """Categories of notable moments handed to commentary."""

    DOMINANCE = "dominance"
    DRAMA = "drama"
    SKILL = "skill"


class MomentImpact(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TournamentMatch(BaseModel):
    """Individual tournament match."""

    id: str
    fighter_a: Fighter | None = None  # None until the bracket is filled
    fighter_b: Fighter | None = None  # None for byes
    winner: Fighter | None = None
    status: MatchStatus = MatchStatus.PENDING
    round: int
    match_number: int  # Match within round
    arena: Arena | None = None
    battle_log: BattleLog | None = None

    # Written by the commentary collaborator, never by the engine
    pre_match_commentary: str | None = None
    post_match_commentary: str | None = None
    notable_moments: list[str] = Field(default_factory=list)

    @property
    def is_bye(self) -> bool:
        return self.status == MatchStatus.COMPLETED and (
            self.fighter_a is None or self.fighter_b is None
        )

    @property
    def is_ready(self) -> bool:
        """Both fighters are known and the match has not been fought."""
        return (
            self.status == MatchStatus.PENDING
            and self.fighter_a is not None
            and self.fighter_b is not None
        )

    @property
    def loser(self) -> Fighter | None:
        if self.winner is None or self.fighter_a is None or self.fighter_b is None:
            return None
        return self.fighter_b if self.winner.id == self.fighter_a.id else self.fighter_a


class TournamentBracket(BaseModel):
    """All matches scheduled for one tournament round."""

    round: int
    matches: list[TournamentMatch] = Field(default_factory=list)


class Tournament(BaseModel):
    """Complete tournament information."""

    id: str
    name: str
    created_at: datetime = Field(default_factory=datetime.now)
    status: TournamentStatus = TournamentStatus.SETUP
    fighters: list[Fighter]
    brackets: list[TournamentBracket] = Field(default_factory=list)
    current_round: int = 1
    total_rounds: int
    winner: Fighter | None = None
    arena_name: str | None = None


class TournamentProgress(BaseModel):
    """Match completion counts across all brackets."""

    current_round: int
    total_rounds: int
    completed_matches: int
    total_matches: int

    @property
    def percent_complete(self) -> float:
        if self.total_matches == 0:
            return 0.0
        return self.completed_matches / self.total_matches * 100


class FighterTournamentStats(BaseModel):
    """Cumulative per-fighter counters for one tournament."""

    fighter_id: str
    fighter_name: str
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    average_damage_per_round: float = 0.0
    quickest_victory: int | None = None  # Fewest rounds needed for a win
    longest_battle: int | None = None
    most_damaging_attack: int | None = None
    eliminated: bool = False
    fighting_style: str = ""
    tournament_journey: str = "Tournament beginning"


class TournamentMoment(BaseModel):
    """A match worth calling out in commentary."""

    id: str
    type: MomentType
    description: str
    match_id: str
    round: int
    fighters: list[str]
    impact: MomentImpact
    timestamp: datetime = Field(default_factory=datetime.now)


class TournamentHistoricalData(BaseModel):
    """Tournament-wide statistics accumulated match by match."""

    tournament_id: str
    start_date: datetime = Field(default_factory=datetime.now)
    total_matches: int
    completed_matches: int = 0
    fighter_stats: list[FighterTournamentStats] = Field(default_factory=list)
    notable_moments: list[TournamentMoment] = Field(default_factory=list)
    dominant_performances: list[str] = Field(default_factory=list)
    tournament_highlights: list[str] = Field(default_factory=list)

    def stats_for(self, fighter_id: str) -> FighterTournamentStats | None:
        for stats in self.fighter_stats:
            if stats.fighter_id == fighter_id:
                return stats
        return None


class CommentaryContext(BaseModel):
    """Snapshot handed to the commentary generator."""

    completed_matches: int
    remaining_fighters: list[str]
    notable_moments: list[str]
    tournament_progress: float
    current_stakes: str


class TournamentProgressUpdate(BaseModel):
    """Observer notification for tournament progression."""

    tournament_id: str
    type: str  # 'tournament_created', 'match_completed', 'round_completed', 'tournament_completed'
    round_number: int
    match_id: str | None = None
    winner: str | None = None
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)
