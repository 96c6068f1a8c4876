"""Single-elimination tournaments built on the combat engine."""

from .bracket import (
    advance_fighter_to_next_round,
    calculate_total_rounds,
    find_dead_matches,
    generate_bracket,
    generate_tournament_name,
    get_next_pending_match,
    get_tournament_progress,
    get_tournament_winner,
    is_round_complete,
    is_tournament_complete,
    resolve_walkovers,
)
from .history import (
    analyze_fighting_style,
    build_commentary_context,
    classify_notable_moment,
    create_notable_moment,
    initialize_historical_data,
    update_fighter_stats,
    update_historical_data,
)
from .leaderboard import BattleRecord, Leaderboard, LeaderboardEntry, build_leaderboard
from .manager import TournamentManager
from .models import (
    CommentaryContext,
    FighterTournamentStats,
    MatchStatus,
    MomentImpact,
    MomentType,
    Tournament,
    TournamentBracket,
    TournamentHistoricalData,
    TournamentMatch,
    TournamentMoment,
    TournamentProgress,
    TournamentProgressUpdate,
    TournamentStatus,
)

__all__ = [
    "advance_fighter_to_next_round",
    "calculate_total_rounds",
    "find_dead_matches",
    "generate_bracket",
    "generate_tournament_name",
    "get_next_pending_match",
    "get_tournament_progress",
    "get_tournament_winner",
    "is_round_complete",
    "is_tournament_complete",
    "resolve_walkovers",
    "analyze_fighting_style",
    "build_commentary_context",
    "classify_notable_moment",
    "create_notable_moment",
    "initialize_historical_data",
    "update_fighter_stats",
    "update_historical_data",
    "BattleRecord",
    "Leaderboard",
    "LeaderboardEntry",
    "build_leaderboard",
    "TournamentManager",
    "CommentaryContext",
    "FighterTournamentStats",
    "MatchStatus",
    "MomentImpact",
    "MomentType",
    "Tournament",
    "TournamentBracket",
    "TournamentHistoricalData",
    "TournamentMatch",
    "TournamentMoment",
    "TournamentProgress",
    "TournamentProgressUpdate",
    "TournamentStatus",
]
