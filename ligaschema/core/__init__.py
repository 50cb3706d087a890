# Gör det lättare att importera i resten av projektet
from .balance import MAX_BALANCE_ITERATIONS, balance_home_away
from .errors import ConfigError, PlacementError, ScheduleError, ScheduleInvariantError
from .fixtures import (
    HOME_GAMES_PER_TEAM,
    MATCH_UPS_PER_WEEK,
    ROUND_ROBIN_WEEKS,
    TOTAL_MATCH_UPS,
    WEEK_COUNT,
    HomeTally,
    Match,
    MatchUp,
    Schedule,
    Week,
    pair_key,
    round_robin,
)
from .league import (
    DEFAULT_DIVISIONS,
    DEFAULT_RIVALRY_PAIRS,
    Division,
    LeagueConfig,
    check_assignment,
)
from .placement import (
    MAX_PLACEMENT_ATTEMPTS,
    MAX_PLACEMENT_RETRIES,
    PLACEMENT_TIERS,
    ExtraGame,
    PlacementTier,
    extra_games,
    place_extra_games,
)
from .rivalries import (
    RivalryPair,
    compute_rivalry_pairs,
    random_rivalry_pairs,
    shuffle_division_order,
    shuffle_teams,
)
from .schedule import GenerationOptions, generate_schedule
from .teams import ALL_TEAMS, DIVISION_COUNT, TEAM_COUNT, TEAMS_PER_DIVISION, Team, team_from_value
from .validation import assert_valid_schedule, check_structure, schedule_violations

__all__ = [
    "Team",
    "ALL_TEAMS",
    "TEAM_COUNT",
    "DIVISION_COUNT",
    "TEAMS_PER_DIVISION",
    "team_from_value",
    "Division",
    "LeagueConfig",
    "RivalryPair",
    "DEFAULT_DIVISIONS",
    "DEFAULT_RIVALRY_PAIRS",
    "check_assignment",
    "compute_rivalry_pairs",
    "random_rivalry_pairs",
    "shuffle_division_order",
    "shuffle_teams",
    "Match",
    "MatchUp",
    "Week",
    "Schedule",
    "HomeTally",
    "pair_key",
    "round_robin",
    "WEEK_COUNT",
    "ROUND_ROBIN_WEEKS",
    "MATCH_UPS_PER_WEEK",
    "HOME_GAMES_PER_TEAM",
    "TOTAL_MATCH_UPS",
    "ExtraGame",
    "PlacementTier",
    "PLACEMENT_TIERS",
    "MAX_PLACEMENT_ATTEMPTS",
    "MAX_PLACEMENT_RETRIES",
    "extra_games",
    "place_extra_games",
    "MAX_BALANCE_ITERATIONS",
    "balance_home_away",
    "GenerationOptions",
    "generate_schedule",
    "check_structure",
    "schedule_violations",
    "assert_valid_schedule",
    "ConfigError",
    "ScheduleError",
    "PlacementError",
    "ScheduleInvariantError",
]
