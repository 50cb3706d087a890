"""Orchestration helpers sitting between a UI layer and the schedule engine."""

from .services import (
    MAX_GENERATION_RETRIES,
    AttemptPolicy,
    RetryOptions,
    config_for_attempt,
    generate_schedule_with_retry,
    generate_season_with_retry,
)
from .utils import ensure_team_names, is_complete_assignment, parse_assignment, parse_team_names

__all__ = [
    "MAX_GENERATION_RETRIES",
    "AttemptPolicy",
    "RetryOptions",
    "config_for_attempt",
    "generate_schedule_with_retry",
    "generate_season_with_retry",
    "ensure_team_names",
    "is_complete_assignment",
    "parse_assignment",
    "parse_team_names",
]
