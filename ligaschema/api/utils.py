from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ligaschema.core.errors import ConfigError
from ligaschema.core.teams import ALL_TEAMS, DIVISION_COUNT, TEAMS_PER_DIVISION, Team, team_from_value

_split_re = re.compile(r"[\s,;/|]+")


def default_team_name(team: Team) -> str:
    return f"Lag {team.value}"


def ensure_team_names(names: Optional[Mapping[object, Optional[str]]]) -> Dict[Team, str]:
    """Fill in display names for all twelve teams; blanks fall back to 'Lag X'."""
    out: Dict[Team, str] = {t: default_team_name(t) for t in ALL_TEAMS}
    if not names:
        return out
    for key, value in names.items():
        try:
            team = team_from_value(key)
        except ValueError:
            continue
        if value and str(value).strip():
            out[team] = str(value).strip()
    return out


def parse_team_names(items: Sequence[str]) -> Dict[Team, str]:
    """Parse ``A=Name`` items into a name mapping."""
    raw: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep:
            raise ConfigError(f"Lagnamn måste anges som LAG=Namn, fick '{item}'.")
        raw[key] = value
    return ensure_team_names(raw)


def parse_assignment(text: str) -> List[Tuple[Team, ...]]:
    """Parse ``"ABC,DEF,GHI,JKL"`` into division slots (not validated for size)."""
    slots: List[Tuple[Team, ...]] = []
    for chunk in _split_re.split(text.strip()):
        if not chunk:
            continue
        try:
            slots.append(tuple(team_from_value(ch) for ch in chunk))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
    return slots


def is_complete_assignment(assignment: Sequence[Sequence[object]]) -> bool:
    """True when the (possibly in-progress) assignment is exactly 4 slots of 3 distinct teams."""
    if len(assignment) != DIVISION_COUNT:
        return False
    if any(len(slot) != TEAMS_PER_DIVISION for slot in assignment):
        return False
    try:
        teams = {team_from_value(t) for slot in assignment for t in slot}
    except ValueError:
        return False
    return len(teams) == DIVISION_COUNT * TEAMS_PER_DIVISION
