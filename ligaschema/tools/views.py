from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ligaschema.api.utils import ensure_team_names
from ligaschema.core.fixtures import MatchUp, Schedule, Week
from ligaschema.core.league import LeagueConfig
from ligaschema.core.teams import Team

PASS = "✓"
FAIL = "✗"


@dataclass(slots=True)
class TeamRow:
    team: Team
    name: str
    division: str
    rival: str
    home: int
    away: int


def _name(names: Mapping[Team, str], team: Team) -> str:
    return names.get(team, team.value)


def match_tags(m: MatchUp) -> str:
    tags = []
    if m.is_divisional:
        tags.append("DIV")
    if m.is_rivalry:
        tags.append("RIV")
    return f" [{','.join(tags)}]" if tags else ""


def format_week(week: Week, names: Optional[Mapping[Team, str]] = None) -> List[str]:
    names = ensure_team_names(names)
    lines = [f"Vecka {week.number}:"]
    for m in week:
        lines.append(f"  {_name(names, m.away)} @ {_name(names, m.home)}{match_tags(m)}")
    return lines


def format_schedule(schedule: Schedule, names: Optional[Mapping[Team, str]] = None) -> str:
    lines: List[str] = []
    for week in schedule:
        lines.extend(format_week(week, names))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def team_rows(
    schedule: Schedule, config: LeagueConfig, names: Optional[Mapping[Team, str]] = None
) -> List[TeamRow]:
    names = ensure_team_names(names)
    homes = schedule.home_counts()
    aways = schedule.away_counts()
    return [
        TeamRow(
            team=t,
            name=_name(names, t),
            division=config.division_of(t).name,
            rival=_name(names, config.rival_of(t)),
            home=homes.get(t, 0),
            away=aways.get(t, 0),
        )
        for t in config.teams
    ]


def format_report(report: Mapping[str, List[str]]) -> List[str]:
    lines: List[str] = []
    for rule, problems in report.items():
        if problems:
            lines.append(f"  {FAIL} {rule}: {'; '.join(problems)}")
        else:
            lines.append(f"  {PASS} {rule}")
    return lines


def schedule_rows(schedule: Schedule) -> List[Dict[str, Any]]:
    """Platt lista för utskrift som JSON."""
    return [
        {
            "week": week.number,
            "home": m.home.value,
            "away": m.away.value,
            "divisional": m.is_divisional,
            "rivalry": m.is_rivalry,
        }
        for week in schedule
        for m in week
    ]
