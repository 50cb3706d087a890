from __future__ import annotations

from collections import Counter
from itertools import combinations
from typing import Dict, List

from .errors import ScheduleInvariantError
from .fixtures import (
    HOME_GAMES_PER_TEAM,
    MATCH_UPS_PER_WEEK,
    TOTAL_MATCH_UPS,
    WEEK_COUNT,
    Schedule,
    pair_key,
)
from .league import LeagueConfig


def _fmt_pair(pair) -> str:
    return "-".join(sorted(t.value for t in pair))


def check_structure(schedule: Schedule) -> List[str]:
    """14 veckor med 6 matcher vardera, 84 totalt."""
    problems: List[str] = []
    if len(schedule) != WEEK_COUNT:
        problems.append(f"{len(schedule)} veckor, förväntade {WEEK_COUNT}")
    for week in schedule:
        if len(week) != MATCH_UPS_PER_WEEK:
            problems.append(
                f"vecka {week.number} har {len(week)} matcher, förväntade {MATCH_UPS_PER_WEEK}"
            )
    if schedule.total_match_ups != TOTAL_MATCH_UPS:
        problems.append(f"{schedule.total_match_ups} matcher totalt, förväntade {TOTAL_MATCH_UPS}")
    return problems


def schedule_violations(schedule: Schedule, config: LeagueConfig) -> Dict[str, List[str]]:
    """Kontrollera alla säsongsregler; tom lista per regel betyder godkänt."""
    teams = config.teams
    meetings = schedule.meetings()
    homes = schedule.home_counts()
    aways = schedule.away_counts()

    report: Dict[str, List[str]] = {
        "struktur": check_structure(schedule),
        "en match per lag och vecka": [],
        "alla möts en eller två gånger": [],
        "divisionslag möts två gånger": [],
        "rivaler möts två gånger": [],
        "7 hemma, 7 borta": [],
        "minst en rivalmatch per lag": [],
        "inga möten två veckor i rad": [],
        "flaggor": [],
    }

    for week in schedule:
        counts = Counter(week.teams())
        dupes = sorted(t.value for t, c in counts.items() if c > 1)
        missing = sorted(t.value for t in teams if t not in counts)
        if dupes or missing:
            report["en match per lag och vecka"].append(
                f"vecka {week.number}: dubbletter {dupes}, saknas {missing}"
            )

    for a, b in combinations(teams, 2):
        n = meetings.get(pair_key(a, b), 0)
        label = _fmt_pair((a, b))
        if n not in (1, 2):
            report["alla möts en eller två gånger"].append(f"{label} möts {n} gånger")
        if config.is_divisional(a, b) and n != 2:
            report["divisionslag möts två gånger"].append(f"{label} möts {n} gånger")
        if config.rival_of(a) == b and n != 2:
            report["rivaler möts två gånger"].append(f"{label} möts {n} gånger")

    for team in teams:
        if homes.get(team, 0) != HOME_GAMES_PER_TEAM or aways.get(team, 0) != HOME_GAMES_PER_TEAM:
            report["7 hemma, 7 borta"].append(
                f"{team}: {homes.get(team, 0)} hemma, {aways.get(team, 0)} borta"
            )
        division = config.division_of(team)
        rival_games = [
            m
            for m in schedule.match_ups()
            if m.involves(team) and m.is_rivalry and m.opponent_of(team) not in division
        ]
        if not rival_games:
            report["minst en rivalmatch per lag"].append(f"{team} saknar rivalmatch")

    for prev, nxt in zip(schedule.weeks, schedule.weeks[1:]):
        repeated = prev.pairs() & nxt.pairs()
        for pair in sorted(repeated, key=_fmt_pair):
            report["inga möten två veckor i rad"].append(
                f"{_fmt_pair(pair)} i vecka {prev.number} och {nxt.number}"
            )

    for week in schedule:
        for m in week:
            if m.is_divisional != config.is_divisional(m.home, m.away):
                report["flaggor"].append(f"vecka {week.number}: {m} fel divisionsflagga")
            if m.is_rivalry != config.is_rivalry(m.home, m.away):
                report["flaggor"].append(f"vecka {week.number}: {m} fel rivalflagga")

    return report


def assert_valid_schedule(schedule: Schedule, config: LeagueConfig) -> None:
    failures = [
        f"{rule}: {problem}"
        for rule, problems in schedule_violations(schedule, config).items()
        for problem in problems
    ]
    if failures:
        raise ScheduleInvariantError("; ".join(failures))
