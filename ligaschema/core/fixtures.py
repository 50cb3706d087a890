from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .teams import Team

WEEK_COUNT = 14
ROUND_ROBIN_WEEKS = 11
MATCH_UPS_PER_WEEK = 6
HOME_GAMES_PER_TEAM = 7
TOTAL_MATCH_UPS = WEEK_COUNT * MATCH_UPS_PER_WEEK

Pair = FrozenSet[Team]


def pair_key(a: Team, b: Team) -> Pair:
    return frozenset((a, b))


# ---------------------------
# Arbetsrepresentation
# ---------------------------


@dataclass(slots=True)
class Match:
    """Muterbar match som bara lever under genereringen."""

    home: Team
    away: Team
    week: int
    is_divisional: bool = False
    is_rivalry: bool = False

    @property
    def pair(self) -> Pair:
        return pair_key(self.home, self.away)

    def swap(self) -> None:
        # Byter bara hemma/borta, aldrig vilka lag som möts
        self.home, self.away = self.away, self.home

    def freeze(self) -> "MatchUp":
        return MatchUp(
            home=self.home,
            away=self.away,
            is_divisional=self.is_divisional,
            is_rivalry=self.is_rivalry,
        )

    def __str__(self) -> str:
        return f"{self.week}: {self.away} @ {self.home}"


@dataclass(slots=True)
class HomeTally:
    """Antal hemmamatcher per lag; skickas in i och ut ur varje steg."""

    counts: Dict[Team, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, teams: Iterable[Team]) -> "HomeTally":
        return cls({t: 0 for t in teams})

    @classmethod
    def from_matches(cls, teams: Iterable[Team], matches: Iterable[Match]) -> "HomeTally":
        tally = cls.empty(teams)
        for m in matches:
            tally.record(m.home)
        return tally

    def copy(self) -> "HomeTally":
        return HomeTally(dict(self.counts))

    def __getitem__(self, team: Team) -> int:
        return self.counts.get(team, 0)

    def record(self, home: Team) -> None:
        self.counts[home] = self.counts.get(home, 0) + 1

    def assign(self, a: Team, b: Team) -> Tuple[Team, Team]:
        """Laget med färst hemmamatcher får hemmaplan; lika -> `a`."""
        home = a if self[a] <= self[b] else b
        away = b if home is a else a
        self.record(home)
        return home, away

    def imbalanced(self, target: int = HOME_GAMES_PER_TEAM) -> Dict[Team, int]:
        return {t: c for t, c in self.counts.items() if c != target}


# ---------------------------
# Färdigt schema (oföränderligt)
# ---------------------------


@dataclass(frozen=True, slots=True)
class MatchUp:
    home: Team
    away: Team
    is_divisional: bool = False
    is_rivalry: bool = False

    @property
    def pair(self) -> Pair:
        return pair_key(self.home, self.away)

    @property
    def teams(self) -> Tuple[Team, Team]:
        return (self.home, self.away)

    def involves(self, team: Team) -> bool:
        return team == self.home or team == self.away

    def opponent_of(self, team: Team) -> Team:
        if team == self.home:
            return self.away
        if team == self.away:
            return self.home
        raise ValueError(f"Laget {team} spelar inte i {self}.")

    def __str__(self) -> str:
        return f"{self.away} @ {self.home}"


@dataclass(frozen=True, slots=True)
class Week:
    number: int
    match_ups: Tuple[MatchUp, ...]

    def teams(self) -> List[Team]:
        return [t for m in self.match_ups for t in m.teams]

    def pairs(self) -> Set[Pair]:
        return {m.pair for m in self.match_ups}

    def __iter__(self) -> Iterator[MatchUp]:
        return iter(self.match_ups)

    def __len__(self) -> int:
        return len(self.match_ups)


@dataclass(frozen=True, slots=True)
class Schedule:
    weeks: Tuple[Week, ...]

    @classmethod
    def from_matches(cls, weeks: Sequence[Sequence[Match]]) -> "Schedule":
        return cls(
            tuple(
                Week(number=i, match_ups=tuple(m.freeze() for m in week))
                for i, week in enumerate(weeks, start=1)
            )
        )

    def __iter__(self) -> Iterator[Week]:
        return iter(self.weeks)

    def __len__(self) -> int:
        return len(self.weeks)

    def __getitem__(self, index: int) -> Week:
        return self.weeks[index]

    def match_ups(self) -> List[MatchUp]:
        return [m for week in self.weeks for m in week.match_ups]

    @property
    def total_match_ups(self) -> int:
        return sum(len(week.match_ups) for week in self.weeks)

    def home_counts(self) -> Counter:
        return Counter(m.home for m in self.match_ups())

    def away_counts(self) -> Counter:
        return Counter(m.away for m in self.match_ups())

    def meetings(self) -> Counter:
        return Counter(m.pair for m in self.match_ups())


# ---------------------------
# Round-robin (cirkelmetoden)
# ---------------------------


def round_robin(
    teams: Sequence[Team], tally: Optional[HomeTally] = None
) -> Tuple[List[List[Match]], HomeTally]:
    """En enkel serie där alla möter alla en gång.

    Första laget står still, övriga roterar ett steg per omgång. Hemmaplan
    går till laget med färst hemmamatcher hittills (lika -> första laget i paret).
    Returnerar omgångarna och den uppdaterade räkningen; inkommande `tally`
    lämnas orörd.
    """
    n = len(teams)
    if n < 2:
        return [], tally.copy() if tally else HomeTally()
    if n % 2:
        raise ValueError(f"Round-robin kräver ett jämnt antal lag, fick {n}.")

    tally = tally.copy() if tally else HomeTally.empty(teams)
    rotation = list(teams)
    rounds: List[List[Match]] = []
    for week_no in range(1, n):
        # Position 0 mot 1, därefter speglas resten runt cirkeln
        pairings = [(rotation[0], rotation[1])]
        pairings += [(rotation[n - i], rotation[i + 1]) for i in range(1, n // 2)]
        week: List[Match] = []
        for a, b in pairings:
            home, away = tally.assign(a, b)
            week.append(Match(home=home, away=away, week=week_no))
        rounds.append(week)
        rotation.append(rotation.pop(1))
    return rounds, tally
