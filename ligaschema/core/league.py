from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import ConfigError
from .rivalries import RivalryPair, compute_rivalry_pairs
from .teams import (
    ALL_TEAMS,
    DIVISION_COUNT,
    TEAM_COUNT,
    TEAMS_PER_DIVISION,
    Team,
    team_from_value,
)


@dataclass(frozen=True, slots=True)
class Division:
    name: str
    teams: Tuple[Team, ...]

    def __contains__(self, team: object) -> bool:
        return team in self.teams

    def __iter__(self):
        return iter(self.teams)

    def __len__(self) -> int:
        return len(self.teams)


def _default_division_name(index: int) -> str:
    return f"Division {index + 1}"


DEFAULT_DIVISIONS: Tuple[Tuple[Team, ...], ...] = (
    (Team.A, Team.B, Team.C),
    (Team.D, Team.E, Team.F),
    (Team.G, Team.H, Team.I),
    (Team.J, Team.K, Team.L),
)

DEFAULT_RIVALRY_PAIRS: Tuple[RivalryPair, ...] = (
    (Team.A, Team.D),
    (Team.B, Team.E),
    (Team.C, Team.F),
    (Team.G, Team.J),
    (Team.H, Team.K),
    (Team.I, Team.L),
)


def check_assignment(assignment: Sequence[Sequence[object]]) -> List[Tuple[Team, ...]]:
    """Kräver exakt 4 divisioner med 3 lag vardera; returnerar dem som Team-tupler."""
    slots = list(assignment)
    if len(slots) != DIVISION_COUNT or any(len(slot) != TEAMS_PER_DIVISION for slot in slots):
        sizes = [len(slot) for slot in slots]
        raise ConfigError(
            f"Divisionerna måste vara {DIVISION_COUNT} st med {TEAMS_PER_DIVISION} lag "
            f"vardera (fick {sizes})."
        )
    try:
        parsed = [tuple(team_from_value(t) for t in slot) for slot in slots]
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if len({t for slot in parsed for t in slot}) != TEAM_COUNT:
        raise ConfigError(f"Varje lag måste finnas i exakt en division ({TEAM_COUNT} olika lag).")
    return parsed


@dataclass(frozen=True, slots=True)
class LeagueConfig:
    divisions: Tuple[Division, ...]
    rivalry_pairs: Tuple[RivalryPair, ...]
    _division_index: Dict[Team, int] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )
    _rivals: Dict[Team, Team] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "divisions",
            tuple(
                div if isinstance(div, Division) else Division(_default_division_name(i), tuple(div))
                for i, div in enumerate(self.divisions)
            ),
        )
        object.__setattr__(
            self, "rivalry_pairs", tuple(tuple(p) for p in self.rivalry_pairs)
        )
        self._validate_divisions()
        self._validate_rivalries()

    # ------------------------------------------------------------------
    # Validering
    # ------------------------------------------------------------------

    def _validate_divisions(self) -> None:
        if len(self.divisions) != DIVISION_COUNT:
            raise ConfigError(
                f"Ligan måste ha {DIVISION_COUNT} divisioner, fick {len(self.divisions)}."
            )
        for idx, div in enumerate(self.divisions):
            if len(div.teams) != TEAMS_PER_DIVISION:
                raise ConfigError(
                    f"{div.name} måste ha {TEAMS_PER_DIVISION} lag, fick {len(div.teams)}."
                )
            for team in div.teams:
                if not isinstance(team, Team):
                    raise ConfigError(f"{div.name} innehåller okänt lag '{team}'.")
                if team in self._division_index:
                    raise ConfigError(f"Laget {team} förekommer mer än en gång.")
                self._division_index[team] = idx
        if len(self._division_index) != TEAM_COUNT:
            raise ConfigError(
                f"Divisionerna måste täcka alla {TEAM_COUNT} lag, fick {len(self._division_index)}."
            )

    def _validate_rivalries(self) -> None:
        if len(self.rivalry_pairs) != TEAM_COUNT // 2:
            raise ConfigError(
                f"Det måste finnas {TEAM_COUNT // 2} rivalpar, fick {len(self.rivalry_pairs)}."
            )
        for pair in self.rivalry_pairs:
            if len(pair) != 2:
                raise ConfigError(f"Rivalparet {pair} måste bestå av två lag.")
            a, b = pair
            if a not in self._division_index or b not in self._division_index:
                raise ConfigError(f"Rivalparet {a}-{b} innehåller ett lag utanför ligan.")
            if a == b:
                raise ConfigError(f"Laget {a} kan inte vara sin egen rival.")
            if self._division_index[a] == self._division_index[b]:
                raise ConfigError(f"Rivalparet {a}-{b} spelar i samma division.")
            for team in (a, b):
                if team in self._rivals:
                    raise ConfigError(f"Laget {team} har mer än en rival.")
            self._rivals[a] = b
            self._rivals[b] = a

    # ------------------------------------------------------------------
    # Uppslag
    # ------------------------------------------------------------------

    @property
    def teams(self) -> Tuple[Team, ...]:
        return tuple(t for t in ALL_TEAMS if t in self._division_index)

    def division_of(self, team: Team) -> Division:
        return self.divisions[self._division_index[team]]

    def rival_of(self, team: Team) -> Team:
        return self._rivals[team]

    def is_divisional(self, a: Team, b: Team) -> bool:
        return a != b and self._division_index.get(a) == self._division_index.get(b)

    def is_rivalry(self, a: Team, b: Team) -> bool:
        # Divisionsstatus går före rivalstatus
        return self._rivals.get(a) == b and not self.is_divisional(a, b)

    # ------------------------------------------------------------------
    # Konstruktion
    # ------------------------------------------------------------------

    @classmethod
    def from_assignment(
        cls,
        assignment: Sequence[Sequence[object]],
        rivalry_pairs: Optional[Iterable[Sequence[object]]] = None,
        names: Optional[Sequence[str]] = None,
    ) -> "LeagueConfig":
        """Bygg en konfig från en divisionsindelning (4 x 3 lag).

        Saknas rivalpar räknas en deterministisk matchning fram.
        """
        slots = check_assignment(assignment)
        names = list(names or [])
        divisions = tuple(
            Division(
                name=names[i] if i < len(names) and names[i] else _default_division_name(i),
                teams=slot,
            )
            for i, slot in enumerate(slots)
        )
        if rivalry_pairs is None:
            pairs = compute_rivalry_pairs(slots)
        else:
            try:
                pairs = [tuple(team_from_value(t) for t in pair) for pair in rivalry_pairs]
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        return cls(divisions=divisions, rivalry_pairs=tuple(pairs))

    @classmethod
    def default(cls) -> "LeagueConfig":
        return cls.from_assignment(DEFAULT_DIVISIONS, DEFAULT_RIVALRY_PAIRS)
