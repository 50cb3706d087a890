from __future__ import annotations

import random
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .errors import ConfigError
from .teams import ALL_TEAMS, DIVISION_COUNT, TEAMS_PER_DIVISION, Team

RivalryPair = Tuple[Team, Team]


def _cross_division_matching(
    divisions: Sequence[Sequence[Team]],
    team_order: Iterable[Team],
    candidates: Callable[[Team], Iterable[Team]],
) -> List[RivalryPair]:
    """Perfekt matchning där varje par spänner över två divisioner.

    Första lediga laget i `team_order` paras med första lediga kandidat;
    leder valet till en återvändsgränd backar vi.
    """
    division_of: Dict[Team, int] = {t: i for i, div in enumerate(divisions) for t in div}
    order = [t for t in team_order if t in division_of]
    used: Set[Team] = set()
    pairs: List[RivalryPair] = []

    def _extend() -> bool:
        team = next((t for t in order if t not in used), None)
        if team is None:
            return True
        used.add(team)
        for other in candidates(team):
            if other in used or division_of.get(other, division_of[team]) == division_of[team]:
                continue
            used.add(other)
            pairs.append((team, other))
            if _extend():
                return True
            pairs.pop()
            used.discard(other)
        used.discard(team)
        return False

    if not _extend():
        raise ConfigError("Det gick inte att para ihop alla lag med en rival från en annan division.")
    return pairs


def compute_rivalry_pairs(divisions: Sequence[Sequence[Team]]) -> List[RivalryPair]:
    """Deterministiska rivalpar: lag i ordningen A–L, rival från tidigaste andra division."""

    def _candidates(team: Team) -> List[Team]:
        out: List[Team] = []
        for div in divisions:
            if team in div:
                continue
            out.extend(div)
        return out

    return _cross_division_matching(divisions, ALL_TEAMS, _candidates)


def random_rivalry_pairs(
    divisions: Sequence[Sequence[Team]], rng: Optional[random.Random] = None
) -> List[RivalryPair]:
    rng = rng or random.Random()
    teams = [t for div in divisions for t in div]
    order = rng.sample(teams, len(teams))

    def _candidates(team: Team) -> List[Team]:
        others = [t for t in teams if t != team]
        return rng.sample(others, len(others))

    return _cross_division_matching(divisions, order, _candidates)


def shuffle_division_order(
    assignment: Sequence[Sequence[Team]], rng: Optional[random.Random] = None
) -> List[Tuple[Team, ...]]:
    # Samma lag i samma divisioner, bara ny ordning inom varje division
    rng = rng or random.Random()
    return [tuple(rng.sample(list(div), len(div))) for div in assignment]


def shuffle_teams(rng: Optional[random.Random] = None) -> List[Tuple[Team, ...]]:
    """Slumpa alla 12 lag till 4 divisioner om 3."""
    rng = rng or random.Random()
    shuffled = rng.sample(list(ALL_TEAMS), len(ALL_TEAMS))
    return [
        tuple(shuffled[i * TEAMS_PER_DIVISION : (i + 1) * TEAMS_PER_DIVISION])
        for i in range(DIVISION_COUNT)
    ]
