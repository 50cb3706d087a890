from __future__ import annotations

import logging
from typing import List, Sequence

from .fixtures import HOME_GAMES_PER_TEAM, HomeTally, Match
from .teams import Team

logger = logging.getLogger(__name__)

MAX_BALANCE_ITERATIONS = 200


def _all_matches(weeks: Sequence[Sequence[Match]]) -> List[Match]:
    return [m for week in weeks for m in week]


def balance_home_away(
    weeks: Sequence[Sequence[Match]],
    teams: Sequence[Team],
    target: int = HOME_GAMES_PER_TEAM,
    max_iterations: int = MAX_BALANCE_ITERATIONS,
) -> HomeTally:
    """Vänd hemma/borta tills alla lag har `target` hemmamatcher.

    Varje varv räknas hela säsongen om och första match där hemmalaget har
    för många och bortalaget för få hemmamatcher vänds. Blir balansen inte
    jämn loggas en varning, men det är anroparens sak att kontrollera resultatet.
    """
    for _ in range(max_iterations):
        tally = HomeTally.from_matches(teams, _all_matches(weeks))
        flip = next(
            (
                m
                for m in _all_matches(weeks)
                if tally[m.home] > target and tally[m.away] < target
            ),
            None,
        )
        if flip is None:
            break
        flip.swap()

    tally = HomeTally.from_matches(teams, _all_matches(weeks))
    off = tally.imbalanced(target)
    if off:
        logger.warning(
            "Hemma/borta-balansen är inte jämn efter högst %d varv (%s)",
            max_iterations,
            ", ".join(f"{t}={c}" for t, c in sorted(off.items(), key=lambda kv: kv[0].value)),
        )
    return tally
