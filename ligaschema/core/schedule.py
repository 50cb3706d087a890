from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import List, Optional

from .balance import MAX_BALANCE_ITERATIONS, balance_home_away
from .errors import ScheduleInvariantError
from .fixtures import (
    HOME_GAMES_PER_TEAM,
    ROUND_ROBIN_WEEKS,
    TOTAL_MATCH_UPS,
    WEEK_COUNT,
    HomeTally,
    Match,
    Schedule,
    round_robin,
)
from .league import LeagueConfig
from .placement import (
    MAX_PLACEMENT_ATTEMPTS,
    MAX_PLACEMENT_RETRIES,
    PLACEMENT_TIERS,
    PlacementTier,
    Shuffle,
    extra_games,
    place_extra_games,
)
from .teams import ALL_TEAMS

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerationOptions:
    """Inställningar för en generering.

    `shuffle` ersätter slumpordningen i placeringen (används av tester),
    `rng` gör slumpen reproducerbar.
    """

    shuffle: Optional[Shuffle] = None
    rng: Optional[random.Random] = None
    placement_attempts: int = MAX_PLACEMENT_ATTEMPTS
    placement_rounds: int = MAX_PLACEMENT_RETRIES
    balance_iterations: int = MAX_BALANCE_ITERATIONS
    require_balance: bool = True

    @classmethod
    def from_env(cls) -> "GenerationOptions":
        opts = cls()
        seed = os.getenv("LIGASCHEMA_SEED")
        if seed:
            try:
                opts.rng = random.Random(int(seed))
            except ValueError:
                opts.rng = random.Random(seed)
        return opts

    def tiers(self) -> List[PlacementTier]:
        return [
            PlacementTier(t.name, attempts=self.placement_attempts, natural_first=t.natural_first)
            for t in PLACEMENT_TIERS
        ]


def _apply_flags(config: LeagueConfig, weeks: List[List[Match]]) -> None:
    for week in weeks:
        for m in week:
            m.is_divisional = config.is_divisional(m.home, m.away)
            m.is_rivalry = config.is_rivalry(m.home, m.away)


def generate_schedule(
    config: LeagueConfig, options: Optional[GenerationOptions] = None
) -> Schedule:
    """Generera en hel säsong: 14 veckor x 6 matcher.

    Vecka 1–11 är en enkel serie (alla möter alla), vecka 12–14 innehåller
    returmötena mot divisionslag och rival. Därefter jämnas hemma/borta ut
    till 7/7. Kastar PlacementError om veckorna 12–14 inte går att fylla och
    ScheduleInvariantError om slutkontrollen fallerar.
    """
    options = options or GenerationOptions()
    teams = ALL_TEAMS

    weeks, tally = round_robin(teams, HomeTally.empty(teams))
    _apply_flags(config, weeks)

    previous_pairs = {m.pair for m in weeks[ROUND_ROBIN_WEEKS - 1]}
    extra_weeks, tally = place_extra_games(
        extra_games(config),
        previous_pairs,
        tally,
        shuffle=options.shuffle,
        rng=options.rng,
        tiers=options.tiers(),
        rounds=options.placement_rounds,
    )
    weeks.extend(extra_weeks)

    tally = balance_home_away(
        weeks, teams, target=HOME_GAMES_PER_TEAM, max_iterations=options.balance_iterations
    )

    total = sum(len(week) for week in weeks)
    if total != TOTAL_MATCH_UPS:
        raise ScheduleInvariantError(
            f"Schemat fick {total} matcher i stället för {TOTAL_MATCH_UPS} "
            f"({WEEK_COUNT} veckor x 6). Ändra divisionerna och försök igen."
        )
    if options.require_balance:
        off = tally.imbalanced(HOME_GAMES_PER_TEAM)
        if off:
            detail = ", ".join(f"{t}={c}" for t, c in sorted(off.items(), key=lambda kv: kv[0].value))
            raise ScheduleInvariantError(
                f"Hemma/borta gick inte att jämna ut till {HOME_GAMES_PER_TEAM}/"
                f"{HOME_GAMES_PER_TEAM} ({detail})."
            )

    logger.debug("Schema klart: %d veckor, %d matcher", len(weeks), total)
    return Schedule.from_matches(weeks)
