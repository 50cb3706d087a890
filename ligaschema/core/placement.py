from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .errors import PlacementError
from .fixtures import (
    MATCH_UPS_PER_WEEK,
    ROUND_ROBIN_WEEKS,
    WEEK_COUNT,
    HomeTally,
    Match,
    Pair,
    pair_key,
)
from .league import LeagueConfig
from .teams import Team

logger = logging.getLogger(__name__)

# Försök per nivå och per varv
MAX_PLACEMENT_ATTEMPTS = 150
# Antal varv genom alla nivåer innan vi ger upp
MAX_PLACEMENT_RETRIES = 3

Shuffle = Callable[[List["ExtraGame"]], List["ExtraGame"]]


@dataclass(frozen=True, slots=True)
class ExtraGame:
    """Ett returmöte (division eller rival) som ska in i veckorna 12–14."""

    a: Team
    b: Team
    is_divisional: bool = False
    is_rivalry: bool = False

    @property
    def pair(self) -> Pair:
        return pair_key(self.a, self.b)


@dataclass(frozen=True, slots=True)
class PlacementTier:
    name: str
    attempts: int = MAX_PLACEMENT_ATTEMPTS
    natural_first: bool = False


PLACEMENT_TIERS: Tuple[PlacementTier, ...] = (
    PlacementTier("primär", natural_first=True),
    PlacementTier("reserv"),
    PlacementTier("sista utväg"),
)


def extra_games(config: LeagueConfig) -> List[ExtraGame]:
    """12 divisionsreturer (3 per division) följt av de 6 rivalparen."""
    games: List[ExtraGame] = []
    for div in config.divisions:
        teams = div.teams
        for i in range(len(teams)):
            for j in range(i + 1, len(teams)):
                games.append(ExtraGame(teams[i], teams[j], is_divisional=True))
    for a, b in config.rivalry_pairs:
        games.append(ExtraGame(a, b, is_rivalry=True))
    return games


def _shuffled(games: List[ExtraGame], rng: Optional[random.Random] = None) -> List[ExtraGame]:
    rng = rng or random
    return rng.sample(games, len(games))


def _try_ordering(
    ordering: Sequence[ExtraGame],
    previous_pairs: Set[Pair],
    tally: HomeTally,
    first_week: int,
    week_count: int,
    per_week: int,
) -> Optional[Tuple[List[List[Match]], HomeTally]]:
    """Ett placeringsförsök; None om någon vecka inte blir full."""
    hc = tally.copy()
    placed: Set[int] = set()
    weeks: List[List[Match]] = []
    prev = previous_pairs
    for w in range(week_count):
        week: List[Match] = []
        used: Set[Team] = set()
        for idx, game in enumerate(ordering):
            if idx in placed:
                continue
            if game.a in used or game.b in used:
                continue
            if game.pair in prev:
                continue
            home, away = hc.assign(game.a, game.b)
            week.append(
                Match(
                    home=home,
                    away=away,
                    week=first_week + w,
                    is_divisional=game.is_divisional,
                    is_rivalry=game.is_rivalry,
                )
            )
            placed.add(idx)
            used.update((game.a, game.b))
            if len(week) >= per_week:
                break
        if len(week) < per_week:
            return None
        weeks.append(week)
        prev = {m.pair for m in week}
    return weeks, hc


def place_extra_games(
    games: Sequence[ExtraGame],
    previous_pairs: Set[Pair],
    tally: HomeTally,
    *,
    first_week: int = ROUND_ROBIN_WEEKS + 1,
    week_count: int = WEEK_COUNT - ROUND_ROBIN_WEEKS,
    per_week: int = MATCH_UPS_PER_WEEK,
    shuffle: Optional[Shuffle] = None,
    rng: Optional[random.Random] = None,
    tiers: Sequence[PlacementTier] = PLACEMENT_TIERS,
    rounds: int = MAX_PLACEMENT_RETRIES,
) -> Tuple[List[List[Match]], HomeTally]:
    """Placera extramatcherna i `week_count` fulla veckor efter round-robin.

    Varje försök går igenom en ordning av matcherna och fyller varje vecka
    med första match vars lag är lediga och vars par inte spelade veckan
    innan. Misslyckas ett försök kastas hela försöket. Naturlig ordning
    provas bara som första försök i första nivån, och bara när ingen egen
    `shuffle` har skickats in.
    """
    games = list(games)
    last_week = first_week + week_count - 1
    for round_no in range(1, rounds + 1):
        for tier in tiers:
            for attempt in range(tier.attempts):
                if attempt == 0 and tier.natural_first and shuffle is None:
                    ordering = games
                elif shuffle is not None:
                    ordering = shuffle(games)
                else:
                    ordering = _shuffled(games, rng)
                result = _try_ordering(
                    ordering, previous_pairs, tally, first_week, week_count, per_week
                )
                if result is not None:
                    logger.info(
                        "Veckorna %d–%d placerade (nivå %s, försök %d, varv %d)",
                        first_week,
                        last_week,
                        tier.name,
                        attempt + 1,
                        round_no,
                    )
                    return result
            logger.debug("Nivå '%s' gav upp efter %d försök", tier.name, tier.attempts)
    raise PlacementError(
        f"Hittade ingen giltig placering för veckorna {first_week}–{last_week}; "
        "försök igen med en annan lagordning."
    )
