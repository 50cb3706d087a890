from __future__ import annotations

import asyncio
import logging
import os
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Sequence, Tuple

from ligaschema.core.errors import ScheduleError, ScheduleInvariantError
from ligaschema.core.fixtures import Schedule
from ligaschema.core.league import LeagueConfig, check_assignment
from ligaschema.core.rivalries import random_rivalry_pairs, shuffle_division_order
from ligaschema.core.schedule import GenerationOptions, generate_schedule
from ligaschema.core.teams import Team
from ligaschema.core.validation import check_structure

logger = logging.getLogger(__name__)

MAX_GENERATION_RETRIES = 150

Delay = Callable[[], Awaitable[None]]


@dataclass
class AttemptPolicy:
    """Decides, per failed attempt, whether to keep going and how long to pause."""

    max_attempts: int = MAX_GENERATION_RETRIES
    pause: float = 0.0

    def next_step(self, attempt: int) -> Tuple[bool, Optional[float]]:
        """Called after attempt number ``attempt`` (0-based) failed."""
        if attempt + 1 >= self.max_attempts:
            return False, None
        return True, self.pause

    @classmethod
    def from_env(cls) -> "AttemptPolicy":
        policy = cls()
        raw_attempts = os.getenv("LIGASCHEMA_MAX_ATTEMPTS")
        raw_pause = os.getenv("LIGASCHEMA_RETRY_PAUSE")
        if raw_attempts:
            try:
                policy.max_attempts = max(1, int(raw_attempts))
            except ValueError:
                pass
        if raw_pause:
            try:
                policy.pause = max(0.0, float(raw_pause))
            except ValueError:
                pass
        return policy


@dataclass
class RetryOptions:
    """Knobs for :func:`generate_schedule_with_retry`."""

    policy: AttemptPolicy = field(default_factory=AttemptPolicy)
    delay: Optional[Delay] = None
    rng: Optional[random.Random] = None
    generation: Optional[GenerationOptions] = None
    division_names: Optional[Sequence[str]] = None


def config_for_attempt(
    assignment: Sequence[Sequence[Team]],
    attempt: int,
    rng: Optional[random.Random] = None,
    division_names: Optional[Sequence[str]] = None,
) -> LeagueConfig:
    """League config variant for a given attempt.

    Attempt 0 uses the assignment as given, odd attempts reshuffle the team
    order inside each division, even attempts draw a fresh rivalry matching.
    """
    if attempt == 0:
        return LeagueConfig.from_assignment(assignment, names=division_names)
    if attempt % 2 == 1:
        return LeagueConfig.from_assignment(
            shuffle_division_order(assignment, rng), names=division_names
        )
    return LeagueConfig.from_assignment(
        assignment, random_rivalry_pairs(assignment, rng), names=division_names
    )


async def generate_season_with_retry(
    assignment: Sequence[Sequence[object]],
    options: Optional[RetryOptions] = None,
) -> Tuple[Schedule, LeagueConfig]:
    """Generate a season, retrying with perturbed configs until one succeeds.

    Attempts run strictly one at a time; between attempts control is handed
    back to the event loop through ``options.delay``. An invalid assignment
    fails immediately. When the budget is spent the last error is raised.
    """
    options = options or RetryOptions()
    slots = check_assignment(assignment)
    rng = options.rng or random.Random()
    policy = options.policy

    last_error: Optional[Exception] = None
    attempt = 0
    while True:
        try:
            config = config_for_attempt(slots, attempt, rng, options.division_names)
            schedule = generate_schedule(config, options.generation)
            problems = check_structure(schedule)
            if not problems:
                if attempt:
                    logger.info("Schema klart efter %d försök", attempt + 1)
                return schedule, config
            last_error = ScheduleInvariantError("; ".join(problems))
        except ScheduleError as exc:
            last_error = exc
            logger.debug("Försök %d misslyckades: %s", attempt + 1, exc)

        go_on, pause = policy.next_step(attempt)
        if not go_on:
            break
        if options.delay is not None:
            await options.delay()
        else:
            await asyncio.sleep(pause or 0)
        attempt += 1

    logger.warning("Schemagenereringen gav upp efter %d försök", attempt + 1)
    if last_error is not None:
        raise last_error
    raise ScheduleError(
        "Schemagenereringen misslyckades efter flera försök. "
        "Generera igen eller slumpa om divisionerna."
    )


async def generate_schedule_with_retry(
    assignment: Sequence[Sequence[object]],
    options: Optional[RetryOptions] = None,
) -> Schedule:
    """Like :func:`generate_season_with_retry` but returns only the schedule."""
    schedule, _ = await generate_season_with_retry(assignment, options)
    return schedule
