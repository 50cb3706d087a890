from __future__ import annotations

import asyncio
import random
from typing import List

import pytest

from ligaschema.api import (
    AttemptPolicy,
    RetryOptions,
    config_for_attempt,
    generate_schedule_with_retry,
    generate_season_with_retry,
)
from ligaschema.core import (
    DEFAULT_DIVISIONS,
    ConfigError,
    LeagueConfig,
    PlacementError,
    Schedule,
    ScheduleInvariantError,
    check_structure,
    schedule_violations,
)
from ligaschema.core import schedule as schedule_module


def _no_wait(calls: List[int]):
    async def _delay() -> None:
        calls.append(1)

    return _delay


def _run(assignment, options):
    return asyncio.run(generate_schedule_with_retry(assignment, options))


def test_default_divisions_always_succeed() -> None:
    config = LeagueConfig.default()
    delays: List[int] = []
    for trial in range(50):
        options = RetryOptions(delay=_no_wait(delays), rng=random.Random(trial))
        schedule = _run(DEFAULT_DIVISIONS, options)
        assert check_structure(schedule) == []
        assert not any(schedule_violations(schedule, config).values())
    assert delays == []


def test_retries_with_new_config_until_success(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[LeagueConfig] = []

    def _flaky(config, options=None):
        seen.append(config)
        if len(seen) < 3:
            raise PlacementError("Hittade ingen giltig placering för veckorna 12–14")
        return schedule_module.generate_schedule(LeagueConfig.default(), options)

    monkeypatch.setattr("ligaschema.api.services.generate_schedule", _flaky)
    delays: List[int] = []
    options = RetryOptions(
        policy=AttemptPolicy(max_attempts=5), delay=_no_wait(delays), rng=random.Random(3)
    )

    schedule = _run(DEFAULT_DIVISIONS, options)

    assert schedule.total_match_ups == 84
    assert len(seen) == 3
    assert len(delays) == 2
    assert seen[0] == LeagueConfig.default()
    # Samma lag i varje division oavsett variant
    for config in seen:
        assert [set(d.teams) for d in config.divisions] == [set(d) for d in DEFAULT_DIVISIONS]


def test_gives_up_with_last_error(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[int] = []

    def _always_fails(config, options=None):
        calls.append(1)
        raise PlacementError(f"försök {len(calls)}")

    monkeypatch.setattr("ligaschema.api.services.generate_schedule", _always_fails)
    delays: List[int] = []
    options = RetryOptions(policy=AttemptPolicy(max_attempts=4), delay=_no_wait(delays))

    with pytest.raises(PlacementError, match="försök 4"):
        _run(DEFAULT_DIVISIONS, options)
    assert len(calls) == 4
    assert len(delays) == 3


def test_short_schedule_counts_as_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "ligaschema.api.services.generate_schedule", lambda config, options=None: Schedule(())
    )
    options = RetryOptions(policy=AttemptPolicy(max_attempts=2), delay=_no_wait([]))
    with pytest.raises(ScheduleInvariantError, match="0 veckor"):
        _run(DEFAULT_DIVISIONS, options)


def test_invalid_assignment_is_not_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[int] = []
    monkeypatch.setattr(
        "ligaschema.api.services.generate_schedule",
        lambda config, options=None: calls.append(1),
    )
    with pytest.raises(ConfigError):
        _run(["AB", "CDE", "FGH", "IJK"], RetryOptions(delay=_no_wait([])))
    assert calls == []


def test_default_delay_uses_policy_pause(monkeypatch: pytest.MonkeyPatch) -> None:
    pauses: List[float] = []

    async def _fake_sleep(seconds):
        pauses.append(seconds)

    def _always_fails(config, options=None):
        raise PlacementError("nej")

    monkeypatch.setattr("ligaschema.api.services.generate_schedule", _always_fails)
    monkeypatch.setattr(asyncio, "sleep", _fake_sleep)
    options = RetryOptions(policy=AttemptPolicy(max_attempts=3, pause=0.25))

    with pytest.raises(PlacementError):
        _run(DEFAULT_DIVISIONS, options)
    assert pauses == [0.25, 0.25]


def test_config_variants_per_attempt() -> None:
    rng = random.Random(5)
    names = ["Norr", "Öst", "Syd", "Väst"]
    first = config_for_attempt(DEFAULT_DIVISIONS, 0, rng, names)
    assert first == LeagueConfig.from_assignment(DEFAULT_DIVISIONS, names=names)

    for attempt in range(1, 8):
        config = config_for_attempt(DEFAULT_DIVISIONS, attempt, rng, names)
        assert [d.name for d in config.divisions] == names
        assert [set(d.teams) for d in config.divisions] == [set(d) for d in DEFAULT_DIVISIONS]
        for a, b in config.rivalry_pairs:
            assert config.division_of(a) != config.division_of(b)


def test_attempt_policy_next_step() -> None:
    policy = AttemptPolicy(max_attempts=3, pause=0.5)
    assert policy.next_step(0) == (True, 0.5)
    assert policy.next_step(1) == (True, 0.5)
    assert policy.next_step(2) == (False, None)


def test_attempt_policy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LIGASCHEMA_MAX_ATTEMPTS", "0")
    monkeypatch.setenv("LIGASCHEMA_RETRY_PAUSE", "0.1")
    policy = AttemptPolicy.from_env()
    assert policy.max_attempts == 1
    assert policy.pause == 0.1

    monkeypatch.setenv("LIGASCHEMA_MAX_ATTEMPTS", "många")
    monkeypatch.setenv("LIGASCHEMA_RETRY_PAUSE", "-2")
    policy = AttemptPolicy.from_env()
    assert policy.max_attempts == 150
    assert policy.pause == 0.0


def test_season_retry_returns_config_that_succeeded(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[LeagueConfig] = []

    def _second_try(config, options=None):
        seen.append(config)
        if len(seen) < 2:
            raise PlacementError("nej")
        return schedule_module.generate_schedule(LeagueConfig.default(), options)

    monkeypatch.setattr("ligaschema.api.services.generate_schedule", _second_try)
    options = RetryOptions(delay=_no_wait([]), rng=random.Random(8))

    schedule, config = asyncio.run(generate_season_with_retry(DEFAULT_DIVISIONS, options))

    assert schedule.total_match_ups == 84
    assert config is seen[-1]
