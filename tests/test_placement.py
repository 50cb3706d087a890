from __future__ import annotations

import pytest

from ligaschema.core import (
    ALL_TEAMS,
    HomeTally,
    LeagueConfig,
    PlacementError,
    PlacementTier,
    Team,
    extra_games,
    pair_key,
    place_extra_games,
    round_robin,
)
from ligaschema.core.placement import ExtraGame

T = Team


def _after_round_robin():
    weeks, tally = round_robin(ALL_TEAMS)
    previous = {m.pair for m in weeks[-1]}
    return previous, tally


def _pairs(week):
    return {m.pair for m in week}


def test_extra_games_lists_divisional_then_rivalry_pairs() -> None:
    games = extra_games(LeagueConfig.default())
    assert len(games) == 18
    assert sum(g.is_divisional for g in games) == 12
    assert sum(g.is_rivalry for g in games) == 6
    assert (games[0].a, games[0].b, games[0].is_divisional) == (T.A, T.B, True)
    assert (games[2].a, games[2].b) == (T.B, T.C)
    assert (games[-1].a, games[-1].b, games[-1].is_rivalry) == (T.I, T.L, True)


def test_natural_order_fills_weeks_12_to_14() -> None:
    previous, tally = _after_round_robin()
    weeks, _ = place_extra_games(extra_games(LeagueConfig.default()), previous, tally)

    assert [w[0].week for w in weeks] == [12, 13, 14]
    assert _pairs(weeks[0]) == {
        pair_key(T.A, T.B), pair_key(T.D, T.E), pair_key(T.G, T.H),
        pair_key(T.J, T.K), pair_key(T.C, T.F), pair_key(T.I, T.L),
    }
    assert _pairs(weeks[1]) == {
        pair_key(T.A, T.C), pair_key(T.D, T.F), pair_key(T.G, T.I),
        pair_key(T.J, T.L), pair_key(T.B, T.E), pair_key(T.H, T.K),
    }
    assert _pairs(weeks[2]) == {
        pair_key(T.B, T.C), pair_key(T.E, T.F), pair_key(T.H, T.I),
        pair_key(T.K, T.L), pair_key(T.A, T.D), pair_key(T.G, T.J),
    }
    for week in weeks:
        teams = [t for m in week for t in (m.home, m.away)]
        assert len(teams) == len(set(teams)) == 12
    assert not _pairs(weeks[0]) & previous


def test_reversed_order_cannot_be_placed() -> None:
    previous, tally = _after_round_robin()
    # Alla rivaler hamnar i vecka 12, sedan räcker inte divisionsmötena till
    with pytest.raises(PlacementError, match="12–14"):
        place_extra_games(
            extra_games(LeagueConfig.default()),
            previous,
            tally,
            shuffle=lambda games: list(reversed(games)),
        )


def test_custom_shuffle_is_used_for_every_attempt() -> None:
    previous, tally = _after_round_robin()
    calls = []

    def _reverse(games):
        calls.append(len(games))
        return list(reversed(games))

    with pytest.raises(PlacementError):
        place_extra_games(
            extra_games(LeagueConfig.default()),
            previous,
            tally,
            shuffle=_reverse,
            tiers=(PlacementTier("x", attempts=2, natural_first=True),),
            rounds=1,
        )
    assert calls == [18, 18]


def test_home_goes_to_team_with_fewer_home_games() -> None:
    tally = HomeTally.empty(ALL_TEAMS)
    tally.counts[T.A] = 10
    weeks, out = place_extra_games(
        [ExtraGame(T.A, T.B, is_divisional=True)],
        set(),
        tally,
        week_count=1,
        per_week=1,
    )
    match = weeks[0][0]
    assert (match.home, match.away, match.week) == (T.B, T.A, 12)
    assert match.is_divisional and not match.is_rivalry
    assert out[T.B] == 1
    assert tally[T.B] == 0


def test_pair_from_previous_week_is_skipped() -> None:
    games = [ExtraGame(T.A, T.B), ExtraGame(T.A, T.C)]
    weeks, _ = place_extra_games(
        games,
        {pair_key(T.A, T.B)},
        HomeTally.empty(ALL_TEAMS),
        week_count=1,
        per_week=1,
    )
    assert weeks[0][0].pair == pair_key(T.A, T.C)
