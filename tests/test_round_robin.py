from itertools import combinations

import pytest

from ligaschema.core import ALL_TEAMS, HomeTally, Team, pair_key, round_robin

T = Team


def _pairs(week):
    return {m.pair for m in week}


def test_round_robin_covers_every_pair_once():
    weeks, tally = round_robin(ALL_TEAMS)
    assert len(weeks) == 11
    seen = [m.pair for week in weeks for m in week]
    assert len(seen) == 66
    assert set(seen) == {pair_key(a, b) for a, b in combinations(ALL_TEAMS, 2)}
    for week in weeks:
        teams = [t for m in week for t in (m.home, m.away)]
        assert sorted(t.value for t in teams) == sorted(t.value for t in ALL_TEAMS)
    assert sum(tally.counts.values()) == 66


def test_round_robin_circle_positions():
    weeks, _ = round_robin(ALL_TEAMS)
    assert _pairs(weeks[0]) == {
        pair_key(T.A, T.B),
        pair_key(T.L, T.C),
        pair_key(T.K, T.D),
        pair_key(T.J, T.E),
        pair_key(T.I, T.F),
        pair_key(T.H, T.G),
    }
    assert _pairs(weeks[10]) == {
        pair_key(T.A, T.L),
        pair_key(T.K, T.B),
        pair_key(T.J, T.C),
        pair_key(T.I, T.D),
        pair_key(T.H, T.E),
        pair_key(T.G, T.F),
    }
    assert all(m.week == i for i, week in enumerate(weeks, start=1) for m in week)


def test_first_week_ties_favour_first_team():
    weeks, _ = round_robin(ALL_TEAMS)
    homes = [m.home for m in weeks[0]]
    assert homes == [T.A, T.L, T.K, T.J, T.I, T.H]


def test_starting_tally_is_respected_and_not_mutated():
    start = HomeTally.empty(ALL_TEAMS)
    start.counts[T.A] = 5
    weeks, tally = round_robin(ALL_TEAMS, start)
    first = weeks[0][0]
    assert (first.home, first.away) == (T.B, T.A)
    assert start.counts[T.A] == 5
    assert sum(start.counts.values()) == 5
    assert sum(tally.counts.values()) == 66 + 5


def test_home_tally_assign_picks_lower_count():
    tally = HomeTally.empty([T.A, T.B])
    assert tally.assign(T.A, T.B) == (T.A, T.B)
    assert tally.assign(T.A, T.B) == (T.B, T.A)
    assert tally.assign(T.B, T.A) == (T.B, T.A)
    assert tally[T.A] == 1 and tally[T.B] == 2
    assert tally.imbalanced(target=1) == {T.B: 2}


def test_odd_team_count_is_rejected():
    with pytest.raises(ValueError):
        round_robin(ALL_TEAMS[:11])
