from __future__ import annotations

from enum import Enum
from typing import Tuple


class Team(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"

    def __str__(self) -> str:
        return self.value


# Kanonisk ordning (A–L), oberoende av divisionsindelningen
ALL_TEAMS: Tuple[Team, ...] = tuple(Team)

TEAM_COUNT = 12
DIVISION_COUNT = 4
TEAMS_PER_DIVISION = 3


def team_from_value(value: object) -> Team:
    """Tolka 'a', 'A' eller Team.A som ett lag."""
    if isinstance(value, Team):
        return value
    try:
        return Team(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Okänt lag '{value}'.") from None
