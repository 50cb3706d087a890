from __future__ import annotations


class ConfigError(ValueError):
    """Ogiltig ligakonfiguration (divisioner eller rivalpar)."""


class ScheduleError(RuntimeError):
    """Schemagenereringen misslyckades; anroparen kan försöka igen."""


class PlacementError(ScheduleError):
    """Extramatcherna gick inte att placera i veckorna 12–14."""


class ScheduleInvariantError(ScheduleError):
    """Ett genererat schema bryter mot en säsongsregel."""
