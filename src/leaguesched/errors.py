"""Exceptions raised by the league scheduling engine.

Capacity problems never raise; they become makeup matches. These cover bad
input and save-time conflicts only.
"""


class SchedulingError(Exception):
    """Base exception for scheduling errors"""


class LeagueNotFoundError(SchedulingError, KeyError):
    """No league with the requested id"""

    def __init__(self, league_id: str):
        super().__init__(league_id)
        self.league_id = league_id

    def __str__(self) -> str:
        return f"League not found: {self.league_id}"


class ConfigError(SchedulingError, ValueError):
    """Malformed configuration file"""


class ScheduleExistsError(SchedulingError):
    """League already has saved matches"""


class ScheduleConflictError(SchedulingError):
    """Slots were taken between preview and save"""

    def __init__(self, conflicts: list):
        self.conflicts = conflicts
        super().__init__(
            f"{len(conflicts)} scheduled matches collide with existing bookings"
        )
