"""Data models for the league scheduling engine."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class DayOfWeek(Enum):
    Sun = 0
    Mon = 1
    Tue = 2
    Wed = 3
    Thu = 4
    Fri = 5
    Sat = 6

    @classmethod
    def from_str(cls, s: str) -> "DayOfWeek":
        return cls[s.strip()[:3].capitalize()]

    @classmethod
    def of(cls, d: date) -> "DayOfWeek":
        # date.weekday() counts from Monday
        return cls((d.weekday() + 1) % 7)


class GameType(Enum):
    SINGLES = "SINGLES"
    DOUBLES = "DOUBLES"
    CUTTHROAT = "CUTTHROAT"

    @classmethod
    def from_str(cls, s: str) -> "GameType":
        return cls(s.strip().upper())

    @property
    def group_size(self) -> int:
        return 3 if self is GameType.CUTTHROAT else 2


class MatchStatus(Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def from_str(cls, s: str) -> "MatchStatus":
        return cls(s.strip().upper())


@dataclass
class Player:
    id: str
    name: str
    division_id: str = ""


@dataclass
class Division:
    """A skill-level group, scheduled independently of other divisions."""
    id: str
    name: str
    players: list[Player] = field(default_factory=list)

    @property
    def player_ids(self) -> list[str]:
        return [p.id for p in self.players]


@dataclass
class League:
    """A season of play with one game type shared by all divisions."""
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    game_type: GameType = GameType.SINGLES
    weeks_for_cutthroat: int = 8
    match_duration: int = 60  # minutes
    divisions: list[Division] = field(default_factory=list)
    schedule_generated: bool = False

    def division(self, division_id: str) -> Optional[Division]:
        for d in self.divisions:
            if d.id == division_id:
                return d
        return None

    def in_range(self, ts: datetime) -> bool:
        return self.start_date <= ts <= self.end_date


@dataclass
class AvailabilityWindow:
    """A recurring weekly period during which the courts are bookable."""
    day: DayOfWeek
    start_time: time
    end_time: time
    is_active: bool = True
    court_number: Optional[int] = None  # None = both courts


@dataclass
class Slot:
    """One concrete court booking candidate."""
    date: date
    court_number: int
    start_time: time
    end_time: time

    @property
    def scheduled_time(self) -> datetime:
        return datetime.combine(self.date, self.start_time)


@dataclass
class Matchup:
    """Players meeting in one match, before a slot is chosen."""
    player_ids: tuple[str, ...]
    week_number: int
    division_id: str

    def involves(self, player_id: str) -> bool:
        return player_id in self.player_ids


@dataclass
class Round:
    """A round-robin round: every player appears at most once."""
    number: int
    matchups: list[tuple[str, str]]
    bye_players: list[str] = field(default_factory=list)


@dataclass
class ScheduledMatch:
    """A matchup bound to a court and time, or a makeup placeholder."""
    player_ids: tuple[str, ...]
    court_number: int
    scheduled_time: datetime
    week_number: int
    division_id: str
    is_makeup: bool = False

    @property
    def status(self) -> str:
        return "makeup" if self.is_makeup else "scheduled"


@dataclass
class Booking:
    """A persisted match as seen by the scheduler."""
    league_id: str
    scheduled_time: datetime
    court_number: Optional[int]
    status: MatchStatus = MatchStatus.SCHEDULED
    player_ids: tuple[str, ...] = ()
    week_number: int = 0
    division_id: str = ""
    is_makeup: bool = False

    @property
    def blocks_court(self) -> bool:
        return (self.status is not MatchStatus.CANCELLED
                and self.court_number is not None
                and not self.is_makeup)


@dataclass
class SchedulePreview:
    """Result of one generation run. Nothing here is persisted."""
    league_id: str
    scheduled_matches: list[ScheduledMatch] = field(default_factory=list)
    makeup_matches: list[ScheduledMatch] = field(default_factory=list)
    total_weeks: int = 0
    projected_games: int = 0

    @property
    def all_matches(self) -> list[ScheduledMatch]:
        return self.scheduled_matches + self.makeup_matches
