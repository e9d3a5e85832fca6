"""In-memory persistence boundary for leagues, availability and matches.

The scheduler only reads from here. Saving a preview re-validates court
occupancy against what is stored at commit time, since other leagues may
have booked slots after the preview was generated.
"""

from dataclasses import dataclass, field

from leaguesched.errors import (
    LeagueNotFoundError, ScheduleConflictError, ScheduleExistsError,
)
from leaguesched.models import (
    AvailabilityWindow, Booking, League, MatchStatus, SchedulePreview,
    ScheduledMatch,
)
from leaguesched.occupancy import OccupancyTracker


@dataclass
class LeagueStore:
    leagues: dict[str, League] = field(default_factory=dict)
    availability: list[AvailabilityWindow] = field(default_factory=list)
    matches: list[Booking] = field(default_factory=list)

    def get_league(self, league_id: str) -> League:
        try:
            return self.leagues[league_id]
        except KeyError:
            raise LeagueNotFoundError(league_id) from None

    def active_availability(self) -> list[AvailabilityWindow]:
        return [w for w in self.availability if w.is_active]

    def league_matches(self, league_id: str) -> list[Booking]:
        return [m for m in self.matches if m.league_id == league_id]

    def saved_schedule(self, league_id: str) -> SchedulePreview | None:
        """The league's stored matches as a preview, or None if never saved.

        Cancelled matches are left out.
        """
        self.get_league(league_id)
        stored = self.league_matches(league_id)
        if not stored:
            return None

        preview = SchedulePreview(league_id=league_id)
        for b in sorted(stored, key=lambda b: (b.scheduled_time, b.court_number or 0)):
            if b.status is MatchStatus.CANCELLED:
                continue
            match = ScheduledMatch(
                player_ids=tuple(b.player_ids),
                court_number=b.court_number or 1,
                scheduled_time=b.scheduled_time,
                week_number=b.week_number,
                division_id=b.division_id,
                is_makeup=b.is_makeup,
            )
            if b.is_makeup:
                preview.makeup_matches.append(match)
            else:
                preview.scheduled_matches.append(match)
        preview.total_weeks = max(
            (m.week_number for m in preview.scheduled_matches), default=0)
        preview.projected_games = len(preview.all_matches)
        return preview

    def conflicting_bookings(self, league: League) -> list[Booking]:
        """Other leagues' live matches inside this league's date range."""
        return [
            m for m in self.matches
            if m.league_id != league.id
            and m.status is not MatchStatus.CANCELLED
            and league.in_range(m.scheduled_time)
        ]

    def find_conflicts(self, league_id: str,
                       preview: SchedulePreview) -> list[ScheduledMatch]:
        """Scheduled matches whose (time, court) is no longer free."""
        tracker = OccupancyTracker([
            m for m in self.matches if m.league_id != league_id
        ])
        conflicts = []
        for match in preview.scheduled_matches:
            if tracker.is_occupied(match.scheduled_time, match.court_number):
                conflicts.append(match)
            else:
                tracker.occupy(match.scheduled_time, match.court_number)
        return conflicts

    def save_schedule(self, league_id: str, preview: SchedulePreview) -> int:
        """Persist a preview as the league's matches.

        Returns the number of matches saved. Raises ScheduleExistsError if
        the league already has matches and ScheduleConflictError if any
        scheduled match collides with current bookings; nothing is written
        in either case.
        """
        league = self.get_league(league_id)
        if self.league_matches(league_id):
            raise ScheduleExistsError(
                f"Schedule already generated for league {league_id}")

        conflicts = self.find_conflicts(league_id, preview)
        if conflicts:
            raise ScheduleConflictError(conflicts)

        for m in preview.all_matches:
            self.matches.append(Booking(
                league_id=league_id,
                scheduled_time=m.scheduled_time,
                court_number=None if m.is_makeup else m.court_number,
                status=MatchStatus.SCHEDULED,
                player_ids=tuple(m.player_ids),
                week_number=m.week_number,
                division_id=m.division_id,
                is_makeup=m.is_makeup,
            ))
        league.schedule_generated = True
        print(f"  Saved {len(preview.scheduled_matches)} scheduled and "
              f"{len(preview.makeup_matches)} makeup matches for {league.name}")
        return len(preview.all_matches)

    def clear_schedule(self, league_id: str) -> int:
        """Delete all of a league's matches. Returns how many were removed."""
        league = self.get_league(league_id)
        before = len(self.matches)
        self.matches = [m for m in self.matches if m.league_id != league_id]
        league.schedule_generated = False
        return before - len(self.matches)
