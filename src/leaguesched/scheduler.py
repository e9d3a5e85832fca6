"""Main scheduling engine for league play.

Per division:
1. Matchups: round-robin pairings (singles/doubles) or weekly cutthroat
   groups of three.
2. Slots: weekly availability expanded into court slots, minus anything
   other leagues have already booked.
3. Placement: greedy first-free slot per matchup. A matchup that cannot be
   placed inside the season becomes a makeup match pinned to the end date.

Nothing is persisted here. The result is a preview; saving goes through
LeagueStore.save_schedule, which re-checks occupancy.
"""

import math
import random

from leaguesched.cutthroat import generate_cutthroat_groups, sit_outs
from leaguesched.models import (
    Booking, Division, GameType, League, SchedulePreview, ScheduledMatch, Slot,
)
from leaguesched.occupancy import OccupancyTracker
from leaguesched.roundrobin import round_robin_pairings
from leaguesched.slots import generate_time_slots, slots_in_week


def _makeup(player_ids: tuple[str, ...], league: League, week_number: int,
            division_id: str) -> ScheduledMatch:
    return ScheduledMatch(
        player_ids=player_ids,
        court_number=1,
        scheduled_time=league.end_date,
        week_number=week_number,
        division_id=division_id,
        is_makeup=True,
    )


def _place(player_ids: tuple[str, ...], slot: Slot, league: League,
           week_number: int, division_id: str,
           tracker: OccupancyTracker) -> ScheduledMatch:
    """Bind a matchup to a slot, or make it a makeup if past the season end."""
    match_time = slot.scheduled_time
    if match_time > league.end_date:
        return _makeup(player_ids, league, week_number, division_id)
    tracker.occupy(match_time, slot.court_number)
    return ScheduledMatch(
        player_ids=player_ids,
        court_number=slot.court_number,
        scheduled_time=match_time,
        week_number=week_number,
        division_id=division_id,
    )


class _SlotCursor:
    """Walks the filtered slot list in order, skipping slots taken this run."""

    def __init__(self, slots: list[Slot], tracker: OccupancyTracker):
        self._slots = slots
        self._tracker = tracker
        self._index = 0

    def next_free(self) -> Slot | None:
        while self._index < len(self._slots):
            slot = self._slots[self._index]
            self._index += 1
            if slot not in self._tracker:
                return slot
        return None


def schedule_cutthroat_division(division: Division, league: League,
                                cursor: _SlotCursor,
                                tracker: OccupancyTracker,
                                rng: random.Random) -> list[ScheduledMatch]:
    """Place weekly groups of three in slot order."""
    weekly_groups = generate_cutthroat_groups(
        division.player_ids, league.weeks_for_cutthroat, rng=rng,
    )
    idle = sit_outs(division.player_ids, weekly_groups)
    if idle:
        print(f"  {division.name}: {len(division.players) % 3} player(s) "
              f"sit out each week ({len(idle)} weeks)")

    matches = []
    for week, groups in enumerate(weekly_groups, 1):
        for group in groups:
            slot = cursor.next_free()
            if slot is None:
                matches.append(_makeup(group, league, week, division.id))
            else:
                matches.append(_place(group, slot, league, week,
                                      division.id, tracker))
    return matches


def schedule_round_robin_division(division: Division, league: League,
                                  slots: list[Slot],
                                  tracker: OccupancyTracker,
                                  rng: random.Random) -> list[ScheduledMatch]:
    """Spread a shuffled round robin over weeks, floor(n/2) matches a week."""
    pairings = round_robin_pairings(division.player_ids)
    rng.shuffle(pairings)

    per_week = len(division.players) // 2
    total_weeks = math.ceil(len(pairings) / per_week)

    matches = []
    for week in range(1, total_weeks + 1):
        week_pairings = pairings[(week - 1) * per_week:week * per_week]
        week_slots = slots_in_week(slots, league.start_date, week)
        rng.shuffle(week_slots)

        for pairing in week_pairings:
            slot = next((s for s in week_slots if s not in tracker), None)
            if slot is None:
                matches.append(_makeup(pairing, league, week, division.id))
            else:
                matches.append(_place(pairing, slot, league, week,
                                      division.id, tracker))
    return matches


def assemble_schedule(league: League, slots: list[Slot],
                      bookings: list[Booking] | None = None,
                      rng: random.Random | None = None) -> SchedulePreview:
    """Build a schedule preview for every division of a league.

    `bookings` are other leagues' matches; the league's own matches must
    not be included or a regenerated preview would block itself.
    Never raises for lack of capacity: unplaceable matchups become makeup
    matches.
    """
    rng = rng or random.Random()
    # First-day slots earlier than the start time are outside the season
    slots = [s for s in slots if s.scheduled_time >= league.start_date]
    tracker = OccupancyTracker(bookings)
    free_slots = tracker.filter_free(slots)
    if len(free_slots) < len(slots):
        print(f"  {len(slots) - len(free_slots)} of {len(slots)} slots "
              f"already booked by other leagues")

    preview = SchedulePreview(league_id=league.id)
    cursor = _SlotCursor(free_slots, tracker)

    for division in league.divisions:
        if len(division.players) < 2:
            print(f"  {division.name}: fewer than 2 players, skipped")
            continue

        if league.game_type is GameType.CUTTHROAT:
            matches = schedule_cutthroat_division(
                division, league, cursor, tracker, rng)
        else:
            matches = schedule_round_robin_division(
                division, league, free_slots, tracker, rng)

        scheduled = [m for m in matches if not m.is_makeup]
        makeup = [m for m in matches if m.is_makeup]
        preview.scheduled_matches.extend(scheduled)
        preview.makeup_matches.extend(makeup)
        print(f"  {division.name}: {len(scheduled)} scheduled, "
              f"{len(makeup)} makeup")

    preview.total_weeks = max(
        (m.week_number for m in preview.scheduled_matches), default=0)
    preview.projected_games = (len(preview.scheduled_matches)
                               + len(preview.makeup_matches))
    return preview


def generate_league_schedule(store, league_id: str, seed: int | None = None,
                             rng: random.Random | None = None) -> SchedulePreview:
    """Read everything the engine needs from the store and build a preview.

    Raises LeagueNotFoundError before any computation if the league is
    unknown.
    """
    league = store.get_league(league_id)
    if rng is None:
        rng = random.Random(seed)

    slots = generate_time_slots(league.start_date, league.end_date,
                                store.active_availability(),
                                league.match_duration)
    bookings = store.conflicting_bookings(league)
    print(f"  {league.name}: {len(slots)} candidate slots, "
          f"{len(bookings)} bookings from other leagues")

    preview = assemble_schedule(league, slots, bookings, rng=rng)

    print(f"  Total: {len(preview.scheduled_matches)} scheduled, "
          f"{len(preview.makeup_matches)} makeup over "
          f"{preview.total_weeks} weeks")
    return preview
