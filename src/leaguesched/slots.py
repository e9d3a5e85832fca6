"""Expand weekly court availability into concrete booking slots."""

from datetime import date, datetime, time, timedelta

from leaguesched.models import AvailabilityWindow, DayOfWeek, Slot

COURTS = (1, 2)


def _to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def _normalize(minutes: int) -> int:
    """Round a minute-of-day to the nearest 5-minute boundary."""
    return 5 * round(minutes / 5)


def _from_minutes(minutes: int) -> time:
    # A slot ending at midnight gets an end time of 00:00
    minutes %= 24 * 60
    return time(minutes // 60, minutes % 60)


def generate_time_slots(start: date, end: date,
                        windows: list[AvailabilityWindow],
                        match_duration: int = 60) -> list[Slot]:
    """Generate every (date, court, start, end) slot in [start, end].

    Each window is cut into back-to-back slots of match_duration minutes;
    a tail shorter than the duration is dropped. One slot per court is
    emitted for every start time. Output is ordered by date, then window
    order, then start time. Overlapping windows are not merged here.
    """
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    if match_duration <= 0:
        return []

    active = [w for w in windows if w.is_active]
    slots = []
    current = start
    while current <= end:
        dow = DayOfWeek.of(current)
        for window in active:
            if window.day != dow:
                continue
            courts = COURTS if window.court_number is None else (window.court_number,)
            start_min = _normalize(_to_minutes(window.start_time))
            end_min = _normalize(_to_minutes(window.end_time))

            minutes = start_min
            while minutes + match_duration <= end_min:
                slot_start = _from_minutes(minutes)
                slot_end = _from_minutes(minutes + match_duration)
                for court in courts:
                    slots.append(Slot(
                        date=current,
                        court_number=court,
                        start_time=slot_start,
                        end_time=slot_end,
                    ))
                minutes += match_duration
        current += timedelta(days=1)

    return slots


def slots_in_week(slots: list[Slot], season_start: date,
                  week_number: int) -> list[Slot]:
    """Slots dated within week N (1-based) counted from season_start."""
    if isinstance(season_start, datetime):
        season_start = season_start.date()
    week_start = season_start + timedelta(days=7 * (week_number - 1))
    week_end = week_start + timedelta(days=7)
    return [s for s in slots if week_start <= s.date < week_end]
