"""Court occupancy tracking across leagues and within one scheduling run."""

from datetime import datetime

from leaguesched.models import Booking, Slot


class OccupancyTracker:
    """Set of (timestamp, court) pairs that are already claimed.

    Seeded from other leagues' bookings, then grows as the current run
    places matches. This is advisory only: the save step re-checks.
    """

    def __init__(self, bookings: list[Booking] | None = None):
        self._occupied: set[tuple[datetime, int]] = set()
        if bookings:
            self.seed(bookings)

    @staticmethod
    def key(scheduled_time: datetime, court_number: int) -> tuple[datetime, int]:
        return (scheduled_time.replace(second=0, microsecond=0), court_number)

    def seed(self, bookings: list[Booking]):
        for b in bookings:
            if b.blocks_court:
                self._occupied.add(self.key(b.scheduled_time, b.court_number))

    def is_occupied(self, scheduled_time: datetime, court_number: int) -> bool:
        return self.key(scheduled_time, court_number) in self._occupied

    def occupy(self, scheduled_time: datetime, court_number: int):
        self._occupied.add(self.key(scheduled_time, court_number))

    def __contains__(self, slot: Slot) -> bool:
        return self.is_occupied(slot.scheduled_time, slot.court_number)

    def __len__(self) -> int:
        return len(self._occupied)

    def filter_free(self, slots: list[Slot]) -> list[Slot]:
        """Slots not yet occupied, in their original order."""
        return [s for s in slots if s not in self]
