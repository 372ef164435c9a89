from __future__ import annotations

from datetime import date, datetime

# Provider order is kept; a date mapped to [] means "checked, nothing free".
AvailabilityMap = dict[date, list[datetime]]


class AvailabilityCache:
    """Session-scoped slot cache keyed by calendar date.

    Reads never trigger a fetch; the cache is only filled through `upsert`
    with the result of an explicit range request.
    """

    def __init__(self) -> None:
        self._slots: AvailabilityMap = {}

    def upsert(self, availability: AvailabilityMap) -> None:
        for day, slots in availability.items():
            # Full overwrite per date so two fetches never get merged for the same day.
            self._slots[day] = list(slots)

    def slots_for(self, day: date) -> list[datetime]:
        return list(self._slots.get(day, ()))

    def has_availability(self, day: date) -> bool:
        return len(self.slots_for(day)) > 0

    def is_known(self, day: date) -> bool:
        return day in self._slots

    def __len__(self) -> int:
        return len(self._slots)
