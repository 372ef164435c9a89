from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from app.application.exceptions import BookingRejectedError
from app.application.ports.scheduling_gateway import SchedulingGatewayPort
from app.domain.entities.availability import AvailabilityMap
from app.domain.entities.booking_state import BookingRequest, BookingResult


class MockSchedulingGateway(SchedulingGatewayPort):
    """In-process provider for dev/local: weekday slots every 30 minutes during business hours."""

    def __init__(
        self,
        timezone: ZoneInfo,
        duration_minutes: int = 15,
        start_hour: int = 9,
        end_hour: int = 17,
    ) -> None:
        self._timezone = timezone
        self._duration = timedelta(minutes=duration_minutes)
        self._start_hour = start_hour
        self._end_hour = end_hour
        self._bookings: dict[str, BookingResult] = {}
        self._logger = logging.getLogger(__name__)

    async def fetch_availability(self, range_start: datetime, range_end: datetime) -> AvailabilityMap:
        now = datetime.now(self._timezone)
        first = range_start.astimezone(self._timezone).date()
        last = range_end.astimezone(self._timezone).date()

        availability: AvailabilityMap = {}
        current = first
        while current <= last:
            availability[current] = [slot for slot in self._day_slots(current) if slot > now]
            current += timedelta(days=1)
        return availability

    async def create_booking(self, request: BookingRequest) -> BookingResult:
        if self._is_taken(request.start):
            raise BookingRejectedError("This time slot is no longer available")

        booking_id = str(len(self._bookings) + 1)
        result = BookingResult(
            id=booking_id,
            uid=f"mock_{uuid.uuid4().hex[:12]}",
            status="accepted",
            start=request.start,
            end=request.start + self._duration,
            meeting_url=None,
        )
        self._bookings[result.uid] = result
        self._logger.info(
            "Mock booking created",
            extra={"booking_uid": result.uid, "status": result.status},
        )
        return result

    def _day_slots(self, day: date) -> list[datetime]:
        if day.weekday() >= 5:
            return []
        slots: list[datetime] = []
        current = datetime.combine(day, time(hour=self._start_hour), tzinfo=self._timezone)
        end_time = datetime.combine(day, time(hour=self._end_hour), tzinfo=self._timezone)
        while current + self._duration <= end_time:
            if not self._is_taken(current):
                slots.append(current)
            current += timedelta(minutes=30)
        return slots

    def _is_taken(self, start: datetime) -> bool:
        return any(booking.start == start for booking in self._bookings.values())
