"""
Shared fakes for booking tests.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.application.exceptions import SchedulingUnavailableError
from app.application.ports.scheduling_gateway import SchedulingGatewayPort
from app.application.use_cases.booking import BookingStateMachine
from app.application.use_cases.booking_orchestrator import BookingOrchestrator
from app.application.use_cases.lead_capture import LeadCaptureUseCase
from app.domain.entities.availability import AvailabilityMap
from app.domain.entities.booking_state import BookingRequest, BookingResult
from app.infrastructure.store.memory_store import MemoryLeadStore

TODAY = date(2025, 6, 1)
UTC = ZoneInfo("UTC")


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_result(uid: str = "u1") -> BookingResult:
    return BookingResult(
        id="1",
        uid=uid,
        status="accepted",
        start=utc(2025, 6, 10, 14, 0),
        end=utc(2025, 6, 10, 14, 15),
    )


class FakeGateway(SchedulingGatewayPort):
    def __init__(
        self,
        availability: AvailabilityMap | None = None,
        booking_result: BookingResult | None = None,
        booking_error: Exception | None = None,
        fetch_error: Exception | None = None,
    ) -> None:
        self.availability = availability or {}
        self.booking_result = booking_result or make_result()
        self.booking_error = booking_error
        self.fetch_error = fetch_error
        self.fetch_calls: list[tuple[datetime, datetime]] = []
        self.booking_calls: list[BookingRequest] = []
        self.release_booking: asyncio.Event | None = None

    async def fetch_availability(self, range_start: datetime, range_end: datetime) -> AvailabilityMap:
        self.fetch_calls.append((range_start, range_end))
        if self.fetch_error is not None:
            raise self.fetch_error
        return {
            day: list(slots)
            for day, slots in self.availability.items()
            if range_start.date() <= day <= range_end.date()
        }

    async def create_booking(self, request: BookingRequest) -> BookingResult:
        self.booking_calls.append(request)
        if self.release_booking is not None:
            await self.release_booking.wait()
        if self.booking_error is not None:
            raise self.booking_error
        return self.booking_result


class FailingLeadStore(MemoryLeadStore):
    def save_lead(self, lead) -> None:
        raise RuntimeError("crm down")


JUNE_AVAILABILITY: AvailabilityMap = {
    date(2025, 6, 10): [utc(2025, 6, 10, 14, 0), utc(2025, 6, 10, 9, 0), utc(2025, 6, 10, 18, 30)],
    date(2025, 6, 11): [],
}


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway(availability=dict(JUNE_AVAILABILITY))


@pytest.fixture
def lead_store() -> MemoryLeadStore:
    return MemoryLeadStore()


@pytest.fixture
def lead_capture(lead_store: MemoryLeadStore) -> LeadCaptureUseCase:
    return LeadCaptureUseCase(store=lead_store)


@pytest.fixture
def machine(gateway: FakeGateway, lead_capture: LeadCaptureUseCase) -> BookingStateMachine:
    return BookingStateMachine(gateway, lead_capture, UTC, today=lambda: TODAY)


@pytest.fixture
def orchestrator(gateway: FakeGateway, lead_capture: LeadCaptureUseCase) -> BookingOrchestrator:
    return BookingOrchestrator(
        gateway=gateway,
        lead_capture=lead_capture,
        timezone=UTC,
        external_booking_url="https://cal.example/15min",
        today=lambda: TODAY,
    )


def unavailable() -> SchedulingUnavailableError:
    return SchedulingUnavailableError("Scheduling provider unreachable")
