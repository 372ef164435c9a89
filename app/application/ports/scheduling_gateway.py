from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.availability import AvailabilityMap
from app.domain.entities.booking_state import BookingRequest, BookingResult


class SchedulingGatewayPort(ABC):
    """The only seam allowed to talk to the external scheduling provider.

    Failures are raised as `GatewayError` subclasses; nothing is retried.
    """

    @abstractmethod
    async def fetch_availability(self, range_start: datetime, range_end: datetime) -> AvailabilityMap:
        """Fetch slots between range_start and range_end (both inclusive).

        Raises SchedulingUnavailableError on transport, status or shape problems.
        """
        raise NotImplementedError

    @abstractmethod
    async def create_booking(self, request: BookingRequest) -> BookingResult:
        """Submit one booking. Not deduplicated: call once per confirmation.

        Raises BookingRejectedError when the provider refuses with a reason,
        SchedulingUnavailableError for anything else.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources. Default is a no-op."""
        return None
