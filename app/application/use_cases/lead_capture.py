from __future__ import annotations

import asyncio
import logging

from app.application.ports.lead_store import LeadStorePort
from app.domain.entities.attendee import Attendee
from app.domain.entities.booking_state import BookingResult
from app.domain.entities.lead import LeadRecord


class LeadCaptureUseCase:
    """
    Best-effort CRM write after a confirmed booking.

    `record` schedules the write and returns immediately. It never raises:
    the booking already succeeded with the provider, so a lead failure is
    only logged.
    """

    def __init__(self, store: LeadStorePort) -> None:
        self._store = store
        self._pending: set[asyncio.Task[None]] = set()
        self._logger = logging.getLogger(__name__)

    def record(
        self,
        attendee: Attendee,
        booking: BookingResult,
        notes: str | None = None,
        service_interest: str | None = None,
    ) -> None:
        try:
            lead = LeadRecord(
                name=attendee.name,
                email=attendee.email,
                service_interest=service_interest,
                message=notes,
            )
            task = asyncio.get_running_loop().create_task(self._write(lead, booking.uid))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        except Exception as e:
            self._logger.warning("Lead capture not scheduled", extra={"booking_uid": booking.uid, "error": str(e)})

    async def wait_idle(self) -> None:
        """Wait for scheduled lead writes to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def _write(self, lead: LeadRecord, booking_uid: str) -> None:
        try:
            await asyncio.to_thread(self._store.save_lead, lead)
            self._logger.info("Lead recorded", extra={"booking_uid": booking_uid})
        except Exception as e:
            self._logger.exception("Lead capture failed", extra={"booking_uid": booking_uid, "error": str(e)})
