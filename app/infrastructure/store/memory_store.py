from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict

from app.application.ports.lead_store import LeadStorePort
from app.application.use_cases.booking_modal import BookingSession
from app.domain.entities.lead import LeadRecord


class MemoryLeadStore(LeadStorePort):
    def __init__(self, limit: int = 1000) -> None:
        self._leads: list[LeadRecord] = []
        self._limit = limit
        self._lock = threading.Lock()  # writes arrive from worker threads

    def save_lead(self, lead: LeadRecord) -> None:
        with self._lock:
            self._leads.append(lead)
            if len(self._leads) > self._limit:
                self._leads = self._leads[-self._limit :]

    def list_leads(self) -> list[LeadRecord]:
        with self._lock:
            return list(self._leads)


class MemoryBookingSessionStore:
    """Live booking sessions for this process. Sessions hold orchestrators, so they are never serialized.

    Bounded by `limit`: adding past it disposes the least recently used session.
    """

    def __init__(self, limit: int = 500) -> None:
        self._sessions: OrderedDict[str, BookingSession] = OrderedDict()
        self._limit = limit
        self._logger = logging.getLogger(__name__)

    def new_session_id(self) -> str:
        return uuid.uuid4().hex

    def add(self, session: BookingSession) -> None:
        self._sessions[session.session_id] = session
        self._sessions.move_to_end(session.session_id)
        while len(self._sessions) > self._limit:
            _, evicted = self._sessions.popitem(last=False)
            evicted.dispose()
            self._logger.info("Booking session evicted", extra={"session_id": evicted.session_id, "reason": "limit"})

    def get(self, session_id: str) -> BookingSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def remove(self, session_id: str) -> BookingSession | None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.dispose()
        return session

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.remove(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
