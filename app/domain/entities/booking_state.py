from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from app.domain.entities.attendee import Attendee


class BookingStep(str, Enum):
    DATE = "date"
    TIME = "time"
    FORM = "form"
    CONFIRM = "confirm"


@dataclass(frozen=True)
class BookingDraft:
    selected_date: date | None = None
    selected_time: datetime | None = None  # tz-aware slot start
    attendee: Attendee | None = None
    notes: str | None = None
    service_interest: str | None = None


@dataclass(frozen=True)
class BookingRequest:
    """A draft that passed validation and is ready to be sent to the provider."""

    start: datetime
    attendee: Attendee
    notes: str | None = None
    service_interest: str | None = None


@dataclass(frozen=True)
class BookingResult:
    id: str
    uid: str
    status: str
    start: datetime
    end: datetime
    meeting_url: str | None = None
