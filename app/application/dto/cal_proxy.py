from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.application.utils.date_utils import ensure_aware
from app.domain.entities.availability import AvailabilityMap
from app.domain.entities.booking_state import BookingResult


class SlotDTO(BaseModel):
    time: datetime


class SlotsDataDTO(BaseModel):
    slots: dict[date, list[SlotDTO]]


class SlotsResponseDTO(BaseModel):
    status: str
    data: SlotsDataDTO

    def to_availability(self) -> AvailabilityMap:
        return {day: [ensure_aware(slot.time) for slot in slots] for day, slots in self.data.slots.items()}


class BookingDataDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    uid: str
    status: str
    start: datetime
    end: datetime
    meeting_url: str | None = Field(default=None, alias="meetingUrl")

    @field_validator("id", "uid", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class BookingResponseDTO(BaseModel):
    status: str
    data: BookingDataDTO

    def to_result(self) -> BookingResult:
        data = self.data
        return BookingResult(
            id=data.id,
            uid=data.uid,
            status=data.status,
            start=ensure_aware(data.start),
            end=ensure_aware(data.end),
            meeting_url=data.meeting_url,
        )


def extract_error_message(payload: Any) -> str | None:
    """
    Pull a human-readable message out of a provider error payload.

    Accepts both `{"error": "text"}` and `{"error": {"code", "message", "details"}}`.
    """
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, str) and error.strip():
        return error.strip()
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        code = error.get("code")
        if isinstance(code, str) and code.strip():
            return code.strip()
    return None
