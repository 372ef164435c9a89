from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from app.application.dto.booking_views import BookingSnapshot


class OpenSessionRequestSchema(BaseModel):
    service_interest: str | None = None
    time_zone: str | None = None


class TriggerRequestSchema(BaseModel):
    service_interest: str | None = None


class MonthRequestSchema(BaseModel):
    year: int = Field(ge=1970, le=9999)
    month: int = Field(ge=1, le=12)


class DateRequestSchema(BaseModel):
    date: dt.date


class TimeRequestSchema(BaseModel):
    time: dt.datetime


class BookingFormSchema(BaseModel):
    name: str = ""
    email: str = ""
    notes: str | None = None
    service_interest: str | None = None


class SessionResponseSchema(BaseModel):
    session_id: str
    is_open: bool
    service_interest: str | None = None
    booking: BookingSnapshot | None = None
