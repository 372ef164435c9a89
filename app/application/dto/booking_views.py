from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from app.domain.entities.booking_state import BookingResult


class CalendarDayView(BaseModel):
    date: dt.date
    day: int
    is_past: bool
    is_today: bool
    has_availability: bool
    is_selected: bool = False


class CalendarView(BaseModel):
    year: int
    month: int
    month_label: str
    weekday_labels: list[str]
    leading_blank_days: int  # Sunday-first grid offset
    days: list[CalendarDayView]
    can_go_previous: bool
    is_loading: bool
    degraded: bool
    advisory: str | None = None
    external_booking_url: str


class TimeSlotView(BaseModel):
    start: dt.datetime
    label: str


class TimeGridView(BaseModel):
    date: dt.date
    date_label: str
    time_zone: str
    morning: list[TimeSlotView] = Field(default_factory=list)
    afternoon: list[TimeSlotView] = Field(default_factory=list)
    evening: list[TimeSlotView] = Field(default_factory=list)
    has_slots: bool
    is_loading: bool


class ServiceOptionView(BaseModel):
    value: str
    label: str


class FormView(BaseModel):
    date: dt.date
    time: dt.datetime
    date_label: str
    time_label: str
    name: str = ""
    email: str = ""
    notes: str = ""
    service_interest: str = ""
    service_options: list[ServiceOptionView]
    is_submitting: bool
    error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)


class BookingResultView(BaseModel):
    id: str
    uid: str
    status: str
    start: dt.datetime
    end: dt.datetime
    meeting_url: str | None = None

    @classmethod
    def from_result(cls, result: BookingResult) -> "BookingResultView":
        return cls(
            id=result.id,
            uid=result.uid,
            status=result.status,
            start=result.start,
            end=result.end,
            meeting_url=result.meeting_url,
        )


class AttendeeView(BaseModel):
    name: str
    email: str
    time_zone: str


class ConfirmationView(BaseModel):
    booking: BookingResultView
    attendee: AttendeeView
    date_label: str
    time_label: str
    end_label: str
    time_zone: str


class BookingSnapshot(BaseModel):
    step: str
    selected_date: dt.date | None = None
    selected_time: dt.datetime | None = None
    attendee: AttendeeView | None = None
    notes: str | None = None
    service_interest: str | None = None
    booking_result: BookingResultView | None = None
    visible_year: int | None = None
    visible_month: int | None = None
    is_loading_slots: bool = False
    is_booking: bool = False
    error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    degraded: bool = False
    advisory: str | None = None
    external_booking_url: str
