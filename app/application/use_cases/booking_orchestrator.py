from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.application.dto.booking_views import (
    AttendeeView,
    BookingResultView,
    BookingSnapshot,
    CalendarDayView,
    CalendarView,
    ConfirmationView,
    FormView,
    ServiceOptionView,
    TimeGridView,
    TimeSlotView,
)
from app.application.exceptions import SchedulingUnavailableError
from app.application.ports.identity import IdentityPort
from app.application.ports.scheduling_gateway import SchedulingGatewayPort
from app.application.use_cases.booking import BookingStateMachine
from app.application.use_cases.lead_capture import LeadCaptureUseCase
from app.application.utils.date_utils import (
    WEEKDAY_LABELS,
    format_date_label,
    format_time_label,
    group_slots_by_period,
    is_before_month,
    month_range,
)
from app.domain.entities.attendee import Attendee
from app.domain.entities.availability import AvailabilityCache
from app.domain.entities.booking_state import BookingStep
from app.domain.entities.service_catalog import SERVICE_OPTIONS

DEGRADED_ADVISORY = (
    "Live availability is unavailable right now. "
    "You can still pick a date, or book directly using the link below."
)


class BookingOrchestrator:
    """
    Wiring for one booking widget.

    Month navigation refills the availability cache (unless the session is
    degraded), user actions go to the state machine, and the view methods
    build what each step renders. Each month fetch is stamped with a
    request id; only the latest one may touch the cache. After `close()`
    late results are dropped.
    """

    def __init__(
        self,
        gateway: SchedulingGatewayPort,
        lead_capture: LeadCaptureUseCase,
        timezone: ZoneInfo,
        external_booking_url: str,
        identity: IdentityPort | None = None,
        service_interest: str | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._gateway = gateway
        self._timezone = timezone
        self._external_booking_url = external_booking_url
        self._identity = identity
        self.service_interest = service_interest
        self._cache = AvailabilityCache()
        self._machine = BookingStateMachine(gateway, lead_capture, timezone, today=today)
        self._logger = logging.getLogger(__name__)

        self._visible_month: tuple[int, int] | None = None
        self._request_id = 0
        self._is_loading_slots = False
        self._closed = False

    @property
    def machine(self) -> BookingStateMachine:
        return self._machine

    @property
    def cache(self) -> AvailabilityCache:
        return self._cache

    @property
    def step(self) -> BookingStep:
        return self._machine.step

    @property
    def visible_month(self) -> tuple[int, int] | None:
        return self._visible_month

    @property
    def is_loading_slots(self) -> bool:
        return self._is_loading_slots

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def show_current_month(self) -> bool:
        today = self._machine.today()
        return await self.change_month(today.year, today.month)

    async def change_month(self, year: int, month: int) -> bool:
        """Show a month and load its availability. Returns True when the cache was refreshed."""
        if self._closed:
            return False
        if not 1 <= month <= 12 or is_before_month(year, month, self._machine.today()):
            return False

        self._visible_month = (year, month)
        if self._machine.degraded:
            self._logger.info("Skipping availability fetch", extra={"reason": "degraded"})
            return False

        range_start, range_end = month_range(year, month, self._timezone)
        self._request_id += 1
        request_id = self._request_id
        self._is_loading_slots = True
        try:
            availability = await self._gateway.fetch_availability(range_start, range_end)
        except SchedulingUnavailableError as e:
            if self._closed:
                return False
            self._machine.mark_degraded()
            self._logger.warning("Availability fetch failed", extra={"error": e.message})
            return False
        finally:
            if request_id == self._request_id:
                self._is_loading_slots = False

        if self._closed:
            self._logger.debug("Dropping availability for closed widget")
            return False
        if request_id != self._request_id:
            self._logger.debug("Dropping stale availability", extra={"reason": f"{year}-{month:02d}"})
            return False

        self._cache.upsert(availability)
        return True

    def has_availability(self, day: date) -> bool:
        return self._cache.has_availability(day)

    def slots_for(self, day: date) -> list[datetime]:
        return self._cache.slots_for(day)

    def select_date(self, day: date) -> bool:
        return self._machine.select_date(day)

    def select_time(self, slot: datetime) -> bool:
        return self._machine.select_time(slot)

    async def submit_form(
        self,
        name: str | None,
        email: str | None,
        notes: str | None = None,
        service_interest: str | None = None,
        time_zone: str | None = None,
    ) -> bool:
        if service_interest is None:
            service_interest = self.service_interest
        return await self._machine.submit_form(
            name=name,
            email=email,
            time_zone=time_zone or self._timezone.key,
            notes=notes,
            service_interest=service_interest,
        )

    def go_back(self) -> bool:
        return self._machine.go_back()

    def reset(self) -> bool:
        return self._machine.reset()

    def close(self) -> None:
        self._closed = True
        self._is_loading_slots = False

    def advisory(self) -> str | None:
        return DEGRADED_ADVISORY if self._machine.degraded else None

    def snapshot(self) -> BookingSnapshot:
        draft = self._machine.draft
        result = self._machine.booking_result
        year, month = self._visible_month or (None, None)
        return BookingSnapshot(
            step=self._machine.step.value,
            selected_date=draft.selected_date,
            selected_time=draft.selected_time,
            attendee=_attendee_view(draft.attendee),
            notes=draft.notes,
            service_interest=draft.service_interest or self.service_interest,
            booking_result=BookingResultView.from_result(result) if result else None,
            visible_year=year,
            visible_month=month,
            is_loading_slots=self._is_loading_slots,
            is_booking=self._machine.is_booking,
            error=self._machine.error,
            field_errors=self._machine.field_errors,
            degraded=self._machine.degraded,
            advisory=self.advisory(),
            external_booking_url=self._external_booking_url,
        )

    def calendar_view(self) -> CalendarView:
        today = self._machine.today()
        year, month = self._visible_month or (today.year, today.month)
        selected = self._machine.draft.selected_date
        # Python weekdays start on Monday; the grid starts on Sunday.
        first_weekday = (calendar.weekday(year, month, 1) + 1) % 7
        days_in_month = calendar.monthrange(year, month)[1]

        days = []
        for day_number in range(1, days_in_month + 1):
            day = date(year, month, day_number)
            days.append(
                CalendarDayView(
                    date=day,
                    day=day_number,
                    is_past=day < today,
                    is_today=day == today,
                    has_availability=day >= today and self._cache.has_availability(day),
                    is_selected=day == selected,
                )
            )

        return CalendarView(
            year=year,
            month=month,
            month_label=f"{calendar.month_name[month]} {year}",
            weekday_labels=list(WEEKDAY_LABELS),
            leading_blank_days=first_weekday,
            days=days,
            can_go_previous=(year, month) > (today.year, today.month),
            is_loading=self._is_loading_slots,
            degraded=self._machine.degraded,
            advisory=self.advisory(),
            external_booking_url=self._external_booking_url,
        )

    def time_grid_view(self) -> TimeGridView | None:
        selected = self._machine.draft.selected_date
        if selected is None:
            return None
        grouped = group_slots_by_period(self._cache.slots_for(selected), self._timezone)
        as_views = {
            period: [TimeSlotView(start=slot, label=format_time_label(slot, self._timezone)) for slot in slots]
            for period, slots in grouped.items()
        }
        return TimeGridView(
            date=selected,
            date_label=format_date_label(selected),
            time_zone=self._timezone.key,
            morning=as_views["morning"],
            afternoon=as_views["afternoon"],
            evening=as_views["evening"],
            has_slots=any(as_views.values()),
            is_loading=self._is_loading_slots,
        )

    def form_view(self) -> FormView | None:
        draft = self._machine.draft
        if draft.selected_date is None or draft.selected_time is None:
            return None

        name, email = "", ""
        if draft.attendee is not None:
            name, email = draft.attendee.name, draft.attendee.email
        elif self._identity is not None:
            identity = self._identity.current_identity()
            if identity is not None:
                name, email = identity.name or "", identity.email or ""

        return FormView(
            date=draft.selected_date,
            time=draft.selected_time,
            date_label=format_date_label(draft.selected_date, include_year=True),
            time_label=format_time_label(draft.selected_time, self._timezone),
            name=name,
            email=email,
            notes=draft.notes or "",
            service_interest=draft.service_interest or self.service_interest or "",
            service_options=[ServiceOptionView(value=o.value, label=o.label) for o in SERVICE_OPTIONS],
            is_submitting=self._machine.is_booking,
            error=self._machine.error,
            field_errors=self._machine.field_errors,
        )

    def confirmation_view(self) -> ConfirmationView | None:
        result = self._machine.booking_result
        attendee = self._machine.attendee
        if self._machine.step is not BookingStep.CONFIRM or result is None or attendee is None:
            return None
        start_local = result.start.astimezone(self._timezone)
        return ConfirmationView(
            booking=BookingResultView.from_result(result),
            attendee=AttendeeView(name=attendee.name, email=attendee.email, time_zone=attendee.time_zone),
            date_label=format_date_label(start_local.date(), include_year=True),
            time_label=format_time_label(result.start, self._timezone),
            end_label=format_time_label(result.end, self._timezone),
            time_zone=self._timezone.key,
        )


def _attendee_view(attendee: Attendee | None) -> AttendeeView | None:
    if attendee is None:
        return None
    return AttendeeView(name=attendee.name, email=attendee.email, time_zone=attendee.time_zone)
