from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.application.exceptions import BookingRejectedError, SchedulingUnavailableError
from app.application.ports.scheduling_gateway import SchedulingGatewayPort
from app.application.use_cases.lead_capture import LeadCaptureUseCase
from app.application.utils.attendee_validation import validate_attendee
from app.application.utils.date_utils import ensure_aware
from app.domain.entities.attendee import Attendee, InvalidAttendee
from app.domain.entities.booking_state import BookingDraft, BookingRequest, BookingResult, BookingStep
from app.domain.entities.service_catalog import normalize_service_interest

BOOKING_FAILED_MESSAGE = "Failed to book appointment"


class BookingStateMachine:
    """
    Four-step booking flow: date -> time -> form -> confirm.

    Only `time -> date` and `form -> time` go backwards. `confirm` is left
    through `reset()` alone. While a booking is in flight every transition
    is refused. Refused transitions are no-ops that return False, so callers
    can re-render without special casing.

    The degraded flag survives `reset()`: once live availability failed,
    it stays off for the lifetime of this machine.
    """

    def __init__(
        self,
        gateway: SchedulingGatewayPort,
        lead_capture: LeadCaptureUseCase,
        timezone: ZoneInfo,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._gateway = gateway
        self._lead_capture = lead_capture
        self._timezone = timezone
        self._today = today or (lambda: datetime.now(self._timezone).date())
        self._logger = logging.getLogger(__name__)

        self._step = BookingStep.DATE
        self._draft = BookingDraft()
        self._booking_result: BookingResult | None = None
        self._confirmed_attendee: Attendee | None = None
        self._error: str | None = None
        self._field_errors: dict[str, str] = {}
        self._is_booking = False
        self._degraded = False

    @property
    def step(self) -> BookingStep:
        return self._step

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def booking_result(self) -> BookingResult | None:
        return self._booking_result

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._field_errors)

    @property
    def is_booking(self) -> bool:
        return self._is_booking

    @property
    def degraded(self) -> bool:
        return self._degraded

    @property
    def timezone(self) -> ZoneInfo:
        return self._timezone

    def today(self) -> date:
        return self._today()

    def mark_degraded(self) -> None:
        if not self._degraded:
            self._logger.warning("Live availability disabled for this session", extra={"reason": "unavailable"})
        self._degraded = True

    def select_date(self, day: date) -> bool:
        if self._is_booking:
            return self._refuse("select_date", reason="in_flight")
        if self._step not in (BookingStep.DATE, BookingStep.TIME):
            return self._refuse("select_date")
        if day < self.today():
            return self._refuse("select_date", reason="past_date")

        self._draft = replace(self._draft, selected_date=day, selected_time=None)
        self._error = None
        self._step = BookingStep.TIME
        return True

    def select_time(self, slot: datetime) -> bool:
        if self._is_booking:
            return self._refuse("select_time", reason="in_flight")
        if self._step is not BookingStep.TIME or self._draft.selected_date is None:
            return self._refuse("select_time")

        self._draft = replace(self._draft, selected_time=ensure_aware(slot))
        self._error = None
        self._step = BookingStep.FORM
        return True

    async def submit_form(
        self,
        name: str | None,
        email: str | None,
        time_zone: str | None = None,
        notes: str | None = None,
        service_interest: str | None = None,
    ) -> bool:
        if self._step is not BookingStep.FORM or self._draft.selected_time is None:
            return self._refuse("submit_form")
        if self._is_booking:
            return self._refuse("submit_form", reason="in_flight")

        validation = validate_attendee(name, email, time_zone or self._timezone.key)
        if isinstance(validation, InvalidAttendee):
            self._field_errors = dict(validation.field_errors)
            self._error = None
            return False

        attendee = validation.attendee
        clean_notes = (notes or "").strip() or None
        interest = normalize_service_interest(service_interest)
        # Keep what the user typed so a failed attempt does not lose it.
        self._draft = replace(self._draft, attendee=attendee, notes=clean_notes, service_interest=interest)
        self._field_errors = {}
        self._error = None

        request = BookingRequest(
            start=self._draft.selected_time,
            attendee=attendee,
            notes=clean_notes,
            service_interest=interest,
        )

        self._is_booking = True
        try:
            result = await self._gateway.create_booking(request)
        except BookingRejectedError as e:
            self._error = e.message
            self._logger.info("Booking rejected", extra={"step": self._step.value, "reason": e.message})
            return False
        except SchedulingUnavailableError as e:
            self._error = BOOKING_FAILED_MESSAGE
            self._logger.warning("Booking failed", extra={"step": self._step.value, "error": e.message})
            return False
        finally:
            self._is_booking = False

        self._booking_result = result
        self._confirmed_attendee = attendee
        self._step = BookingStep.CONFIRM
        self._logger.info("Booking confirmed", extra={"booking_uid": result.uid, "status": result.status})

        self._lead_capture.record(
            attendee=attendee,
            booking=result,
            notes=clean_notes,
            service_interest=interest,
        )
        return True

    def go_back(self) -> bool:
        if self._is_booking:
            return self._refuse("go_back", reason="in_flight")
        if self._step is BookingStep.TIME:
            self._step = BookingStep.DATE
        elif self._step is BookingStep.FORM:
            self._step = BookingStep.TIME
        else:
            return False
        self._error = None
        self._field_errors = {}
        return True

    def reset(self) -> bool:
        if self._is_booking:
            return self._refuse("reset", reason="in_flight")
        self._step = BookingStep.DATE
        self._draft = BookingDraft()
        self._booking_result = None
        self._confirmed_attendee = None
        self._error = None
        self._field_errors = {}
        return True

    @property
    def attendee(self) -> Attendee | None:
        """The attendee of the confirmed booking, or the one typed into the form so far."""
        return self._confirmed_attendee or self._draft.attendee

    def _refuse(self, action: str, reason: str = "invalid_step") -> bool:
        self._logger.debug("Transition ignored", extra={"action": action, "step": self._step.value, "reason": reason})
        return False
