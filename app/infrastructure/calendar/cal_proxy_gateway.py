from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from app.application.dto.cal_proxy import BookingResponseDTO, SlotsResponseDTO, extract_error_message
from app.application.exceptions import BookingRejectedError, SchedulingUnavailableError
from app.application.ports.scheduling_gateway import SchedulingGatewayPort
from app.application.utils.date_utils import to_utc_iso
from app.core.config import settings
from app.domain.entities.availability import AvailabilityMap
from app.domain.entities.booking_state import BookingRequest, BookingResult


class CalProxyGateway(SchedulingGatewayPort):
    """Scheduling gateway speaking the cal-proxy wire contract (`?action=slots|book`)."""

    def __init__(
        self,
        proxy_url: str | None = None,
        token: str | None = None,
        event_type_slug: str | None = None,
        event_type_id: int | None = None,
        username: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._proxy_url = proxy_url or settings.CAL_PROXY_URL
        self._token = token or settings.CAL_PROXY_TOKEN
        self._event_type_slug = event_type_slug or settings.CAL_EVENT_TYPE_SLUG
        self._event_type_id = event_type_id or settings.CAL_EVENT_TYPE_ID
        self._username = username or settings.CAL_USERNAME
        self._client = client or httpx.AsyncClient(timeout=settings.GATEWAY_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._proxy_url:
            raise ValueError("CAL_PROXY_URL is required for the scheduling proxy gateway")

    async def fetch_availability(self, range_start: datetime, range_end: datetime) -> AvailabilityMap:
        params = {
            "action": "slots",
            "startTime": to_utc_iso(range_start),
            "endTime": to_utc_iso(range_end),
        }
        if self._event_type_slug:
            params["eventTypeSlug"] = self._event_type_slug
        if self._username:
            params["username"] = self._username

        try:
            response = await self._client.get(self._proxy_url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            self._logger.error("Availability request failed", extra={"error": str(e)})
            raise SchedulingUnavailableError("Scheduling provider unreachable") from e

        if not response.is_success:
            self._logger.error(
                "Availability request rejected",
                extra={"status": response.status_code, "error": extract_error_message(_safe_json(response))},
            )
            raise SchedulingUnavailableError(f"Availability request failed with status {response.status_code}")

        try:
            payload = SlotsResponseDTO.model_validate(response.json())
        except ValueError as e:
            self._logger.error("Malformed availability response", extra={"error": str(e)})
            raise SchedulingUnavailableError("Malformed availability response") from e

        if payload.status != "success":
            self._logger.error("Availability response not successful", extra={"status": payload.status})
            raise SchedulingUnavailableError("Unable to load available times")

        availability = payload.to_availability()
        self._logger.info("Availability loaded", extra={"status": response.status_code, "reason": f"{len(availability)} days"})
        return availability

    async def create_booking(self, request: BookingRequest) -> BookingResult:
        body = self._booking_body(request)
        try:
            response = await self._client.post(
                self._proxy_url,
                params={"action": "book"},
                json=body,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            self._logger.error("Booking request failed", extra={"error": str(e)})
            raise SchedulingUnavailableError("Scheduling provider unreachable") from e

        payload = _safe_json(response)
        if response.status_code >= 500:
            self._logger.error(
                "Booking request errored upstream",
                extra={"status": response.status_code, "error": extract_error_message(payload)},
            )
            raise SchedulingUnavailableError(f"Booking request failed with status {response.status_code}")

        if response.is_success and isinstance(payload, dict) and payload.get("status") == "success":
            try:
                booking = BookingResponseDTO.model_validate(payload)
            except ValueError as e:
                self._logger.error("Malformed booking response", extra={"error": str(e)})
                raise SchedulingUnavailableError("Malformed booking response") from e
            result = booking.to_result()
            self._logger.info("Booking created", extra={"booking_uid": result.uid, "status": result.status})
            return result

        message = extract_error_message(payload)
        if message:
            raise BookingRejectedError(message)
        raise SchedulingUnavailableError(f"Unexpected booking response with status {response.status_code}")

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _booking_body(self, request: BookingRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "start": to_utc_iso(request.start),
            "attendee": {
                "name": request.attendee.name,
                "email": request.attendee.email,
                "timeZone": request.attendee.time_zone,
            },
        }
        if self._event_type_id:
            body["eventTypeId"] = self._event_type_id
        if self._event_type_slug:
            body["eventTypeSlug"] = self._event_type_slug
        if self._username:
            body["username"] = self._username
        if request.notes:
            body["notes"] = request.notes
        if request.service_interest:
            body["serviceInterest"] = request.service_interest
        return body


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
