from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.config import settings


class CalComClient:
    """Thin async client for the Cal.com v2 API, used by the cal-proxy routes.

    Responses are returned as-is so the proxy can pass status and body through.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        api_version: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key or settings.CAL_COM_API_KEY
        self._base_url = (base_url or settings.CAL_COM_BASE_URL).rstrip("/")
        self._api_version = api_version or settings.CAL_COM_API_VERSION
        self._client = client or httpx.AsyncClient(timeout=settings.GATEWAY_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._api_key:
            raise ValueError("CAL_COM_API_KEY is required for Cal.com calendar")

    async def get_available_slots(self, params: dict[str, str]) -> httpx.Response:
        url = f"{self._base_url}/slots/available"
        response = await self._client.get(url, params=params, headers=self._headers())
        self._logger.info("Cal.com slots fetched", extra={"status": response.status_code})
        return response

    async def get_event_types(self) -> httpx.Response:
        url = f"{self._base_url}/event-types"
        return await self._client.get(url, headers=self._headers())

    async def create_booking(self, booking: dict[str, Any]) -> httpx.Response:
        url = f"{self._base_url}/bookings"
        headers = {**self._headers(), "Content-Type": "application/json"}
        response = await self._client.post(url, json=booking, headers=headers)
        self._logger.info("Cal.com booking submitted", extra={"status": response.status_code})
        return response

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "cal-api-version": self._api_version,
            "Authorization": f"Bearer {self._api_key}",
        }


def to_cal_booking_payload(body: dict[str, Any]) -> dict[str, Any]:
    """Map the proxy booking body onto the Cal.com v2 booking shape."""
    payload: dict[str, Any] = {"start": body["start"], "attendee": body["attendee"]}
    for key in ("eventTypeId", "eventTypeSlug", "username"):
        if body.get(key):
            payload[key] = body[key]
    if body.get("notes"):
        payload["bookingFieldsResponses"] = {"notes": body["notes"]}
    if body.get("serviceInterest"):
        payload["metadata"] = {"serviceInterest": body["serviceInterest"]}
    return payload
