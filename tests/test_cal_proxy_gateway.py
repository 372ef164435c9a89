"""
Tests for the cal-proxy scheduling gateway against a mocked HTTP transport.
"""

from __future__ import annotations

import json
from datetime import date, datetime

import httpx
import pytest

from app.application.dto.cal_proxy import extract_error_message
from app.application.exceptions import BookingRejectedError, GatewayFailureMode, SchedulingUnavailableError
from app.domain.entities.attendee import Attendee
from app.domain.entities.booking_state import BookingRequest
from app.infrastructure.calendar.cal_proxy_gateway import CalProxyGateway

from conftest import UTC, utc

PROXY_URL = "https://proxy.example/functions/v1/cal-proxy"

BOOKING_REQUEST = BookingRequest(
    start=utc(2025, 6, 10, 14, 0),
    attendee=Attendee(name="Jane Doe", email="jane@co.com", time_zone="America/Los_Angeles"),
    notes="Looking forward",
    service_interest="crm-setup",
)


def _gateway(handler, **kwargs) -> CalProxyGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CalProxyGateway(
        proxy_url=PROXY_URL,
        token="anon-key",
        event_type_slug="15min",
        username="axrategy",
        client=client,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_fetch_availability_sends_contract_and_parses_slots():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(
            200,
            json={
                "status": "success",
                "data": {
                    "slots": {
                        "2025-06-10": [{"time": "2025-06-10T14:00:00.000Z"}, {"time": "2025-06-10T09:00:00.000Z"}],
                        "2025-06-11": [],
                    }
                },
            },
        )

    gateway = _gateway(handler)
    availability = await gateway.fetch_availability(
        datetime(2025, 6, 1, tzinfo=UTC),
        datetime(2025, 6, 30, 23, 59, 59, 999999, tzinfo=UTC),
    )

    request = seen["request"]
    assert request.method == "GET"
    assert request.url.params["action"] == "slots"
    assert request.url.params["startTime"] == "2025-06-01T00:00:00.000Z"
    assert request.url.params["endTime"] == "2025-06-30T23:59:59.999Z"
    assert request.url.params["eventTypeSlug"] == "15min"
    assert request.url.params["username"] == "axrategy"
    assert request.headers["Authorization"] == "Bearer anon-key"
    assert availability[date(2025, 6, 10)] == [utc(2025, 6, 10, 14, 0), utc(2025, 6, 10, 9, 0)]
    assert availability[date(2025, 6, 11)] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code, kwargs",
    [
        (500, {"json": {"error": "boom"}}),
        (200, {"json": {"status": "error", "data": {"slots": {}}}}),
        (200, {"json": {"status": "success"}}),
        (200, {"text": "<html>not json</html>"}),
    ],
)
async def test_fetch_availability_failures_are_unavailable(status_code, kwargs):
    gateway = _gateway(lambda request: httpx.Response(status_code, **kwargs))

    with pytest.raises(SchedulingUnavailableError) as exc_info:
        await gateway.fetch_availability(utc(2025, 6, 1), utc(2025, 6, 30))

    assert exc_info.value.mode is GatewayFailureMode.UNAVAILABLE


@pytest.mark.asyncio
async def test_transport_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = _gateway(handler)

    with pytest.raises(SchedulingUnavailableError):
        await gateway.fetch_availability(utc(2025, 6, 1), utc(2025, 6, 30))
    with pytest.raises(SchedulingUnavailableError):
        await gateway.create_booking(BOOKING_REQUEST)


@pytest.mark.asyncio
async def test_create_booking_posts_body_and_returns_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(
            200,
            json={
                "status": "success",
                "data": {
                    "id": 42,
                    "uid": "bk_123",
                    "status": "accepted",
                    "start": "2025-06-10T14:00:00.000Z",
                    "end": "2025-06-10T14:15:00.000Z",
                    "meetingUrl": "https://meet.example/bk_123",
                },
            },
        )

    gateway = _gateway(handler, event_type_id=1234)
    result = await gateway.create_booking(BOOKING_REQUEST)

    request = seen["request"]
    body = json.loads(request.content)
    assert request.method == "POST"
    assert request.url.params["action"] == "book"
    assert body["start"] == "2025-06-10T14:00:00.000Z"
    assert body["attendee"] == {"name": "Jane Doe", "email": "jane@co.com", "timeZone": "America/Los_Angeles"}
    assert body["eventTypeId"] == 1234
    assert body["notes"] == "Looking forward"
    assert body["serviceInterest"] == "crm-setup"
    assert result.id == "42"
    assert result.uid == "bk_123"
    assert result.end == utc(2025, 6, 10, 14, 15)
    assert result.meeting_url == "https://meet.example/bk_123"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, message",
    [
        ({"status": "error", "error": "Slot taken"}, "Slot taken"),
        ({"status": "error", "error": {"code": "BadRequest", "message": "Attendee already booked"}}, "Attendee already booked"),
        ({"error": {"code": "SLOT_UNAVAILABLE"}}, "SLOT_UNAVAILABLE"),
    ],
)
async def test_booking_error_with_message_is_rejected(payload, message):
    gateway = _gateway(lambda request: httpx.Response(400, json=payload))

    with pytest.raises(BookingRejectedError) as exc_info:
        await gateway.create_booking(BOOKING_REQUEST)

    assert exc_info.value.message == message
    assert exc_info.value.mode is GatewayFailureMode.REJECTED


@pytest.mark.asyncio
async def test_booking_server_error_is_unavailable_even_with_message():
    gateway = _gateway(lambda request: httpx.Response(502, json={"error": "upstream down"}))

    with pytest.raises(SchedulingUnavailableError):
        await gateway.create_booking(BOOKING_REQUEST)


@pytest.mark.asyncio
async def test_booking_without_message_is_unavailable():
    gateway = _gateway(lambda request: httpx.Response(400, text="bad"))

    with pytest.raises(SchedulingUnavailableError):
        await gateway.create_booking(BOOKING_REQUEST)


@pytest.mark.asyncio
async def test_booking_success_with_malformed_data_is_unavailable():
    gateway = _gateway(lambda request: httpx.Response(200, json={"status": "success", "data": {"uid": "x"}}))

    with pytest.raises(SchedulingUnavailableError):
        await gateway.create_booking(BOOKING_REQUEST)


def test_gateway_requires_proxy_url(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "CAL_PROXY_URL", None)

    with pytest.raises(ValueError):
        CalProxyGateway(client=httpx.AsyncClient())


def test_extract_error_message_shapes():
    assert extract_error_message({"error": "  Slot taken "}) == "Slot taken"
    assert extract_error_message({"error": {"message": "Nope", "code": "X"}}) == "Nope"
    assert extract_error_message({"error": {"code": "X"}}) == "X"
    assert extract_error_message({"error": {}}) is None
    assert extract_error_message(["error"]) is None
    assert extract_error_message(None) is None
