from __future__ import annotations

import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.infrastructure.calendar.cal_com_client import CalComClient, to_cal_booking_payload
from app.infrastructure.calendar.proxy_auth import verify_bearer
from app.wiring.dependencies import get_cal_com_client


router = APIRouter()
logger = logging.getLogger(__name__)

SLOT_FORWARD_PARAMS = ("eventTypeSlug", "eventTypeId", "username", "duration")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _passthrough(upstream: httpx.Response) -> JSONResponse:
    try:
        content = upstream.json()
    except ValueError:
        logger.error("Cal.com returned a non-JSON body", extra={"status": upstream.status_code})
        return _error(502, "Failed to process request")
    return JSONResponse(status_code=upstream.status_code, content=content)


def _authorized(request: Request) -> bool:
    return verify_bearer(request.headers.get("Authorization"), settings.CAL_PROXY_TOKEN, settings.ENV)


@router.get("/functions/cal-proxy")
async def proxy_get(
    request: Request,
    client: CalComClient | None = Depends(get_cal_com_client),
) -> JSONResponse:
    if not _authorized(request):
        return _error(401, "Unauthorized")
    if client is None:
        return _error(500, "Cal.com API key not configured")

    params = request.query_params
    action = params.get("action")
    try:
        if action == "slots":
            start_time = params.get("startTime")
            end_time = params.get("endTime")
            if not start_time or not end_time:
                return _error(400, "startTime and endTime are required")

            forward = {"startTime": start_time, "endTime": end_time}
            for key in SLOT_FORWARD_PARAMS:
                if params.get(key):
                    forward[key] = params[key]
            return _passthrough(await client.get_available_slots(forward))

        if action == "event-types":
            return _passthrough(await client.get_event_types())
    except httpx.HTTPError as e:
        logger.exception("Cal proxy error", extra={"error": str(e)})
        return _error(502, "Failed to process request")

    return _error(400, "Invalid action. Use 'slots' or 'event-types'")


@router.post("/functions/cal-proxy")
async def proxy_post(
    request: Request,
    client: CalComClient | None = Depends(get_cal_com_client),
) -> JSONResponse:
    if not _authorized(request):
        return _error(401, "Unauthorized")
    if client is None:
        return _error(500, "Cal.com API key not configured")

    if request.query_params.get("action") != "book":
        return _error(400, "Invalid action. Use 'book' for POST requests")

    try:
        body = json.loads(await request.body() or b"{}")
    except ValueError:
        return _error(400, "Request body must be JSON")

    has_event_type = isinstance(body, dict) and (
        body.get("eventTypeId") or (body.get("eventTypeSlug") and body.get("username"))
    )
    if not has_event_type or not body.get("start") or not body.get("attendee"):
        return _error(400, "start, attendee, and eventTypeId (or eventTypeSlug with username) are required")

    try:
        return _passthrough(await client.create_booking(to_cal_booking_payload(body)))
    except httpx.HTTPError as e:
        logger.exception("Cal proxy error", extra={"error": str(e)})
        return _error(502, "Failed to process request")
