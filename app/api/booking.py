from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.schemas import (
    BookingFormSchema,
    DateRequestSchema,
    MonthRequestSchema,
    OpenSessionRequestSchema,
    SessionResponseSchema,
    TimeRequestSchema,
    TriggerRequestSchema,
)
from app.application.dto.booking_views import CalendarView, ConfirmationView, FormView, TimeGridView
from app.application.use_cases.booking_modal import BookingSession
from app.application.use_cases.booking_orchestrator import BookingOrchestrator
from app.infrastructure.store.memory_store import MemoryBookingSessionStore
from app.wiring.dependencies import get_session_factory, get_session_store


router = APIRouter(prefix="/booking")
logger = logging.getLogger(__name__)


def _session_view(session: BookingSession) -> SessionResponseSchema:
    orchestrator = session.modal.orchestrator
    return SessionResponseSchema(
        session_id=session.session_id,
        is_open=session.modal.is_open,
        service_interest=session.modal.service_interest,
        booking=orchestrator.snapshot() if orchestrator is not None else None,
    )


def get_session(
    session_id: str,
    store: MemoryBookingSessionStore = Depends(get_session_store),
) -> BookingSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return session


def get_open_orchestrator(session: BookingSession = Depends(get_session)) -> BookingOrchestrator:
    orchestrator = session.modal.orchestrator
    if orchestrator is None:
        raise HTTPException(status_code=409, detail="Booking widget is closed")
    return orchestrator


@router.post("/sessions", response_model=SessionResponseSchema, status_code=201)
async def open_session(
    req: OpenSessionRequestSchema,
    store: MemoryBookingSessionStore = Depends(get_session_store),
    create_session: Callable[[str, str | None], BookingSession] = Depends(get_session_factory),
) -> SessionResponseSchema:
    session = create_session(store.new_session_id(), req.time_zone)
    store.add(session)
    session.trigger.fire(req.service_interest)
    await session.modal.ready()
    return _session_view(session)


@router.get("/sessions/{session_id}", response_model=SessionResponseSchema)
async def read_session(session: BookingSession = Depends(get_session)) -> SessionResponseSchema:
    return _session_view(session)


@router.post("/sessions/{session_id}/open", response_model=SessionResponseSchema)
async def trigger_open(
    req: TriggerRequestSchema,
    session: BookingSession = Depends(get_session),
) -> SessionResponseSchema:
    session.trigger.fire(req.service_interest)
    await session.modal.ready()
    return _session_view(session)


@router.post("/sessions/{session_id}/close", response_model=SessionResponseSchema)
async def close_widget(session: BookingSession = Depends(get_session)) -> SessionResponseSchema:
    session.modal.close()
    return _session_view(session)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session: BookingSession = Depends(get_session),
    store: MemoryBookingSessionStore = Depends(get_session_store),
) -> Response:
    store.remove(session.session_id)
    logger.info("Booking session removed", extra={"session_id": session.session_id})
    return Response(status_code=204)


@router.get("/sessions/{session_id}/calendar", response_model=CalendarView)
async def read_calendar(orchestrator: BookingOrchestrator = Depends(get_open_orchestrator)) -> CalendarView:
    return orchestrator.calendar_view()


@router.post("/sessions/{session_id}/month", response_model=CalendarView)
async def change_month(
    req: MonthRequestSchema,
    orchestrator: BookingOrchestrator = Depends(get_open_orchestrator),
) -> CalendarView:
    await orchestrator.change_month(req.year, req.month)
    return orchestrator.calendar_view()


@router.post("/sessions/{session_id}/date", response_model=SessionResponseSchema)
async def select_date(
    req: DateRequestSchema,
    session: BookingSession = Depends(get_session),
    orchestrator: BookingOrchestrator = Depends(get_open_orchestrator),
) -> SessionResponseSchema:
    orchestrator.select_date(req.date)
    return _session_view(session)


@router.get("/sessions/{session_id}/times", response_model=TimeGridView)
async def read_times(orchestrator: BookingOrchestrator = Depends(get_open_orchestrator)) -> TimeGridView:
    view = orchestrator.time_grid_view()
    if view is None:
        raise HTTPException(status_code=409, detail="No date selected")
    return view


@router.post("/sessions/{session_id}/time", response_model=SessionResponseSchema)
async def select_time(
    req: TimeRequestSchema,
    session: BookingSession = Depends(get_session),
    orchestrator: BookingOrchestrator = Depends(get_open_orchestrator),
) -> SessionResponseSchema:
    orchestrator.select_time(req.time)
    return _session_view(session)


@router.get("/sessions/{session_id}/form", response_model=FormView)
async def read_form(orchestrator: BookingOrchestrator = Depends(get_open_orchestrator)) -> FormView:
    view = orchestrator.form_view()
    if view is None:
        raise HTTPException(status_code=409, detail="No time selected")
    return view


@router.post("/sessions/{session_id}/form", response_model=SessionResponseSchema)
async def submit_form(
    req: BookingFormSchema,
    session: BookingSession = Depends(get_session),
    orchestrator: BookingOrchestrator = Depends(get_open_orchestrator),
) -> SessionResponseSchema:
    await orchestrator.submit_form(
        name=req.name,
        email=req.email,
        notes=req.notes,
        service_interest=req.service_interest,
    )
    return _session_view(session)


@router.get("/sessions/{session_id}/confirmation", response_model=ConfirmationView)
async def read_confirmation(orchestrator: BookingOrchestrator = Depends(get_open_orchestrator)) -> ConfirmationView:
    view = orchestrator.confirmation_view()
    if view is None:
        raise HTTPException(status_code=409, detail="No confirmed booking")
    return view


@router.post("/sessions/{session_id}/back", response_model=SessionResponseSchema)
async def go_back(
    session: BookingSession = Depends(get_session),
    orchestrator: BookingOrchestrator = Depends(get_open_orchestrator),
) -> SessionResponseSchema:
    orchestrator.go_back()
    return _session_view(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionResponseSchema)
async def reset(
    session: BookingSession = Depends(get_session),
    orchestrator: BookingOrchestrator = Depends(get_open_orchestrator),
) -> SessionResponseSchema:
    orchestrator.reset()
    return _session_view(session)
