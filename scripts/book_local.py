#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py

What it does:
- Opens one booking widget through the same wiring the API uses
- Walks the date -> time -> form -> confirm flow from typed commands
- Prints the current step, the calendar or time grid, and any error
"""

from __future__ import annotations

import asyncio
import os
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.use_cases.booking_modal import BookingSession  # noqa: E402
from app.application.use_cases.booking_orchestrator import BookingOrchestrator  # noqa: E402
from app.application.utils.date_utils import shift_month  # noqa: E402
from app.wiring.dependencies import build_orchestrator_factory, get_lead_capture  # noqa: E402


def _print_header() -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print("Commands: /next, /prev, /date YYYY-MM-DD, /time N,")
    print("          /book NAME | EMAIL [| NOTES], /back, /reset, /quit, /help")
    print("-" * 60)


def _print_calendar(orchestrator: BookingOrchestrator) -> None:
    view = orchestrator.calendar_view()
    print(f"\n{view.month_label}")
    if view.advisory:
        print(f"! {view.advisory}")
        print(f"  {view.external_booking_url}")
    open_days = [str(d.day) for d in view.days if d.has_availability]
    print("Days with availability:", ", ".join(open_days) if open_days else "(none)")


def _print_times(orchestrator: BookingOrchestrator) -> list:
    view = orchestrator.time_grid_view()
    if view is None:
        return []
    print(f"\n{view.date_label} ({view.time_zone})")
    ordered = []
    for period, slots in (("Morning", view.morning), ("Afternoon", view.afternoon), ("Evening", view.evening)):
        if not slots:
            continue
        print(f"  {period}:")
        for slot in slots:
            ordered.append(slot.start)
            print(f"    [{len(ordered)}] {slot.label}")
    if not ordered:
        print("  No available times for this date.")
    return ordered


def _print_state(orchestrator: BookingOrchestrator) -> list:
    snapshot = orchestrator.snapshot()
    print(f"\nstep: {snapshot.step}")
    if snapshot.error:
        print(f"error: {snapshot.error}")
    for field_name, message in snapshot.field_errors.items():
        print(f"  {field_name}: {message}")

    if snapshot.step == "date":
        _print_calendar(orchestrator)
    elif snapshot.step == "time":
        return _print_times(orchestrator)
    elif snapshot.step == "form":
        form = orchestrator.form_view()
        if form is not None:
            print(f"Booking {form.date_label} at {form.time_label}")
    elif snapshot.step == "confirm":
        confirmation = orchestrator.confirmation_view()
        if confirmation is not None:
            print(f"You're booked! {confirmation.date_label}, {confirmation.time_label} - {confirmation.end_label}")
            print(f"Reference: {confirmation.booking.uid}")
    return []


async def main() -> None:
    time_zone = os.getenv("BOOKING_TIME_ZONE")
    session = BookingSession.create("local", build_orchestrator_factory(time_zone))
    session.trigger.fire(os.getenv("BOOKING_SERVICE_INTEREST"))
    await session.modal.ready()
    orchestrator = session.modal.orchestrator
    assert orchestrator is not None

    _print_header()
    shown_times = _print_state(orchestrator)

    while True:
        try:
            line = (await asyncio.to_thread(input, "\n> ")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if not line:
            continue
        cmd, _, arg = line.partition(" ")
        cmd = cmd.lower()

        if cmd in ("/quit", "/exit"):
            print("Bye!")
            break
        if cmd == "/help":
            _print_header()
            continue

        if cmd in ("/next", "/prev"):
            year, month = orchestrator.visible_month or (date.today().year, date.today().month)
            year, month = shift_month(year, month, 1 if cmd == "/next" else -1)
            if not await orchestrator.change_month(year, month) and orchestrator.visible_month != (year, month):
                print("Cannot show that month.")
        elif cmd == "/date":
            try:
                if not orchestrator.select_date(date.fromisoformat(arg.strip())):
                    print("Date not accepted.")
            except ValueError:
                print("Use /date YYYY-MM-DD")
        elif cmd == "/time":
            try:
                slot = shown_times[int(arg) - 1]
            except (ValueError, IndexError):
                print("Use /time N with a number from the list")
                continue
            orchestrator.select_time(slot)
        elif cmd == "/book":
            parts = [p.strip() for p in arg.split("|")]
            name = parts[0] if parts else ""
            email = parts[1] if len(parts) > 1 else ""
            notes = parts[2] if len(parts) > 2 else None
            await orchestrator.submit_form(name=name, email=email, notes=notes)
        elif cmd == "/back":
            orchestrator.go_back()
        elif cmd == "/reset":
            orchestrator.reset()
        else:
            print("Unknown command. Type /help.")
            continue

        shown_times = _print_state(orchestrator)

    session.dispose()
    await get_lead_capture().wait_idle()


if __name__ == "__main__":
    asyncio.run(main())
