from __future__ import annotations

import re

from app.domain.entities.attendee import Attendee, AttendeeValidation, InvalidAttendee, ValidAttendee

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_attendee(name: str | None, email: str | None, time_zone: str | None) -> AttendeeValidation:
    """Boundary check for booking attendees: required fields and a well-formed email, nothing deeper."""
    errors: dict[str, str] = {}

    clean_name = (name or "").strip()
    clean_email = (email or "").strip()
    clean_tz = (time_zone or "").strip()

    if not clean_name:
        errors["name"] = "Name is required"
    if not clean_email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(clean_email):
        errors["email"] = "Enter a valid email address"
    if not clean_tz:
        errors["time_zone"] = "Time zone is required"

    if errors:
        return InvalidAttendee(field_errors=errors)
    return ValidAttendee(attendee=Attendee(name=clean_name, email=clean_email, time_zone=clean_tz))
