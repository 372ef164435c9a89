from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Attendee:
    name: str
    email: str
    time_zone: str  # IANA name, e.g. "America/Los_Angeles"


@dataclass(frozen=True)
class ValidAttendee:
    attendee: Attendee
    is_valid: bool = True


@dataclass(frozen=True)
class InvalidAttendee:
    field_errors: dict[str, str] = field(default_factory=dict)
    is_valid: bool = False


AttendeeValidation = ValidAttendee | InvalidAttendee


@dataclass(frozen=True)
class Identity:
    """Signed-in visitor details supplied by the identity collaborator."""

    name: str | None = None
    email: str | None = None
