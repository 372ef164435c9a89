from __future__ import annotations

from enum import Enum


class GatewayFailureMode(str, Enum):
    UNAVAILABLE = "unavailable"
    REJECTED = "rejected"


class GatewayError(RuntimeError):
    """Base for scheduling gateway failures. `mode` tells callers how far the failure reaches."""

    mode: GatewayFailureMode = GatewayFailureMode.UNAVAILABLE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SchedulingUnavailableError(GatewayError):
    """Raised when the provider or proxy cannot be reached, is misconfigured, or answers malformed data."""

    mode = GatewayFailureMode.UNAVAILABLE


class BookingRejectedError(GatewayError):
    """Raised when the provider refuses a specific booking with a reason (e.g. slot taken)."""

    mode = GatewayFailureMode.REJECTED
