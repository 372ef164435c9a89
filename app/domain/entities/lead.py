from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class LeadRecord:
    name: str
    email: str
    service_interest: str | None = None
    message: str | None = None
    source: str = "booking"
    status: str = "new"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
