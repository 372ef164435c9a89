from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# Hour-of-day buckets used by the time grid: (label, start_hour, end_hour)
DAY_PERIODS = (
    ("morning", 0, 12),
    ("afternoon", 12, 17),
    ("evening", 17, 24),
)

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def safe_timezone(name: str | None, fallback: str = "UTC") -> ZoneInfo:
    if name:
        try:
            return ZoneInfo(name)
        except Exception:
            logger.warning("Unknown timezone, using fallback", extra={"reason": name})
    return ZoneInfo(fallback)


def month_range(year: int, month: int, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """First instant and last instant (end of day, inclusive) of a month in `tz`."""
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=tz)
    end = datetime.combine(date(year, month, last_day), time.max, tzinfo=tz)
    return start, end


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def is_before_month(year: int, month: int, reference: date) -> bool:
    return (year, month) < (reference.year, reference.month)


def to_utc_iso(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def period_for(slot: datetime, tz: ZoneInfo) -> str:
    hour = slot.astimezone(tz).hour
    for label, start_hour, end_hour in DAY_PERIODS:
        if start_hour <= hour < end_hour:
            return label
    return DAY_PERIODS[-1][0]


def group_slots_by_period(slots: list[datetime], tz: ZoneInfo) -> dict[str, list[datetime]]:
    """Bucket slots into morning/afternoon/evening in `tz`, chronological within each bucket."""
    grouped: dict[str, list[datetime]] = {label: [] for label, _, _ in DAY_PERIODS}
    for slot in sorted(slots):
        grouped[period_for(slot, tz)].append(slot)
    return grouped


def format_time_label(value: datetime, tz: ZoneInfo) -> str:
    return value.astimezone(tz).strftime("%I:%M %p").lstrip("0")


def format_date_label(value: date, include_year: bool = False) -> str:
    label = f"{value:%A, %B} {value.day}"
    if include_year:
        label = f"{label}, {value.year}"
    return label
