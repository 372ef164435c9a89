from datetime import date

from app.domain.entities.availability import AvailabilityCache

from conftest import utc


def test_unknown_date_reads_as_empty():
    cache = AvailabilityCache()

    assert cache.slots_for(date(2025, 6, 10)) == []
    assert cache.has_availability(date(2025, 6, 10)) is False
    assert cache.is_known(date(2025, 6, 10)) is False


def test_upsert_overwrites_whole_date():
    cache = AvailabilityCache()
    day = date(2025, 6, 10)
    cache.upsert({day: [utc(2025, 6, 10, 9), utc(2025, 6, 10, 10)]})

    cache.upsert({day: [utc(2025, 6, 10, 15)]})

    assert cache.slots_for(day) == [utc(2025, 6, 10, 15)]


def test_upsert_keeps_other_dates():
    cache = AvailabilityCache()
    cache.upsert({date(2025, 6, 10): [utc(2025, 6, 10, 9)]})

    cache.upsert({date(2025, 7, 1): [utc(2025, 7, 1, 9)]})

    assert cache.has_availability(date(2025, 6, 10))
    assert cache.has_availability(date(2025, 7, 1))
    assert len(cache) == 2


def test_checked_date_without_slots():
    cache = AvailabilityCache()
    cache.upsert({date(2025, 6, 11): []})

    assert cache.is_known(date(2025, 6, 11)) is True
    assert cache.has_availability(date(2025, 6, 11)) is False


def test_provider_order_is_kept_and_reads_are_copies():
    cache = AvailabilityCache()
    slots = [utc(2025, 6, 10, 14), utc(2025, 6, 10, 9)]
    cache.upsert({date(2025, 6, 10): slots})

    read = cache.slots_for(date(2025, 6, 10))
    read.clear()
    slots.clear()

    assert cache.slots_for(date(2025, 6, 10)) == [utc(2025, 6, 10, 14), utc(2025, 6, 10, 9)]
