from app.application.use_cases.booking_modal import BookingSession
from app.application.use_cases.booking_orchestrator import BookingOrchestrator
from app.infrastructure.store.memory_store import MemoryBookingSessionStore

from conftest import TODAY, UTC, FakeGateway


def _open_session(session_id: str, lead_capture) -> BookingSession:
    def factory(service_interest):
        return BookingOrchestrator(
            gateway=FakeGateway(),
            lead_capture=lead_capture,
            timezone=UTC,
            external_booking_url="https://cal.example/15min",
            today=lambda: TODAY,
        )

    session = BookingSession.create(session_id, factory)
    session.trigger.fire(None)
    return session


def test_oldest_session_is_evicted_and_disposed(lead_capture):
    store = MemoryBookingSessionStore(limit=2)
    first = _open_session("s1", lead_capture)
    orchestrator = first.modal.orchestrator

    store.add(first)
    store.add(_open_session("s2", lead_capture))
    store.add(_open_session("s3", lead_capture))

    assert len(store) == 2
    assert store.get("s1") is None
    assert store.get("s3") is not None
    assert orchestrator.is_closed is True
    assert first.modal.is_open is False
    assert first.trigger.subscriber_count == 0


def test_recently_read_session_is_kept(lead_capture):
    store = MemoryBookingSessionStore(limit=2)
    store.add(_open_session("s1", lead_capture))
    store.add(_open_session("s2", lead_capture))

    store.get("s1")
    store.add(_open_session("s3", lead_capture))

    assert store.get("s1") is not None
    assert store.get("s2") is None


def test_remove_and_clear_dispose_sessions(lead_capture):
    store = MemoryBookingSessionStore()
    kept = _open_session("s1", lead_capture)
    store.add(kept)
    store.add(_open_session("s2", lead_capture))

    removed = store.remove("s2")
    store.clear()

    assert removed.modal.is_open is False
    assert kept.modal.is_open is False
    assert len(store) == 0
