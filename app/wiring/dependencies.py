from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.identity import IdentityPort
from app.application.ports.lead_store import LeadStorePort
from app.application.ports.scheduling_gateway import SchedulingGatewayPort
from app.application.use_cases.booking_modal import BookingSession, OrchestratorFactory
from app.application.use_cases.booking_orchestrator import BookingOrchestrator
from app.application.use_cases.lead_capture import LeadCaptureUseCase
from app.application.utils.date_utils import safe_timezone
from app.infrastructure.calendar.cal_com_client import CalComClient
from app.infrastructure.calendar.cal_proxy_gateway import CalProxyGateway
from app.infrastructure.calendar.mock_calendar import MockSchedulingGateway
from app.infrastructure.identity.static_identity import AnonymousIdentity
from app.infrastructure.store.json_store import JsonLeadStore
from app.infrastructure.store.memory_store import MemoryBookingSessionStore, MemoryLeadStore


_session_store: MemoryBookingSessionStore | None = None


@lru_cache
def get_scheduling_gateway() -> SchedulingGatewayPort:
    if not settings.CAL_PROXY_URL or settings.ENV.lower() in {"dev", "local"}:
        return MockSchedulingGateway(timezone=safe_timezone(settings.BUSINESS_TIMEZONE))
    return CalProxyGateway()


@lru_cache
def get_lead_store() -> LeadStorePort:
    provider = settings.LEAD_STORE_PROVIDER.lower()
    if provider == "json":
        return JsonLeadStore(data_dir=settings.LEAD_STORE_DIR)
    if provider == "supabase":
        from app.infrastructure.store.supabase_store import SupabaseLeadStore

        return SupabaseLeadStore()
    return MemoryLeadStore()


@lru_cache
def get_lead_capture() -> LeadCaptureUseCase:
    return LeadCaptureUseCase(store=get_lead_store())


def get_identity() -> IdentityPort:
    return AnonymousIdentity()


def get_session_store() -> MemoryBookingSessionStore:
    global _session_store
    if _session_store is None:
        _session_store = MemoryBookingSessionStore(limit=settings.BOOKING_SESSION_LIMIT)
    return _session_store


@lru_cache
def get_cal_com_client() -> CalComClient | None:
    if not settings.CAL_COM_API_KEY:
        return None
    return CalComClient()


def build_orchestrator_factory(time_zone: str | None = None) -> OrchestratorFactory:
    tz = safe_timezone(time_zone, fallback=settings.BUSINESS_TIMEZONE)
    gateway = get_scheduling_gateway()
    lead_capture = get_lead_capture()
    identity = get_identity()

    def factory(service_interest: str | None) -> BookingOrchestrator:
        return BookingOrchestrator(
            gateway=gateway,
            lead_capture=lead_capture,
            timezone=tz,
            external_booking_url=settings.EXTERNAL_BOOKING_URL,
            identity=identity,
            service_interest=service_interest,
        )

    return factory


def get_session_factory():
    """Dependency returning a callable that builds a new BookingSession for a visitor."""
    logger = logging.getLogger(__name__)

    def create_session(session_id: str, time_zone: str | None) -> BookingSession:
        logger.info("Booking session created", extra={"session_id": session_id})
        return BookingSession.create(session_id, build_orchestrator_factory(time_zone))

    return create_session
