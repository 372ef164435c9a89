from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from app.application.use_cases.booking_orchestrator import BookingOrchestrator

TriggerCallback = Callable[[str | None], None]
OrchestratorFactory = Callable[[str | None], BookingOrchestrator]


class BookingTrigger:
    """Explicit publish/subscribe channel for "open the booking widget" requests.

    Any CTA that wants the widget calls `fire(service_interest)`; hosts
    subscribe and get back an unsubscribe callable.
    """

    def __init__(self) -> None:
        self._subscribers: list[TriggerCallback] = []

    def subscribe(self, callback: TriggerCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def fire(self, service_interest: str | None = None) -> None:
        for callback in list(self._subscribers):
            callback(service_interest)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


class BookingModal:
    """Open/close state of the booking widget host.

    Opening mounts a fresh orchestrator; closing unmounts it so that any
    in-flight availability fetch is dropped when it lands.
    """

    def __init__(self, orchestrator_factory: OrchestratorFactory) -> None:
        self._factory = orchestrator_factory
        self._orchestrator: BookingOrchestrator | None = None
        self._service_interest: str | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_open(self) -> bool:
        return self._orchestrator is not None

    @property
    def service_interest(self) -> str | None:
        return self._service_interest

    @property
    def orchestrator(self) -> BookingOrchestrator | None:
        return self._orchestrator

    def open(self, service_interest: str | None = None) -> None:
        self._service_interest = service_interest
        if self._orchestrator is None:
            self._orchestrator = self._factory(service_interest)
            self._logger.info("Booking widget opened", extra={"service": service_interest})
        else:
            self._orchestrator.service_interest = service_interest

    def close(self) -> None:
        if self._orchestrator is not None:
            self._orchestrator.close()
            self._logger.info("Booking widget closed")
        self._orchestrator = None
        self._service_interest = None

    def toggle(self) -> None:
        if self.is_open:
            self.close()
        else:
            self.open()

    def listen(self, trigger: BookingTrigger) -> Callable[[], None]:
        return trigger.subscribe(self.open)

    async def ready(self) -> None:
        """Load the first month for a freshly opened widget."""
        if self._orchestrator is not None and self._orchestrator.visible_month is None:
            await self._orchestrator.show_current_month()


@dataclass
class BookingSession:
    """One visitor's booking host: the trigger CTAs publish to and the modal listening on it."""

    session_id: str
    trigger: BookingTrigger
    modal: BookingModal
    _unsubscribe: Callable[[], None] | None = field(default=None, repr=False)

    @classmethod
    def create(cls, session_id: str, orchestrator_factory: OrchestratorFactory) -> "BookingSession":
        trigger = BookingTrigger()
        modal = BookingModal(orchestrator_factory)
        session = cls(session_id=session_id, trigger=trigger, modal=modal)
        session._unsubscribe = modal.listen(trigger)
        return session

    def dispose(self) -> None:
        self.modal.close()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
