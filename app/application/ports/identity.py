from abc import ABC, abstractmethod

from app.domain.entities.attendee import Identity


class IdentityPort(ABC):
    @abstractmethod
    def current_identity(self) -> Identity | None:
        """Return the signed-in visitor, or None for anonymous visitors."""
        raise NotImplementedError
