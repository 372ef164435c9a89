from __future__ import annotations

from app.application.ports.identity import IdentityPort
from app.domain.entities.attendee import Identity


class AnonymousIdentity(IdentityPort):
    def current_identity(self) -> Identity | None:
        return None


class StaticIdentity(IdentityPort):
    def __init__(self, name: str | None = None, email: str | None = None) -> None:
        self._identity = Identity(name=name, email=email)

    def current_identity(self) -> Identity | None:
        return self._identity
