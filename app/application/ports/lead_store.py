from abc import ABC, abstractmethod

from app.domain.entities.lead import LeadRecord


class LeadStorePort(ABC):
    @abstractmethod
    def save_lead(self, lead: LeadRecord) -> None:
        """Persist a CRM lead. May raise; callers decide how much a failure matters."""
        raise NotImplementedError
