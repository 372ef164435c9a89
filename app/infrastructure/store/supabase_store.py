from __future__ import annotations

import logging

from supabase import Client, create_client

from app.application.ports.lead_store import LeadStorePort
from app.core.config import settings
from app.domain.entities.lead import LeadRecord


class SupabaseLeadStore(LeadStorePort):
    """Writes leads into the CRM's Supabase `leads` table."""

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        table: str | None = None,
        client: Client | None = None,
    ) -> None:
        self._table = table or settings.LEADS_TABLE
        self._logger = logging.getLogger(__name__)

        if client is not None:
            self._client = client
            return

        url = url or settings.SUPABASE_URL
        key = key or settings.SUPABASE_KEY
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the Supabase lead store")
        self._client = create_client(url, key)

    def save_lead(self, lead: LeadRecord) -> None:
        row = {
            "name": lead.name,
            "email": lead.email,
            "service_interest": lead.service_interest,
            "message": lead.message,
            "source": lead.source,
            "status": lead.status,
        }
        self._client.table(self._table).insert(row).execute()
        self._logger.info("Lead inserted", extra={"reason": self._table})
