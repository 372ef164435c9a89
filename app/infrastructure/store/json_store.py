from __future__ import annotations

import json
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from app.application.ports.lead_store import LeadStorePort
from app.domain.entities.lead import LeadRecord


class JsonLeadStore(LeadStorePort):
    def __init__(self, data_dir: str = "./data/leads") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _get_file_path(self, lead_id: str) -> Path:
        return self._data_dir / f"{lead_id}.json"

    def _save_data(self, lead_id: str, data: dict[str, Any]) -> None:
        """Save lead data to JSON file atomically."""
        file_path = self._get_file_path(lead_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _serialize_lead(self, lead: LeadRecord) -> dict[str, Any]:
        return {
            "name": lead.name,
            "email": lead.email,
            "service_interest": lead.service_interest,
            "message": lead.message,
            "source": lead.source,
            "status": lead.status,
            "created_at": lead.created_at.isoformat(),
        }

    def _deserialize_lead(self, data: dict[str, Any]) -> LeadRecord:
        lead = LeadRecord(
            name=data.get("name", ""),
            email=data.get("email", ""),
            service_interest=data.get("service_interest"),
            message=data.get("message"),
            source=data.get("source", "booking"),
            status=data.get("status", "new"),
        )
        if data.get("created_at"):
            lead = replace(lead, created_at=datetime.fromisoformat(data["created_at"]))
        return lead

    def save_lead(self, lead: LeadRecord) -> None:
        lead_id = f"{lead.created_at:%Y%m%dT%H%M%S}_{uuid.uuid4().hex[:8]}"
        with self._lock:
            self._save_data(lead_id, self._serialize_lead(lead))

    def list_leads(self) -> list[LeadRecord]:
        """Read back stored leads, oldest first. Unreadable files are skipped."""
        leads: list[LeadRecord] = []
        for file_path in sorted(self._data_dir.glob("*.json")):
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    leads.append(self._deserialize_lead(json.load(f)))
            except (json.JSONDecodeError, OSError, KeyError, ValueError):
                continue
        return leads
