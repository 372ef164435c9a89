"""
Tests for lead persistence backends.
"""

from __future__ import annotations

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from app.domain.entities.lead import LeadRecord
from app.infrastructure.store.json_store import JsonLeadStore
from app.infrastructure.store.memory_store import MemoryLeadStore
from app.infrastructure.store.supabase_store import SupabaseLeadStore


def test_json_store_persistence():
    """Test that JSON store persists and retrieves leads correctly."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonLeadStore(data_dir=tmpdir)
        created_at = datetime(2025, 6, 10, 14, 0, tzinfo=timezone.utc)

        store.save_lead(
            LeadRecord(
                name="Jane Doe",
                email="jane@co.com",
                service_interest="crm-setup",
                message="Call me",
                created_at=created_at,
            )
        )

        # Retrieve with a fresh store instance
        leads = JsonLeadStore(data_dir=tmpdir).list_leads()

        assert len(leads) == 1
        assert leads[0].name == "Jane Doe"
        assert leads[0].service_interest == "crm-setup"
        assert leads[0].message == "Call me"
        assert leads[0].source == "booking"
        assert leads[0].status == "new"
        assert leads[0].created_at == created_at


def test_json_store_writes_one_file_per_lead():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonLeadStore(data_dir=tmpdir)

        store.save_lead(LeadRecord(name="A", email="a@b.com"))
        store.save_lead(LeadRecord(name="B", email="b@b.com"))

        files = list(Path(tmpdir).glob("*.json"))
        assert len(files) == 2
        assert not list(Path(tmpdir).glob("*.tmp"))
        assert {lead.name for lead in store.list_leads()} == {"A", "B"}


def test_json_store_skips_corrupt_files():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonLeadStore(data_dir=tmpdir)
        store.save_lead(LeadRecord(name="A", email="a@b.com"))
        (Path(tmpdir) / "broken.json").write_text("{not json", encoding="utf-8")

        leads = store.list_leads()

        assert [lead.name for lead in leads] == ["A"]


def test_json_store_file_contents():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonLeadStore(data_dir=tmpdir)
        store.save_lead(LeadRecord(name="A", email="a@b.com"))

        (file_path,) = Path(tmpdir).glob("*.json")
        data = json.loads(file_path.read_text(encoding="utf-8"))

        assert data["email"] == "a@b.com"
        assert data["service_interest"] is None
        assert "created_at" in data


def test_memory_store_keeps_most_recent():
    store = MemoryLeadStore(limit=2)

    for name in ("A", "B", "C"):
        store.save_lead(LeadRecord(name=name, email=f"{name.lower()}@b.com"))

    assert [lead.name for lead in store.list_leads()] == ["B", "C"]


def test_supabase_store_inserts_row():
    client = MagicMock()
    store = SupabaseLeadStore(client=client, table="leads")

    store.save_lead(LeadRecord(name="A", email="a@b.com", service_interest="crm-setup", message="Hi"))

    client.table.assert_called_once_with("leads")
    client.table.return_value.insert.assert_called_once_with(
        {
            "name": "A",
            "email": "a@b.com",
            "service_interest": "crm-setup",
            "message": "Hi",
            "source": "booking",
            "status": "new",
        }
    )
    client.table.return_value.insert.return_value.execute.assert_called_once()


def test_supabase_store_propagates_insert_errors():
    client = MagicMock()
    client.table.return_value.insert.return_value.execute.side_effect = RuntimeError("permission denied")
    store = SupabaseLeadStore(client=client)

    with pytest.raises(RuntimeError):
        store.save_lead(LeadRecord(name="A", email="a@b.com"))


def test_supabase_store_requires_credentials(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_KEY", None)

    with pytest.raises(ValueError):
        SupabaseLeadStore()
