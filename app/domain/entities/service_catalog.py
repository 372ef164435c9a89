from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceOption:
    value: str
    label: str


SERVICE_OPTIONS: tuple[ServiceOption, ...] = (
    ServiceOption(value="", label="Not sure yet"),
    ServiceOption(value="ai-assistants", label="AI That Answers For You"),
    ServiceOption(value="automation-systems", label="Automatic Follow-Ups"),
    ServiceOption(value="websites-landing-pages", label="A Website That Books Clients"),
    ServiceOption(value="app-development", label="Client Portal / App"),
    ServiceOption(value="crm-setup", label="CRM Setup"),
    ServiceOption(value="analytics-optimization", label="Analytics Setup"),
)


def normalize_service_interest(value: str | None) -> str | None:
    """Map blank or "not sure" selections to None."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
