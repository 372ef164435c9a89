from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"

    # Provider-fronting proxy the booking widget talks to
    CAL_PROXY_URL: str | None = None
    CAL_PROXY_TOKEN: str | None = None
    CAL_EVENT_TYPE_SLUG: str = "15min"
    CAL_EVENT_TYPE_ID: int | None = None
    CAL_USERNAME: str | None = None
    GATEWAY_TIMEOUT_SECONDS: float = 10.0

    # Upstream Cal.com credentials used by the proxy itself
    CAL_COM_API_KEY: str | None = None
    CAL_COM_BASE_URL: str = "https://api.cal.com/v2"
    CAL_COM_API_VERSION: str = "2024-08-13"

    EXTERNAL_BOOKING_URL: str = "https://cal.com/axrategy/15min"

    LEAD_STORE_PROVIDER: str = "memory"  # "memory", "json", "supabase"
    LEAD_STORE_DIR: str = "./data/leads"
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    LEADS_TABLE: str = "leads"

    BOOKING_SESSION_LIMIT: int = 500
    # Comma-separated browser origins allowed to call the API; "*" allows any
    CORS_ALLOW_ORIGINS: str = "*"


settings = Settings()
