import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.booking import router as booking_router
from app.api.cal_proxy import router as cal_proxy_router
from app.core.config import settings
from app.wiring.dependencies import (
    get_cal_com_client,
    get_lead_capture,
    get_scheduling_gateway,
    get_session_store,
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("session_id", "step", "action", "booking_uid", "status", "service", "error", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    get_session_store().clear()
    await get_lead_capture().wait_idle()
    await get_scheduling_gateway().aclose()
    client = get_cal_com_client()
    if client is not None:
        await client.aclose()


app = FastAPI(title="Discovery Call Booking", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ALLOW_ORIGINS.split(",") if origin.strip()],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)

app.include_router(booking_router, tags=["booking"])
app.include_router(cal_proxy_router, tags=["cal-proxy"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
