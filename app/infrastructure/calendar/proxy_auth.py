from __future__ import annotations

import hmac
import logging


logger = logging.getLogger(__name__)


def verify_bearer(authorization: str | None, expected_token: str | None, env: str) -> bool:
    """Check the proxy's bearer credential. An unset token leaves the proxy open (dev setups)."""
    if not expected_token:
        if env.lower() not in {"dev", "local"}:
            logger.warning("CAL_PROXY_TOKEN not set; cal-proxy accepts unauthenticated calls")
        return True

    if not authorization:
        return False

    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        return False

    if scheme.lower() != "bearer":
        return False

    return hmac.compare_digest(token.strip().encode("utf-8"), expected_token.encode("utf-8"))
