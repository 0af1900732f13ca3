import os

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

TRIAGE_RATE_LIMIT = (os.getenv("TRIAGE_RATE_LIMIT") or "30/minute").strip()


def user_rate_key(request: Request) -> str:
    """Return a per-user key when available; otherwise fall back to IP.

    get_current_user sets request.state.user_id on authenticated routes.
    """
    uid = getattr(request.state, "user_id", None)
    if uid:
        return str(uid)
    return get_remote_address(request)


limiter = Limiter(key_func=get_remote_address, default_limits=[])


__all__ = ["limiter", "user_rate_key", "TRIAGE_RATE_LIMIT"]
