"""Rate limiting configuration."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def _get_real_client_ip(request: Request) -> str:
    """Extract real client IP, respecting X-Forwarded-For from the reverse proxy.

    Kiosks sit behind the office proxy, so the first forwarded address is
    what identifies an individual join terminal.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=_get_real_client_ip)
