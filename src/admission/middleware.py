"""Admission middleware — applies the limiter in front of guarded routes.

Requests are keyed by client address and the configured prefix they match.
Paths outside every prefix pass through uncounted. A rejected request never
reaches its route handler.
"""

from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse, Response

from admission.limiter import FixedWindowLimiter
from commerce.errors import RateLimited

REJECTION_MESSAGE = "Too many requests. Please try again later."


def client_address(request: Request) -> str:
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


def match_prefix(path: str, prefixes) -> str | None:
    """Longest configured prefix that ``path`` falls under, on segment boundaries."""
    matches = [p for p in prefixes if path == p or path.startswith(p.rstrip("/") + "/")]
    return max(matches, key=len) if matches else None


class AdmissionMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: FixedWindowLimiter, prefixes):
        super().__init__(app)
        self.limiter = limiter
        self.prefixes = tuple(prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        prefix = match_prefix(request.url.path, self.prefixes)
        if prefix is None:
            return await call_next(request)

        try:
            self.limiter.enforce(f"{client_address(request)}:{prefix}")
        except RateLimited as exc:
            return PlainTextResponse(exc.message or REJECTION_MESSAGE, status_code=429)

        return await call_next(request)
