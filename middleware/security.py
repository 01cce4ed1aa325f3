"""
Security middleware: per-client rate limiting, response hardening headers,
CORS and trusted hosts.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
import time
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional

from core.logger import logger

MINUTE = 60
HOUR = 3600


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiting per client IP."""

    def __init__(self, app, requests_per_minute: int = 120, requests_per_hour: int = 3000):
        """
        Args:
            app: FastAPI application
            requests_per_minute: Max requests per minute per IP (0 disables)
            requests_per_hour: Max requests per hour per IP (0 disables)
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.history: Dict[str, Deque[float]] = defaultdict(deque)
        self.cleanup_interval = 300  # Drop idle clients every 5 minutes
        self.last_cleanup = time.time()

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"
        now = time.time()

        if now - self.last_cleanup > self.cleanup_interval:
            self._cleanup(now)
            self.last_cleanup = now

        if not self.allow(client_ip, now):
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Rate limit exceeded. Please try again later."},
                headers={"Retry-After": str(MINUTE)}
            )

        return await call_next(request)

    def allow(self, client_ip: str, now: float) -> bool:
        """Record the request if both windows have room."""
        hits = self.history[client_ip]
        while hits and now - hits[0] >= HOUR:
            hits.popleft()

        if self.requests_per_hour and len(hits) >= self.requests_per_hour:
            return False
        if self.requests_per_minute:
            last_minute = sum(1 for t in hits if now - t < MINUTE)
            if last_minute >= self.requests_per_minute:
                return False

        hits.append(now)
        return True

    def _cleanup(self, now: float):
        for ip in list(self.history):
            hits = self.history[ip]
            if not hits or now - hits[-1] >= HOUR:
                del self.history[ip]


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses. Record data must not be cached by intermediaries."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"
        return response


def setup_cors(app, allowed_origins: List[str], allow_credentials: bool = True,
               allowed_methods: Optional[List[str]] = None):
    """
    Setup CORS middleware.

    Args:
        app: FastAPI application
        allowed_origins: List of allowed origins
        allow_credentials: Whether browsers may send credentials
        allowed_methods: List of allowed HTTP methods
    """
    if allowed_methods is None:
        allowed_methods = ["GET", "POST", "PATCH", "DELETE", "OPTIONS", "HEAD"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allow_credentials,
        allow_methods=allowed_methods,
        allow_headers=["Authorization", "Content-Type"],
    )


def setup_trusted_hosts(app, allowed_hosts: List[str]):
    """Reject requests whose Host header is not in allowed_hosts."""
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)
