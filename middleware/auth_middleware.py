"""
Authentication middleware to flag unauthenticated calls to protected routes.
This middleware provides an early check, but actual validation is done by FastAPI dependencies.
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import List

from core.logger import logger

# Public routes that don't require authentication (exact match)
PUBLIC_ROUTES: List[str] = [
    "/",
    "/health",
    "/api/auth/login",
    "/api/seed/status",
]

# Public route prefixes (API docs)
PUBLIC_PREFIXES: List[str] = [
    "/docs",
    "/openapi.json",
    "/redoc",
]


def is_public_path(path: str, public_routes: List[str] = None, public_prefixes: List[str] = None) -> bool:
    routes = PUBLIC_ROUTES if public_routes is None else public_routes
    prefixes = PUBLIC_PREFIXES if public_prefixes is None else public_prefixes
    normalized = path.rstrip("/") or "/"
    return normalized in routes or any(path.startswith(p) for p in prefixes)


class AuthRequiredMiddleware(BaseHTTPMiddleware):
    """
    Middleware to monitor authentication on all routes.

    This provides an early check for the Authorization header.
    Actual token validation is handled by FastAPI dependencies.
    """

    def __init__(self, app, public_routes: List[str] = None):
        """
        Initialize authentication middleware.

        Args:
            app: FastAPI application
            public_routes: List of public routes (paths) that don't require auth
        """
        super().__init__(app)
        self.public_routes = public_routes or PUBLIC_ROUTES

    async def dispatch(self, request: Request, call_next):
        """Process request with authentication check."""
        path = request.url.path

        if is_public_path(path, self.public_routes) or request.method == "OPTIONS":
            return await call_next(request)

        # Don't block here - let FastAPI dependencies return the proper 401/403
        if not request.headers.get("authorization"):
            client = request.client.host if request.client else "unknown"
            logger.warning(f"Request without authentication headers: {request.method} {path} from {client}")

        return await call_next(request)
