"""Security middleware and utilities for production deployment.

This module provides:
- Rate limiting for API endpoints
- Request size validation
- Security headers
- Per-IP WebSocket connection limiting
"""

import os
import time

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.config.server import WS_MAX_CONNECTIONS_PER_IP

# Configuration from environment
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
# A client auto-advancing every 500ms issues 120 requests per minute
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "600"))  # requests per window
RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))  # window in seconds

# Whitelist for internal/development IPs
IP_WHITELIST = set(filter(None, os.getenv("IP_WHITELIST", "127.0.0.1,::1").split(",")))


def get_client_ip(headers, client, trusted_proxies=frozenset()) -> str:
    """Return the peer address, or the forwarded client when the peer is a trusted proxy."""
    peer = client.host if client else "unknown"
    if peer not in trusted_proxies:
        return peer

    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        # First IP in the chain is the original client
        return forwarded_for.split(",")[0].strip()

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return peer


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiting middleware."""

    def __init__(
        self,
        app,
        requests_per_window: int = 600,
        window_seconds: int = 60,
        trusted_proxies: frozenset = frozenset(),
    ):
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds
        self.trusted_proxies = trusted_proxies
        self.request_counts: dict[str, list] = {}
        self._last_sweep = time.time()

    def _sweep(self, window_start: float) -> None:
        """Drop clients with no request inside the current window."""
        stale = [
            ip
            for ip, stamps in self.request_counts.items()
            if not stamps or stamps[-1] <= window_start
        ]
        for ip in stale:
            del self.request_counts[ip]

    def _is_rate_limited(self, client_ip: str) -> bool:
        """Check if client has exceeded rate limit."""
        if not RATE_LIMIT_ENABLED:
            return False

        if client_ip in IP_WHITELIST:
            return False

        current_time = time.time()
        window_start = current_time - self.window_seconds

        if current_time - self._last_sweep >= self.window_seconds:
            self._sweep(window_start)
            self._last_sweep = current_time

        recent = [ts for ts in self.request_counts.get(client_ip, ()) if ts > window_start]

        if len(recent) >= self.requests_per_window:
            self.request_counts[client_ip] = recent
            return True

        recent.append(current_time)
        self.request_counts[client_ip] = recent
        return False

    async def dispatch(self, request: Request, call_next):
        client_ip = get_client_ip(request.headers, request.client, self.trusted_proxies)

        # Skip rate limiting for health checks and WebSocket upgrades
        if request.url.path in ["/health", "/ws"]:
            return await call_next(request)

        if self._is_rate_limited(client_ip):
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": "Rate limit exceeded",
                    "message": f"Too many requests. Limit: {self.requests_per_window} per {self.window_seconds}s",
                    "retry_after": self.window_seconds,
                },
                headers={"Retry-After": str(self.window_seconds)},
            )

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Grid state changes on every call; never serve it from a cache
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
            response.headers["Pragma"] = "no-cache"

        return response


class RequestValidationMiddleware(BaseHTTPMiddleware):
    """Reject oversized request bodies before they are parsed."""

    # Largest legitimate body is a few dozen bytes
    MAX_CONTENT_LENGTH = 64 * 1024

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                length = int(content_length)
            except ValueError:
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"error": "MalformedRequest", "message": "Invalid Content-Length header."},
                )
            if length > self.MAX_CONTENT_LENGTH:
                return JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content={"error": "Request too large", "max_size": self.MAX_CONTENT_LENGTH},
                )

        return await call_next(request)


def setup_security_middleware(app, enable_rate_limiting: bool = True, trusted_proxies=frozenset()):
    """Setup all security middleware for the FastAPI app.

    Args:
        app: FastAPI application instance
        enable_rate_limiting: Whether to enable rate limiting
        trusted_proxies: Peers whose forwarding headers identify the client
    """
    # Last added = first executed
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestValidationMiddleware)

    if enable_rate_limiting and RATE_LIMIT_ENABLED:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_window=RATE_LIMIT_REQUESTS,
            window_seconds=RATE_LIMIT_WINDOW,
            trusted_proxies=trusted_proxies,
        )


class WebSocketLimiter:
    """Limit WebSocket connections per IP."""

    def __init__(self, max_connections_per_ip: int = WS_MAX_CONNECTIONS_PER_IP):
        self.max_connections = max_connections_per_ip
        # Only IPs with at least one open connection have an entry
        self.connections: dict[str, int] = {}

    def can_connect(self, client_ip: str) -> bool:
        """Check if client can open a new WebSocket connection."""
        if client_ip in IP_WHITELIST:
            return True
        return self.connections.get(client_ip, 0) < self.max_connections

    def connect(self, client_ip: str) -> bool:
        """Register a new connection. Returns False if limit exceeded."""
        if not self.can_connect(client_ip):
            return False
        self.connections[client_ip] = self.connections.get(client_ip, 0) + 1
        return True

    def disconnect(self, client_ip: str):
        """Unregister a connection."""
        remaining = self.connections.get(client_ip, 0) - 1
        if remaining > 0:
            self.connections[client_ip] = remaining
        else:
            self.connections.pop(client_ip, None)
