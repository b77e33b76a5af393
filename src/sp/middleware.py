"""Custom middleware for request handling."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional

import jwt
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware

from sp.auth import decode_access_token
from sp.services.rate_limit import RateLimiter, RateLimitResult, create_rate_limiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


class AuthMiddleware(BaseHTTPMiddleware):
    """Extract user ID from JWT and attach to request state."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        auth = request.headers.get("Authorization")
        if auth and auth.startswith("Bearer "):
            token = auth.split(" ", 1)[1]
            try:
                payload = decode_access_token(token)
                user_id = payload.get("sub")
                if not user_id:
                    return JSONResponse(
                        status_code=status.HTTP_401_UNAUTHORIZED,
                        content={"detail": "Invalid token: missing user ID"},
                    )
                request.state.user_id = user_id
            except jwt.ExpiredSignatureError:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Token has expired"},
                )
            except jwt.InvalidTokenError as exc:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": f"Invalid token: {exc}"},
                )
        return await call_next(request)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach standard browser hardening headers."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def client_key(request: Request) -> str:
    """Identify the caller by forwarded address, falling back to the peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client rate limiting backed by an injected limiter."""

    def __init__(self, app, limiter: Optional[RateLimiter] = None):
        super().__init__(app)
        self.limiter = limiter or create_rate_limiter()

    def _headers(self, result: RateLimitResult) -> Dict[str, str]:
        reset = datetime.fromtimestamp(result.reset_time / 1000, tz=timezone.utc)
        return {
            "X-RateLimit-Limit": str(self.limiter.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": reset.isoformat(),
        }

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Skip rate limiting for health checks and CORS preflight
        if request.url.path == "/health" or request.method == "OPTIONS":
            return await call_next(request)

        key = client_key(request)
        try:
            result = await self.limiter.check(key)
        except (RedisError, OSError) as e:
            # Limiter backend unavailable; serve the request unthrottled
            logger.warning("Rate limiter unavailable, allowing %s: %s", key, e)
            return await call_next(request)

        headers = self._headers(result)

        if not result.allowed:
            logger.warning("Rate limit exceeded for %s", key)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": {
                        "code": "RATE_LIMITED",
                        "message": "Too many requests. Please try again later.",
                        "details": {"reset": headers["X-RateLimit-Reset"]},
                    }
                },
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
