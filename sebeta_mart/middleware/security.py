import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from sebeta_mart.config import settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Standard hardening headers on every response"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.cookie_secure:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Adds X-Process-Time (seconds) to every response"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Process-Time"] = f"{time.perf_counter() - start:.4f}"
        return response
