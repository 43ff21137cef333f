"""
Rate limiting middleware
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from collections import defaultdict
from datetime import datetime, timedelta
from config.settings import settings
from caseflow.utils.response import error_response
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-caller rate limiting middleware

    In-memory sliding window keyed by the X-User-Id header, or the client IP
    for anonymous calls. Counters are per process.
    """

    def __init__(self, app, calls: int = None, period: int = 60):
        """
        Args:
            app: FastAPI application
            calls: allowed calls per period (default: settings.rate_limit_per_minute)
            period: window length in seconds
        """
        super().__init__(app)
        self.calls = calls or settings.rate_limit_per_minute
        self.period = period
        # {key: [timestamp, ...]}
        self.requests = defaultdict(list)
        self.last_cleanup = datetime.now()

    def _client_key(self, request: Request) -> str:
        user_id = request.headers.get("X-User-Id")
        if user_id:
            return f"user:{user_id}"

        client_ip = request.client.host if request.client else "unknown"
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
        return f"ip:{client_ip}"

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/health":
            return await call_next(request)

        key = self._client_key(request)
        now = datetime.now()

        # Drop stale counters every 5 minutes
        if (now - self.last_cleanup).seconds > 300:
            self._cleanup_old_requests(now)
            self.last_cleanup = now

        cutoff_time = now - timedelta(seconds=self.period)
        self.requests[key] = [
            ts for ts in self.requests[key] if ts > cutoff_time
        ]

        if len(self.requests[key]) >= self.calls:
            logger.warning(f"Rate limit exceeded for {key}")
            return JSONResponse(
                status_code=429,
                content=error_response(
                    code="RATE_LIMIT_EXCEEDED",
                    message="Rate limit exceeded. Please try again later."
                ),
                headers={
                    "Retry-After": str(self.period),
                    "X-RateLimit-Limit": str(self.calls),
                    "X-RateLimit-Remaining": "0"
                }
            )

        self.requests[key].append(now)

        response = await call_next(request)

        remaining = max(0, self.calls - len(self.requests[key]))
        response.headers["X-RateLimit-Limit"] = str(self.calls)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Reset"] = str(int((now + timedelta(seconds=self.period)).timestamp()))

        return response

    def _cleanup_old_requests(self, now: datetime):
        """Drop counters older than two windows"""
        cutoff_time = now - timedelta(seconds=self.period * 2)
        for key in list(self.requests.keys()):
            self.requests[key] = [
                ts for ts in self.requests[key] if ts > cutoff_time
            ]
            if not self.requests[key]:
                del self.requests[key]
