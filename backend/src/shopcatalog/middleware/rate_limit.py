"""Rate limiting middleware using Redis with a Lua sliding window."""

import logging
import random
import time
from typing import Callable

from fastapi import Request, Response
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP and per-actor rate limiting.

    The Redis client is read from ``request.app.state.redis``. When it is
    missing or Redis errors, requests are let through.
    """

    # Single atomic call: trim the window, count, admit or compute retry-after
    RATE_LIMIT_SCRIPT = """
    local key = KEYS[1]
    local now = tonumber(ARGV[1])
    local window = tonumber(ARGV[2])
    local limit = tonumber(ARGV[3])
    local request_id = ARGV[4]
    local window_start = now - window

    redis.call('ZREMRANGEBYSCORE', key, 0, window_start)

    local count = redis.call('ZCARD', key)

    if count < limit then
        redis.call('ZADD', key, now, request_id)
        redis.call('EXPIRE', key, window + 1)
        return {1, 0}
    else
        local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
        local retry_after = 1
        if oldest and #oldest >= 2 then
            retry_after = math.ceil(oldest[2] + window - now) + 1
            if retry_after < 1 then retry_after = 1 end
        end
        return {0, retry_after}
    end
    """

    def __init__(
        self,
        app,
        user_limit: int = 20,
        ip_limit: int = 200,
        user_header: str = "X-User-Id",
    ):
        super().__init__(app)
        self.user_limit = user_limit
        self.ip_limit = ip_limit
        self.user_header = user_header
        self._rate_limit_script = None

    def _get_rate_limit_script(self, redis):
        """Get or register the rate limit Lua script."""
        if self._rate_limit_script is None:
            self._rate_limit_script = redis.register_script(self.RATE_LIMIT_SCRIPT)
        return self._rate_limit_script

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with rate limiting."""
        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        actor_id = request.headers.get(self.user_header)

        try:
            ip_allowed, ip_retry_after = await self._check_rate_limit_lua(
                redis, f"ratelimit:ip:{client_ip}", self.ip_limit
            )
            if not ip_allowed:
                return self._too_many("Too many requests from this IP", ip_retry_after)

            if actor_id:
                user_allowed, user_retry_after = await self._check_rate_limit_lua(
                    redis, f"ratelimit:user:{actor_id}", self.user_limit
                )
                if not user_allowed:
                    return self._too_many("Too many requests for this user", user_retry_after)
        except RedisError as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e}")

        return await call_next(request)

    @staticmethod
    def _too_many(detail: str, retry_after: int) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"detail": detail},
            headers={"Retry-After": str(retry_after)},
        )

    async def _check_rate_limit_lua(
        self, redis, key: str, limit: int, window: int = 1
    ) -> tuple[bool, int]:
        """Check rate limit using atomic Lua script.

        Args:
            redis: Redis client
            key: Rate limit key
            limit: Maximum requests per window
            window: Window size in seconds

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        now = time.time()
        # Unique member so concurrent requests in the same instant both count
        request_id = f"{now}:{random.randint(0, 999999)}"

        script = self._get_rate_limit_script(redis)
        result = await script(
            keys=[key],
            args=[now, window, limit, request_id],
        )

        return bool(result[0]), int(result[1])
