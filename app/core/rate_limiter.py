"""Fixed-window rate limiter backed by a shared Supabase counter."""

import asyncio
from functools import lru_cache

from fastapi import Depends, HTTPException

from app.core.auth_middleware import AuthContext, require_auth
from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

# Postgres function: atomically increments the counter for (key, current window)
# and returns the new count. See run_supabase_migration.py for its definition.
INCREMENT_RPC = "increment_rate_limit"


class RateLimiter:
    """
    Fixed-window request counter.

    The count lives in the database rather than process memory, so limits
    hold across restarts and across instances. Each check is a single
    increment-and-read round trip.
    """

    def __init__(self, requests_per_window: int = 30, window_seconds: int = 60):
        """
        Initialize rate limiter.

        Args:
            requests_per_window: Requests allowed per key per window
            window_seconds: Window length in seconds
        """
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

    def _increment(self, key: str) -> int:
        """Increment the counter for ``key`` in the current window and return the new count."""
        result = (
            get_supabase()
            .rpc(INCREMENT_RPC, {"p_key": key, "p_window_seconds": self.window_seconds})
            .execute()
        )
        data = result.data
        if isinstance(data, list):
            data = data[0] if data else 0
        if isinstance(data, dict):
            data = data.get("request_count", 0)
        return int(data or 0)

    def check_limit(self, key: str) -> bool:
        """
        Count a request against ``key``.

        Args:
            key: Rate limit key (e.g., "moment:<user_id>")

        Returns:
            True if allowed

        Raises:
            HTTPException: 429 if rate limited
        """
        try:
            count = self._increment(key)
        except Exception as e:
            # Counter store unavailable: let the request through
            logger.warning(f"Rate limit counter unavailable for key: {key}: {e}")
            return True

        if count <= self.requests_per_window:
            return True

        logger.warning(
            f"Rate limit exceeded for key: {key}, "
            f"count: {count}/{self.requests_per_window}, "
            f"retry after: {self.window_seconds}s"
        )

        raise HTTPException(
            status_code=429,
            detail=f"Rate limit exceeded. Try again in {self.window_seconds} seconds.",
            headers={"Retry-After": str(self.window_seconds)},
        )


@lru_cache(maxsize=1)
def get_moment_rate_limiter() -> RateLimiter:
    """Rate limiter for the founder-facing venture endpoints."""
    from app.core.config import get_settings

    settings = get_settings()
    return RateLimiter(requests_per_window=settings.RATE_LIMIT_REQUESTS_PER_MINUTE, window_seconds=60)


async def check_moment_rate_limit(auth: AuthContext = Depends(require_auth)) -> AuthContext:
    """
    Dependency: authenticate, then count the request against the user's window.

    Raises:
        HTTPException: 401 if unauthenticated, 429 if rate limited
    """
    await asyncio.to_thread(get_moment_rate_limiter().check_limit, f"moment:{auth.user_id}")
    return auth
