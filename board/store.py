import logging

import redis.asyncio as redis

from board.config import settings

logger = logging.getLogger(__name__)


class RedisStore:
    """
    Owner of the Redis connection pool backing the board.

    Unlike a cache, Redis is the system of record here: connection
    failures are logged and re-raised so the application refuses to
    start (or a request fails) rather than silently serving nothing.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, url: str | None = None) -> None:
        """Open the connection pool.  Called once at application startup."""
        url = url or settings.REDIS_URL
        self._redis = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
        except (redis.ConnectionError, redis.TimeoutError) as exc:
            logger.error("Redis ping failed for %s: %s", url, exc)
            await self.disconnect()
            raise
        logger.info("Redis connected: %s", url)

    async def disconnect(self) -> None:
        """Close the connection pool.  Called once at application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    @property
    def client(self) -> redis.Redis:
        if self._redis is None:
            raise RuntimeError("Redis not connected. Call store.connect() first.")
        return self._redis


# Module-level singleton shared across all request handlers.
store = RedisStore()
