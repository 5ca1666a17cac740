"""
Redis client for the refresh token blacklist.
"""
from typing import Optional
import logging
from redis.asyncio import Redis, ConnectionPool
from ducki.config import settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Async Redis client wrapper. Every method degrades to a no-op without Redis."""

    def __init__(self):
        self._redis: Optional[Redis] = None
        self._pool: Optional[ConnectionPool] = None

    async def connect(self):
        """Initialize Redis connection pool"""
        try:
            self._pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                max_connections=10
            )
            self._redis = Redis(connection_pool=self._pool)

            # Test connection
            await self._redis.ping()
            logger.info("Redis connected successfully")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}")
            logger.warning("Running without Redis - sign-out will not revoke refresh tokens")
            self._redis = None

    async def disconnect(self):
        """Close Redis connection"""
        if self._redis:
            await self._redis.aclose()
            logger.info("Redis disconnected")
        self._redis = None

    @property
    def is_connected(self) -> bool:
        """Check if Redis is available"""
        return self._redis is not None

    async def blacklist_token(self, token: str, expiry_seconds: int) -> bool:
        """Add token to blacklist"""
        if not self._redis or expiry_seconds <= 0:
            return False
        try:
            await self._redis.setex(f"blacklist:token:{token}", expiry_seconds, "1")
            return True
        except Exception as e:
            logger.error(f"Failed to blacklist token: {e}")
            return False

    async def is_token_blacklisted(self, token: str) -> bool:
        """Check if token is blacklisted"""
        if not self._redis:
            return False
        try:
            result = await self._redis.exists(f"blacklist:token:{token}")
            return bool(result)
        except Exception as e:
            logger.error(f"Failed to check token blacklist: {e}")
            return False


# Singleton instance
redis_client = RedisClient()


async def init_redis():
    """Initialize Redis connection on startup"""
    await redis_client.connect()


async def close_redis():
    """Close Redis connection on shutdown"""
    await redis_client.disconnect()
