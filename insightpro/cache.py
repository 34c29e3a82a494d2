import json
import logging

import redis.asyncio as redis

from insightpro.config import settings

logger = logging.getLogger(__name__)

PRODUCT_LIST_KEY = "products:list"
# Session.info slot holding product ids whose cache entries must be dropped
# again after commit.
PENDING_INVALIDATIONS_KEY = "insightpro.pending_product_invalidations"


def product_detail_key(product_id: int) -> str:
    return f"products:detail:{product_id}"


class CacheManager:
    """
    Cache-aside store for product reads, backed by Redis.

    Every method tolerates a missing or broken Redis: reads report a miss,
    writes and deletes do nothing.  The database stays the source of truth
    and a cache failure never fails a request.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, url: str | None = None) -> None:
        """Open the connection pool and ping it.  Called from the app lifespan."""
        url = url or settings.REDIS_URL
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except Exception as exc:
            logger.warning("Redis unavailable at %s, product cache disabled: %s", url, exc)
            await client.aclose()
            return
        self._redis = client
        logger.info("Redis connected: %s", url)

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        """Return the decoded value stored under *key*, or None on a miss."""
        if not self._redis:
            self._misses += 1
            return None
        try:
            data = await self._redis.get(key)
        except Exception as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            data = None
        if data is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(data)

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        if not self._redis or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except Exception as exc:
            logger.debug("Cache DELETE error for keys=%r: %s", keys, exc)

    async def invalidate_product(self, product_id: int | None = None) -> None:
        """
        Drop the product list entry and, when *product_id* is given, that
        product's detail entry.  Called after every product write.
        """
        keys = [PRODUCT_LIST_KEY]
        if product_id is not None:
            keys.append(product_detail_key(product_id))
        await self.delete(*keys)

    async def invalidate_product_on_commit(self, db, product_id: int | None = None) -> None:
        """
        Invalidate now and remember *product_id* on *db* so
        ``run_pending_invalidations`` can repeat it once the transaction
        commits.  A read racing the write can re-cache the pre-commit row in
        between; the second pass removes it.
        """
        await self.invalidate_product(product_id)
        db.info.setdefault(PENDING_INVALIDATIONS_KEY, set()).add(product_id)

    async def run_pending_invalidations(self, db) -> None:
        """Replay the invalidations recorded on *db*.  Call right after commit."""
        for product_id in db.info.pop(PENDING_INVALIDATIONS_KEY, set()):
            await self.invalidate_product(product_id)

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict:
        """Hit/miss counters for the metrics endpoint."""
        total = self._hits + self._misses
        return {
            "enabled": self._redis is not None,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = CacheManager()
