"""
Redis-backed page-view counters.

Layout (prefix defaults to "evalhub"):
- `<prefix>:stats:<path>`  hash with view_count, last_viewed_at, updated_at
- `<prefix>:stats:rank`    sorted set of paths scored by view count
- `<prefix>:views:<path>`  capped list of raw view records (JSON)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from redis import Redis, ConnectionPool, RedisError

logger = logging.getLogger(__name__)


def _to_iso(timestamp: Optional[str]) -> Optional[str]:
    if not timestamp:
        return None
    return datetime.fromtimestamp(float(timestamp), tz=timezone.utc).isoformat()


class RedisViewStore:
    """
    View counters for eval pages.

    Features:
    - Connection pooling
    - Atomic increments (one MULTI/EXEC per view)
    - Ranking via a sorted set
    - Health checks
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        max_connections: int = 50,
        socket_timeout: int = 5,
        socket_connect_timeout: int = 5,
        password: Optional[str] = None,
        key_prefix: str = "evalhub",
        history_limit: int = 1000,
        client: Optional[Redis] = None,
    ):
        """
        Initialize the store.

        Args:
            redis_url: Redis connection URL
            max_connections: Maximum connections in pool
            socket_timeout: Socket timeout in seconds
            socket_connect_timeout: Socket connect timeout in seconds
            password: Redis password (if required)
            key_prefix: Namespace for every key this store writes
            history_limit: Raw view records kept per path
            client: Ready-made client (skips pool creation)
        """
        self.key_prefix = key_prefix
        self.history_limit = history_limit

        if client is not None:
            self.client = client
            return

        try:
            pool = ConnectionPool.from_url(
                redis_url,
                max_connections=max_connections,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_connect_timeout,
                password=password,
                decode_responses=True
            )
            self.client = Redis(connection_pool=pool)
            self.client.ping()
            logger.info(f"✅ Redis view store connected: {redis_url}")

        except Exception as e:
            logger.error(f"❌ Failed to connect to Redis: {e}")
            raise RuntimeError(f"Redis connection failed: {e}") from e

    # Keys -------------------------------------------------------------

    def stats_key(self, path: str) -> str:
        return f"{self.key_prefix}:stats:{path}"

    def views_key(self, path: str) -> str:
        return f"{self.key_prefix}:views:{path}"

    @property
    def rank_key(self) -> str:
        return f"{self.key_prefix}:stats:rank"

    # Writes -----------------------------------------------------------

    def record_view(
        self,
        path: str,
        view_id: str,
        viewed_at: datetime,
        visitor_hash: Optional[str] = None
    ) -> int:
        """
        Log one view and bump the counters.

        Returns:
            The new view count for `path`
        """
        timestamp = viewed_at.timestamp()
        record = json.dumps({
            "id": view_id,
            "viewed_at": timestamp,
            "visitor_hash": visitor_hash,
        })
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.lpush(self.views_key(path), record)
            pipe.ltrim(self.views_key(path), 0, self.history_limit - 1)
            pipe.hincrby(self.stats_key(path), "view_count", 1)
            pipe.hset(self.stats_key(path), mapping={
                "last_viewed_at": timestamp,
                "updated_at": timestamp,
            })
            pipe.zincrby(self.rank_key, 1, path)
            results = pipe.execute()
            return int(results[2])
        except RedisError as e:
            logger.error(f"Redis record_view error for {path}: {e}", extra={"eval_path": path})
            raise

    def reset(self) -> None:
        """Delete every key under this store's prefix."""
        try:
            keys = list(self.client.scan_iter(match=f"{self.key_prefix}:*"))
            if keys:
                self.client.delete(*keys)
            logger.info(f"Cleared {len(keys)} analytics keys")
        except RedisError as e:
            logger.error(f"Redis reset error: {e}")
            raise

    # Reads ------------------------------------------------------------

    def get_stats(self, path: str) -> Dict[str, Any]:
        """
        Counters for one path.

        Returns:
            {"path", "view_count", "last_viewed_at"}; zero / None when unseen
        """
        try:
            data = self.client.hgetall(self.stats_key(path))
        except RedisError as e:
            logger.error(f"Redis get_stats error for {path}: {e}", extra={"eval_path": path})
            raise
        return {
            "path": path,
            "view_count": int(data.get("view_count", 0)) if data else 0,
            "last_viewed_at": _to_iso(data.get("last_viewed_at")) if data else None,
        }

    def top(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most viewed paths, highest count first."""
        try:
            ranked = self.client.zrevrange(self.rank_key, 0, limit - 1, withscores=True)
            pipe = self.client.pipeline(transaction=False)
            for path, _ in ranked:
                pipe.hget(self.stats_key(path), "last_viewed_at")
            last_seen = pipe.execute() if ranked else []
        except RedisError as e:
            logger.error(f"Redis top error: {e}")
            raise
        return [
            {
                "path": path,
                "view_count": int(score),
                "last_viewed_at": _to_iso(last),
            }
            for (path, score), last in zip(ranked, last_seen)
        ]

    def recent_views(self, path: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Newest raw view records for `path`, capped at `history_limit`."""
        try:
            raw = self.client.lrange(self.views_key(path), 0, limit - 1)
        except RedisError as e:
            logger.error(f"Redis recent_views error for {path}: {e}", extra={"eval_path": path})
            raise
        records = [json.loads(entry) for entry in raw]
        for record in records:
            record["viewed_at"] = _to_iso(record.get("viewed_at"))
        return records

    def health_check(self) -> Dict[str, Any]:
        try:
            self.client.ping()
            return {
                "status": "healthy",
                "backend": "redis",
                "connected": True
            }
        except RedisError as e:
            return {
                "status": "unhealthy",
                "backend": "redis",
                "error": str(e),
                "connected": False
            }


# Global store instance
_view_store: Optional[RedisViewStore] = None


def get_view_store() -> RedisViewStore:
    """
    Get global view store instance.

    Raises:
        RuntimeError: If Redis is not enabled or the connection fails
    """
    global _view_store

    if _view_store is None:
        from evalhub.core.config import get_settings

        settings = get_settings()

        if not settings.REDIS_ENABLED:
            raise RuntimeError(
                "Redis is not enabled. Set REDIS_ENABLED=true in .env"
            )

        _view_store = RedisViewStore(
            redis_url=settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_CONNECT_TIMEOUT,
            password=settings.REDIS_PASSWORD,
            key_prefix=settings.REDIS_KEY_PREFIX,
            history_limit=settings.VIEW_HISTORY_LIMIT
        )

    return _view_store
