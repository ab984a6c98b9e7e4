import hashlib
import logging
import uuid
from datetime import datetime, timezone
from typing import Mapping, Optional

from redis import RedisError

from evalhub.core.constants import format_view_count, popularity_tier
from evalhub.core.exceptions import AnalyticsStoreError, InvalidPathError
from evalhub.core.redis_store import RedisViewStore
from evalhub.schemas import EvalStats, RecentViewsResponse, TopEvalsResponse

logger = logging.getLogger(__name__)


def hash_visitor(user_agent: str, accept_language: str) -> str:
    """Anonymous visitor fingerprint: 16 hex chars of SHA-256."""
    raw = f"{user_agent or ''}-{accept_language or ''}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


def validate_view_path(path: Optional[str]) -> str:
    if not path or not isinstance(path, str):
        raise InvalidPathError("Path is required")
    if not path.startswith("/") or ".." in path or len(path) > 500:
        raise InvalidPathError("Invalid path")
    return path


def parse_limit(raw: Optional[str], default: int = 10, maximum: int = 50) -> int:
    """`limit` query param: non-numeric or non-positive falls back to the default."""
    try:
        value = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        value = default
    if value <= 0:
        value = default
    return min(value, maximum)


def _with_popularity(data: dict) -> EvalStats:
    tier = popularity_tier(data["view_count"])
    return EvalStats(
        **data,
        popularity=tier.value if tier else None,
        formatted_views=format_view_count(data["view_count"]),
    )


class AnalyticsService:
    def __init__(self, store: RedisViewStore, default_limit: int = 10, max_limit: int = 50):
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    def record_view(self, path: Optional[str], headers: Mapping[str, str]) -> int:
        path = validate_view_path(path)
        visitor = hash_visitor(headers.get("user-agent", ""), headers.get("accept-language", ""))
        try:
            count = self.store.record_view(
                path,
                view_id=str(uuid.uuid4()),
                viewed_at=datetime.now(timezone.utc),
                visitor_hash=visitor,
            )
        except RedisError as e:
            raise AnalyticsStoreError("Failed to record view") from e
        logger.debug(f"View recorded for {path} (total {count})", extra={"eval_path": path})
        return count

    def get_stats(self, path: str) -> EvalStats:
        try:
            return _with_popularity(self.store.get_stats(path))
        except RedisError as e:
            raise AnalyticsStoreError("Failed to fetch stats") from e

    def top_evals(self, limit: Optional[str] = None) -> TopEvalsResponse:
        count = parse_limit(limit, self.default_limit, self.max_limit)
        try:
            rows = self.store.top(count)
        except RedisError as e:
            raise AnalyticsStoreError("Failed to fetch stats") from e
        return TopEvalsResponse(evals=[_with_popularity(row) for row in rows])

    def recent_views(self, path: Optional[str], limit: Optional[str] = None) -> RecentViewsResponse:
        path = validate_view_path(path)
        count = parse_limit(limit, self.default_limit, self.max_limit)
        try:
            rows = self.store.recent_views(path, count)
        except RedisError as e:
            raise AnalyticsStoreError("Failed to fetch views") from e
        return RecentViewsResponse(path=path, views=rows)
