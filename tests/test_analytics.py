from datetime import datetime, timezone

import pytest
from redis import RedisError

from evalhub.core.constants import PopularityTier, format_view_count, popularity_tier
from evalhub.core.exceptions import AnalyticsStoreError, InvalidPathError
from evalhub.services.analytics_service import (
    AnalyticsService,
    hash_visitor,
    parse_limit,
    validate_view_path,
)


def test_store_counts_views(view_store):
    when = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert view_store.record_view("/evalite/rag/a", "v1", when, "abc") == 1
    assert view_store.record_view("/evalite/rag/a", "v2", when, "abc") == 2

    stats = view_store.get_stats("/evalite/rag/a")
    assert stats["view_count"] == 2
    assert stats["last_viewed_at"] == when.isoformat()


def test_unseen_path_has_zero_views(view_store):
    assert view_store.get_stats("/never") == {
        "path": "/never",
        "view_count": 0,
        "last_viewed_at": None,
    }


def test_view_history_is_capped(view_store):
    now = datetime.now(timezone.utc)
    for i in range(8):
        view_store.record_view("/a", f"v{i}", now)
    recent = view_store.recent_views("/a", limit=50)
    assert len(recent) == 5
    assert recent[0]["id"] == "v7"


def test_top_orders_by_count(view_store):
    now = datetime.now(timezone.utc)
    for path, views in [("/a", 1), ("/b", 3), ("/c", 2)]:
        for i in range(views):
            view_store.record_view(path, f"{path}-{i}", now)

    top = view_store.top(2)
    assert [(row["path"], row["view_count"]) for row in top] == [("/b", 3), ("/c", 2)]


def test_reset_only_touches_prefix(view_store, redis_client):
    redis_client.set("other:key", "1")
    view_store.record_view("/a", "v1", datetime.now(timezone.utc))
    view_store.reset()
    assert view_store.top() == []
    assert redis_client.get("other:key") == "1"


@pytest.mark.parametrize("path", [None, "", "evalite/rag", "/evalite/../secrets"])
def test_invalid_view_paths(path):
    with pytest.raises(InvalidPathError):
        validate_view_path(path)


def test_visitor_hash_is_short_and_stable():
    first = hash_visitor("Mozilla/5.0", "en-US")
    assert len(first) == 16
    assert first == hash_visitor("Mozilla/5.0", "en-US")
    assert first != hash_visitor("curl/8", "en-US")


@pytest.mark.parametrize("raw,expected", [
    (None, 10), ("5", 5), ("500", 50), ("abc", 10), ("0", 10), ("-3", 10),
])
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


def test_service_adds_popularity(view_store):
    service = AnalyticsService(view_store)
    for _ in range(12):
        service.record_view("/evalite/rag/a", {"user-agent": "pytest"})

    stats = service.get_stats("/evalite/rag/a")
    assert stats.view_count == 12
    assert stats.popularity == "rising"
    assert stats.formatted_views == "12"


def test_service_wraps_store_errors(view_store, monkeypatch):
    def boom(*args, **kwargs):
        raise RedisError("down")

    monkeypatch.setattr(view_store, "record_view", boom)
    with pytest.raises(AnalyticsStoreError):
        AnalyticsService(view_store).record_view("/a", {})


@pytest.mark.parametrize("count,tier", [
    (0, None), (9, None), (10, PopularityTier.RISING), (50, PopularityTier.POPULAR),
    (99, PopularityTier.POPULAR), (100, PopularityTier.HOT),
])
def test_popularity_tier(count, tier):
    assert popularity_tier(count) == tier


def test_format_view_count():
    assert format_view_count(999) == "999"
    assert format_view_count(1500) == "1.5k"
    assert format_view_count(2_300_000) == "2.3M"
