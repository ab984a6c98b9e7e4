import threading
import time

from evalhub.core.comparison import ComparisonSet
from evalhub.core.config import get_settings
from evalhub.core.constants import Facet
from evalhub.core.filtering import FacetedFilter
from evalhub.core.url_state import Debouncer, UrlState, parse_query_string


def test_parse_query_string_variants():
    assert parse_query_string("?tags=a,b&x=1") == {"tags": "a,b", "x": "1"}
    assert parse_query_string({"tags": ["a", "b"], "skip": None}) == {"tags": "a,b"}
    assert parse_query_string(None) == {}


def test_url_state_notifies_only_on_change():
    url = UrlState("tags=safety")
    seen = []
    url.subscribe(seen.append)

    assert url.replace({"tags": "safety"}) is False
    assert url.replace({"tags": "recall"}) is True
    assert seen == [{"tags": "recall"}]


def test_debouncer_coalesces_calls():
    calls = []
    debouncer = Debouncer(lambda: calls.append(1), delay=60)

    for _ in range(5):
        debouncer()
    assert calls == []
    assert debouncer.pending

    assert debouncer.flush() is True
    assert calls == [1]
    assert debouncer.flush() is False


def test_debouncer_fires_after_delay():
    fired = threading.Event()
    debouncer = Debouncer(fired.set, delay=0.01)
    debouncer()
    assert fired.wait(timeout=2)
    assert not debouncer.pending


def test_filter_reads_initial_state_from_url():
    url = UrlState("tags=safety,production&use_cases=rag&difficulties=expert")
    facet_filter = FacetedFilter(url)
    assert facet_filter.tags == ["safety", "production"]
    assert facet_filter.use_cases == ["rag"]
    assert facet_filter.difficulties == []


def test_rapid_toggles_produce_one_url_write():
    url = UrlState()
    facet_filter = FacetedFilter(url, debounce_ms=60_000)

    facet_filter.toggle(Facet.TAGS, "safety")
    facet_filter.toggle(Facet.TAGS, "production")
    facet_filter.toggle(Facet.LANGUAGES, "python")
    assert url.query == {}

    facet_filter.flush()
    assert url.write_count == 1
    assert url.query == {"tags": "safety,production", "languages": "python"}


def test_cleared_facet_is_removed_from_url():
    url = UrlState("tags=safety&languages=python")
    facet_filter = FacetedFilter(url, debounce_ms=0)
    facet_filter.clear(Facet.TAGS)
    assert url.query == {"languages": "python"}


def test_own_write_does_not_feed_back():
    url = UrlState()
    facet_filter = FacetedFilter(url, debounce_ms=0)
    reparsed = []
    original = facet_filter.apply_query
    facet_filter._binding._on_external_change = lambda q: (reparsed.append(q), original(q))

    facet_filter.toggle(Facet.TAGS, "safety")

    assert url.query == {"tags": "safety"}
    assert reparsed == []
    assert url.write_count == 1


def test_external_navigation_updates_filter():
    url = UrlState("tags=safety")
    facet_filter = FacetedFilter(url, debounce_ms=0)

    url.navigate("frameworks=evalite&tags=")

    assert facet_filter.tags == []
    assert facet_filter.frameworks == ["evalite"]
    # Re-parsing an external URL writes nothing back
    assert url.write_count == 1


def test_navigation_cancels_pending_write():
    url = UrlState()
    facet_filter = FacetedFilter(url, debounce_ms=60_000)
    facet_filter.toggle(Facet.TAGS, "safety")

    url.navigate("use_cases=rag")

    assert facet_filter.flush() is False
    assert facet_filter.tags == []
    assert url.query == {"use_cases": "rag"}


def test_filter_and_comparison_share_url():
    url = UrlState("compare=/a,/b&tags=safety")
    facet_filter = FacetedFilter(url, debounce_ms=60_000)
    comparison = ComparisonSet(url)

    facet_filter.toggle(Facet.TAGS, "production")
    comparison.add("/c")  # immediate write of `compare`

    # The pending filter change survives the comparison write
    assert facet_filter.tags == ["safety", "production"]
    facet_filter.flush()
    assert url.query == {"compare": "/a,/b,/c", "tags": "safety,production"}
    assert comparison.selected_paths == ["/a", "/b", "/c"]


def test_url_state_query_string_keeps_commas():
    url = UrlState({"tags": "safety,production", "compare": "/a,/b"})
    assert url.query_string == "tags=safety,production&compare=/a,/b"


def test_closed_filter_stops_listening():
    url = UrlState("tags=safety")
    facet_filter = FacetedFilter(url, debounce_ms=0)
    facet_filter.close()

    url.navigate("tags=recall")

    assert facet_filter.tags == ["safety"]


def test_navigation_during_timer_write_is_applied():
    url = UrlState()
    in_write = threading.Event()
    release = threading.Event()

    def slow_listener(query):
        if query.get("tags") == "safety" and not in_write.is_set():
            in_write.set()
            release.wait(timeout=5)

    url.subscribe(slow_listener)
    facet_filter = FacetedFilter(url, debounce_ms=10)
    facet_filter.toggle(Facet.TAGS, "safety")
    # The debounce timer thread is now inside its URL write
    assert in_write.wait(timeout=5)

    navigation = threading.Thread(target=url.navigate, args=("tags=recall",))
    navigation.start()
    time.sleep(0.05)
    release.set()
    navigation.join(timeout=5)

    assert url.query == {"tags": "recall"}
    assert facet_filter.tags == ["recall"]


def test_debounce_defaults_to_configured_delay(monkeypatch):
    monkeypatch.setattr(get_settings(), "URL_SYNC_DEBOUNCE_MS", 0)
    url = UrlState()
    facet_filter = FacetedFilter(url)

    facet_filter.toggle(Facet.TAGS, "safety")

    assert url.query == {"tags": "safety"}
