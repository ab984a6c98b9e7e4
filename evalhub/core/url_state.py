"""
Query-string state shared between the filter engine, the comparison set
and whatever owns the page URL.

`UrlState` plays the role of the browser location: it holds the current
query parameters and notifies listeners whenever they change. Components
bind to it through `QueryBinding`, which debounces writes and suppresses the
notification caused by its own write so that state -> URL -> state never
loops.
"""

import logging
import threading
from typing import Callable, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

logger = logging.getLogger(__name__)

QueryDict = Dict[str, str]
Listener = Callable[[QueryDict], None]


def parse_query_string(query: Union[str, Mapping, None]) -> QueryDict:
    """
    Normalize a raw query string or mapping into a flat dict.

    Repeated keys keep their last value; list values (as produced by some
    routers) are joined with commas.
    """
    if not query:
        return {}
    if isinstance(query, str):
        return dict(parse_qsl(query.lstrip("?"), keep_blank_values=False))

    result: QueryDict = {}
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value if v)
        result[str(key)] = str(value)
    return result


def split_param(value: Optional[str]) -> List[str]:
    """Split a comma-joined parameter, dropping empty segments."""
    if not value:
        return []
    return [part for part in value.split(",") if part]


def build_query_string(query: Mapping[str, str]) -> str:
    # Commas stay readable in shared links
    return urlencode(query, safe=",/")


class UrlState:
    """Current query parameters plus change listeners."""

    def __init__(self, query: Union[str, Mapping, None] = None):
        self._query: QueryDict = parse_query_string(query)
        self._listeners: List[Listener] = []
        self.write_count = 0
        # Held across the update and its notifications so writers from
        # different threads (debounce timers, navigation) are serialized
        self.lock = threading.RLock()

    @property
    def query(self) -> QueryDict:
        return dict(self._query)

    @property
    def query_string(self) -> str:
        return build_query_string(self._query)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(self, query: Union[str, Mapping, None]) -> bool:
        """
        Replace the whole query. Returns False (and notifies nobody) when
        nothing changed.
        """
        new_query = parse_query_string(query)
        with self.lock:
            if new_query == self._query:
                return False
            self._query = new_query
            self.write_count += 1
            for listener in list(self._listeners):
                listener(self.query)
        return True

    def navigate(self, query: Union[str, Mapping, None]) -> bool:
        """External navigation (back/forward, pasted link)."""
        logger.debug(f"Navigating to ?{build_query_string(parse_query_string(query))}")
        return self.replace(query)


class Debouncer:
    """
    Coalesce rapid calls into one trailing call after `delay` seconds.

    `flush()` runs a pending call right away, which is also how tests avoid
    sleeping.
    """

    def __init__(self, func: Callable[[], None], delay: float):
        self.func = func
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def __call__(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            if self.delay <= 0:
                self._timer = None
                run_now = True
            else:
                self._timer = threading.Timer(self.delay, self._fire)
                self._timer.daemon = True
                self._timer.start()
                run_now = False
        if run_now:
            self.func()

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
        self.func()

    def flush(self) -> bool:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        self.func()
        return True

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class QueryBinding:
    """
    Two-way binding between a component and a subset of `UrlState` params.

    `serialize()` returns the component's params (only the keys it owns);
    `on_external_change(query)` is called when somebody else changed one of
    those params. Params the component does not own are preserved on write,
    and changes that only touch them are ignored. A notification whose owned
    params equal what the binding last wrote is its own echo and is skipped.
    """

    def __init__(
        self,
        url_state: UrlState,
        owned_params: List[str],
        serialize: Callable[[], QueryDict],
        on_external_change: Callable[[QueryDict], None],
        debounce_ms: int = 0,
    ):
        self.url_state = url_state
        self.owned_params = list(owned_params)
        self._serialize = serialize
        self._on_external_change = on_external_change
        self._last_seen = self._owned(url_state.query)
        self._debouncer = Debouncer(self.write_now, debounce_ms / 1000.0)
        self._unsubscribe = url_state.subscribe(self._handle_change)

    def _owned(self, query: Mapping[str, str]) -> QueryDict:
        return {key: value for key, value in query.items() if key in self.owned_params}

    def schedule_write(self) -> None:
        self._debouncer()

    def flush(self) -> bool:
        return self._debouncer.flush()

    def write_now(self) -> None:
        with self.url_state.lock:
            query = {
                key: value
                for key, value in self.url_state.query.items()
                if key not in self.owned_params
            }
            written = self._serialize()
            query.update(written)
            # The notification for this write carries exactly `written`
            self._last_seen = self._owned(written)
            self.url_state.replace(query)

    def _handle_change(self, query: QueryDict) -> None:
        owned = self._owned(query)
        if owned == self._last_seen:
            return
        self._last_seen = owned
        # External navigation wins over a write we had not flushed yet
        self._debouncer.cancel()
        self._on_external_change(query)

    def close(self) -> None:
        self._debouncer.cancel()
        self._unsubscribe()
