"""
Faceted filter over the eval catalog.

Five facets combine with AND. Inside a facet:
- tags: the item must carry every selected tag
- frameworks, use_cases, difficulties: the item's value must be one of the selection
- languages: the item's language list must share at least one selected language

The asymmetry between tags and the other facets is intentional and visible
to users, so it must not be normalized.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union
from urllib.parse import urlsplit, urlunsplit

from evalhub.core.config import get_settings
from evalhub.core.constants import Facet, get_facet_values
from evalhub.core.url_state import (
    QueryBinding,
    UrlState,
    build_query_string,
    parse_query_string,
    split_param,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_field(item: Any, name: str) -> Any:
    """Read a field from a mapping or an object (pydantic model, dataclass)."""
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def framework_of(path: Optional[str]) -> Optional[str]:
    """`/evalite/rag/x` -> `evalite`."""
    if not path:
        return None
    parts = path.split("/")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def _as_str(value: Any) -> Any:
    # Enum members compare by value
    return getattr(value, "value", value)


def parse_facet_query(query: Union[str, Mapping, None]) -> Dict[Facet, List[str]]:
    """
    Parse query parameters into facet selections.

    Values outside a facet's closed set are dropped, as are duplicates, so a
    mangled shared link degrades to "no filter" for that facet.
    """
    params = parse_query_string(query)
    allowed = get_facet_values()
    selections: Dict[Facet, List[str]] = {}
    for facet in Facet:
        values: List[str] = []
        for value in split_param(params.get(facet.value)):
            if value not in allowed[facet]:
                logger.debug(f"Ignoring unknown {facet.value} value: {value!r}")
                continue
            if value not in values:
                values.append(value)
        selections[facet] = values
    return selections


class FacetedFilter:
    """
    Active facet selections plus the predicate that applies them.

    When bound to a `UrlState`, the filter reads its initial selections from
    the URL, writes back (debounced) after each mutation and re-reads when
    the URL changes underneath it.
    """

    def __init__(
        self,
        url_state: Optional[UrlState] = None,
        debounce_ms: Optional[int] = None,
    ):
        if debounce_ms is None:
            debounce_ms = get_settings().URL_SYNC_DEBOUNCE_MS
        self._selections: Dict[Facet, List[str]] = {facet: [] for facet in Facet}
        self._binding: Optional[QueryBinding] = None

        if url_state is not None:
            self._selections = parse_facet_query(url_state.query)
            self._binding = QueryBinding(
                url_state,
                owned_params=[facet.value for facet in Facet],
                serialize=self.to_query,
                on_external_change=self.apply_query,
                debounce_ms=debounce_ms,
            )

    @classmethod
    def from_query(cls, query: Union[str, Mapping, None]) -> "FacetedFilter":
        """Unbound filter initialized from query parameters."""
        facet_filter = cls()
        facet_filter.apply_query(query)
        return facet_filter

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def selections(self) -> Dict[Facet, List[str]]:
        return {facet: list(values) for facet, values in self._selections.items()}

    def values(self, facet: Union[Facet, str]) -> List[str]:
        return list(self._selections[Facet(facet)])

    @property
    def tags(self) -> List[str]:
        return self.values(Facet.TAGS)

    @property
    def frameworks(self) -> List[str]:
        return self.values(Facet.FRAMEWORKS)

    @property
    def use_cases(self) -> List[str]:
        return self.values(Facet.USE_CASES)

    @property
    def languages(self) -> List[str]:
        return self.values(Facet.LANGUAGES)

    @property
    def difficulties(self) -> List[str]:
        return self.values(Facet.DIFFICULTIES)

    def has(self, facet: Union[Facet, str], value: str) -> bool:
        return value in self._selections[Facet(facet)]

    @property
    def has_active_filters(self) -> bool:
        return any(self._selections.values())

    @property
    def active_filter_count(self) -> int:
        return sum(len(values) for values in self._selections.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FacetedFilter):
            return NotImplemented
        return self._selections == other._selections

    def __repr__(self) -> str:
        active = {f.value: v for f, v in self._selections.items() if v}
        return f"FacetedFilter({active})"

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def toggle(self, facet: Union[Facet, str], value: str) -> None:
        selected = self._selections[Facet(facet)]
        if value in selected:
            selected.remove(value)
        else:
            selected.append(value)
        self._changed()

    def clear(self, facet: Union[Facet, str]) -> None:
        self._selections[Facet(facet)] = []
        self._changed()

    def clear_all(self) -> None:
        self._selections = {facet: [] for facet in Facet}
        self._changed()

    def apply_query(self, query: Union[str, Mapping, None]) -> None:
        """Replace every facet from query parameters. Does not write the URL."""
        self._selections = parse_facet_query(query)

    def _changed(self) -> None:
        if self._binding is not None:
            self._binding.schedule_write()

    # ------------------------------------------------------------------
    # URL
    # ------------------------------------------------------------------

    def to_query(self) -> Dict[str, str]:
        """One comma-joined param per non-empty facet."""
        return {
            facet.value: ",".join(values)
            for facet, values in self._selections.items()
            if values
        }

    def to_query_string(self) -> str:
        return build_query_string(self.to_query())

    def flush(self) -> bool:
        """Write a pending debounced URL update now."""
        if self._binding is None:
            return False
        return self._binding.flush()

    def copy_filter_link(self, base_url: str) -> str:
        """Shareable link reproducing the current filters on `base_url`."""
        scheme, netloc, path, query, fragment = urlsplit(base_url)
        params = {
            key: value
            for key, value in parse_query_string(query).items()
            if key not in {facet.value for facet in Facet}
        }
        params.update(self.to_query())
        return urlunsplit((scheme, netloc, path, build_query_string(params), fragment))

    def close(self) -> None:
        if self._binding is not None:
            self._binding.close()
            self._binding = None

    # ------------------------------------------------------------------
    # Predicate
    # ------------------------------------------------------------------

    def matches(self, item: Any) -> bool:
        frameworks = self._selections[Facet.FRAMEWORKS]
        if frameworks:
            framework = framework_of(get_field(item, "path"))
            if not framework or framework not in frameworks:
                return False

        use_cases = self._selections[Facet.USE_CASES]
        if use_cases:
            use_case = _as_str(get_field(item, "use_case"))
            if not use_case or use_case not in use_cases:
                return False

        languages = self._selections[Facet.LANGUAGES]
        if languages:
            item_languages = [_as_str(v) for v in get_field(item, "languages") or []]
            if not any(lang in item_languages for lang in languages):
                return False

        difficulties = self._selections[Facet.DIFFICULTIES]
        if difficulties:
            difficulty = _as_str(get_field(item, "difficulty"))
            if not difficulty or difficulty not in difficulties:
                return False

        tags = self._selections[Facet.TAGS]
        if tags:
            item_tags = [_as_str(v) for v in get_field(item, "tags") or []]
            if not item_tags or not all(tag in item_tags for tag in tags):
                return False

        return True

    def filter_items(self, items: Iterable[T]) -> List[T]:
        """Items passing every active facet, in input order."""
        return [item for item in items if self.matches(item)]


def filter_items(items: Sequence[T], query: Union[str, Mapping, None]) -> List[T]:
    """One-shot filtering from query parameters."""
    return FacetedFilter.from_query(query).filter_items(items)
