import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from evalhub.core.comparison import ComparisonSet
from evalhub.core.constants import MAX_COMPARISON_ITEMS
from evalhub.core.filtering import FacetedFilter
from evalhub.core.url_state import UrlState
from evalhub.ingestion.loader import ContentLoader, LoadResult
from evalhub.schemas import EvalItem, EvalListResponse, ComparisonResponse

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Read-only snapshot of the eval collection.

    Each request builds its own filter and comparison state from the query
    string, so the service itself only holds the item list.
    """

    def __init__(self, content_root: Optional[Path] = None, max_comparison_items: int = MAX_COMPARISON_ITEMS):
        self.loader = ContentLoader(content_root) if content_root else None
        self.max_comparison_items = max_comparison_items
        self._items: List[EvalItem] = []
        self._by_path: Dict[str, EvalItem] = {}

    @property
    def items(self) -> List[EvalItem]:
        return self._items

    def set_items(self, items: List[EvalItem]) -> None:
        # Rebind rather than mutate so in-flight requests keep a consistent list
        self._items = list(items)
        self._by_path = {item.path: item for item in self._items}

    def reload(self) -> LoadResult:
        if self.loader is None:
            raise RuntimeError("CatalogService has no content directory")
        result = self.loader.load()
        self.set_items(result.items)
        return result

    def get(self, path: str) -> Optional[EvalItem]:
        if not path.startswith("/"):
            path = "/" + path
        return self._by_path.get(path.rstrip("/") or "/")

    def search(self, query: Union[str, Mapping, None]) -> EvalListResponse:
        facet_filter = FacetedFilter.from_query(query)
        matched = facet_filter.filter_items(self._items)
        logger.debug(f"Filter {facet_filter!r} matched {len(matched)}/{len(self._items)}")
        return EvalListResponse(
            items=matched,
            total=len(self._items),
            filtered=len(matched),
            active_filter_count=facet_filter.active_filter_count,
            query=facet_filter.to_query(),
        )

    def compare(self, query: Union[str, Mapping, None]) -> ComparisonResponse:
        comparison = ComparisonSet(UrlState(query), max_items=self.max_comparison_items)
        comparison.register_items(self._items)
        return ComparisonResponse(
            paths=comparison.selected_paths,
            items=comparison.comparison_items,
            count=comparison.count,
            can_compare=comparison.can_compare,
            can_add_more=comparison.can_add_more,
            max_items=comparison.max_items,
        )
