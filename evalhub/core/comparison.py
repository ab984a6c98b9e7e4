"""
Bounded, ordered selection of evals for side-by-side comparison.

The selection lives in the `compare` query parameter as a comma-separated
list of paths, in the order the user picked them. Full item data is looked
up in a registry that is rebuilt from scratch whenever the catalog reloads.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from evalhub.core.constants import COMPARE_PARAM, MAX_COMPARISON_ITEMS
from evalhub.core.filtering import get_field
from evalhub.core.url_state import QueryBinding, UrlState, split_param
from evalhub.schemas.evals import ComparisonEval

logger = logging.getLogger(__name__)

COMPARISON_FIELDS = [
    "use_case", "languages", "difficulty", "tags", "models", "setup_time",
    "runtime_cost", "data_requirements", "eval_type", "metrics",
]


def parse_compare_param(value: Optional[str], max_items: int = MAX_COMPARISON_ITEMS) -> List[str]:
    """Split `compare`, dropping blanks and repeats, keeping at most `max_items`."""
    paths: List[str] = []
    for path in split_param(value):
        if path not in paths:
            paths.append(path)
    return paths[:max_items]


def to_comparison_eval(item: Any) -> Optional[ComparisonEval]:
    """Snapshot the comparable fields, or None when path/title/description is missing."""
    path = get_field(item, "path")
    title = get_field(item, "title")
    description = get_field(item, "description")
    if not (path and title and description):
        return None
    data = {"path": path, "title": title, "description": description}
    for name in COMPARISON_FIELDS:
        value = get_field(item, name)
        if isinstance(value, list):
            value = [getattr(v, "value", v) for v in value]
        else:
            value = getattr(value, "value", value)
        data[name] = value
    return ComparisonEval(**data)


class ComparisonSet:
    def __init__(
        self,
        url_state: Optional[UrlState] = None,
        max_items: int = MAX_COMPARISON_ITEMS,
    ):
        self.max_items = max_items
        self._paths: List[str] = []
        self._registry: Dict[str, ComparisonEval] = {}
        self.is_compare_modal_open = False
        self._binding: Optional[QueryBinding] = None

        if url_state is not None:
            # Seeded from the URL; later `compare` changes arrive via _on_url_change
            self._paths = parse_compare_param(url_state.query.get(COMPARE_PARAM), max_items)
            self._binding = QueryBinding(
                url_state,
                owned_params=[COMPARE_PARAM],
                serialize=self.to_query,
                on_external_change=self._on_url_change,
            )

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register_items(self, items: Iterable[Any]) -> int:
        """Replace the registry wholesale. Returns how many items were kept."""
        registry: Dict[str, ComparisonEval] = {}
        for item in items:
            snapshot = to_comparison_eval(item)
            if snapshot is not None:
                registry[snapshot.path] = snapshot
        self._registry = registry
        return len(registry)

    @property
    def item_registry(self) -> Dict[str, ComparisonEval]:
        return dict(self._registry)

    @property
    def comparison_items(self) -> List[ComparisonEval]:
        """Registry entries for the selected paths, in selection order."""
        return [self._registry[path] for path in self._paths if path in self._registry]

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selected_paths(self) -> List[str]:
        return list(self._paths)

    @property
    def count(self) -> int:
        return len(self._paths)

    @property
    def can_compare(self) -> bool:
        return len(self._paths) >= 2

    @property
    def can_add_more(self) -> bool:
        return len(self._paths) < self.max_items

    def is_in_comparison(self, path: str) -> bool:
        return path in self._paths

    def add(self, path: str) -> bool:
        if self.is_in_comparison(path):
            return False
        if not self.can_add_more:
            logger.debug(f"Comparison full ({self.max_items}), ignoring {path}")
            return False
        self._paths = self._paths + [path]
        self._sync()
        return True

    def remove(self, path: str) -> None:
        if path not in self._paths:
            return
        self._paths = [p for p in self._paths if p != path]
        self._sync()

    def toggle(self, item: Union[str, Mapping, Any]) -> bool:
        """Add or remove; returns the resulting membership."""
        path = item if isinstance(item, str) else get_field(item, "path")
        if self.is_in_comparison(path):
            self.remove(path)
            return False
        return self.add(path)

    def clear(self) -> None:
        self._paths = []
        self._sync()

    def open_compare_modal(self) -> bool:
        if self.can_compare:
            self.is_compare_modal_open = True
        return self.is_compare_modal_open

    def close_compare_modal(self) -> None:
        self.is_compare_modal_open = False

    # ------------------------------------------------------------------
    # URL
    # ------------------------------------------------------------------

    def to_query(self) -> Dict[str, str]:
        if not self._paths:
            return {}
        return {COMPARE_PARAM: ",".join(self._paths)}

    def _sync(self) -> None:
        if self._binding is not None:
            self._binding.write_now()

    def _on_url_change(self, query: Mapping[str, str]) -> None:
        # Other components rewriting their own params must not reset the
        # selection; only an actual change of `compare` is adopted.
        paths = parse_compare_param(query.get(COMPARE_PARAM), self.max_items)
        if paths != self._paths:
            self._paths = paths
            if not self.can_compare:
                self.is_compare_modal_open = False

    def close(self) -> None:
        if self._binding is not None:
            self._binding.close()
            self._binding = None
