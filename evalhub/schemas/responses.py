"""Response schemas."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from .evals import EvalItem, ComparisonEval


class EvalListResponse(BaseModel):
    items: List[EvalItem]
    total: int = Field(..., description="Items in the catalog before filtering")
    filtered: int
    active_filter_count: int
    query: Dict[str, str] = Field(default_factory=dict, description="Canonical filter query parameters")


class ComparisonResponse(BaseModel):
    paths: List[str]
    items: List[ComparisonEval]
    count: int
    can_compare: bool
    can_add_more: bool
    max_items: int


class ReloadResponse(BaseModel):
    status: str = "reloaded"
    loaded: int
    skipped: int


class FacetsResponse(BaseModel):
    use_cases: List[str]
    languages: List[str]
    difficulties: List[str]
    difficulty_descriptions: Dict[str, str]
    frameworks: List[str]
    tag_categories: Dict[str, Dict]


class EvalStats(BaseModel):
    path: str
    view_count: int = 0
    last_viewed_at: Optional[str] = None
    popularity: Optional[str] = None
    formatted_views: Optional[str] = None


class TopEvalsResponse(BaseModel):
    evals: List[EvalStats] = Field(default_factory=list)


class ViewRecord(BaseModel):
    id: str
    viewed_at: Optional[str] = None
    visitor_hash: Optional[str] = None


class RecentViewsResponse(BaseModel):
    path: str
    views: List[ViewRecord] = Field(default_factory=list)
