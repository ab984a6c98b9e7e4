"""Schemas package."""

from .evals import EvalItem, ChangelogEntry, ComparisonEval
from .requests import ViewRequest
from .responses import (
    EvalListResponse,
    ComparisonResponse,
    ReloadResponse,
    FacetsResponse,
    EvalStats,
    TopEvalsResponse,
    ViewRecord,
    RecentViewsResponse,
)

__all__ = [
    # Content
    "EvalItem",
    "ChangelogEntry",
    "ComparisonEval",
    # Requests
    "ViewRequest",
    # Responses
    "EvalListResponse",
    "ComparisonResponse",
    "ReloadResponse",
    "FacetsResponse",
    "EvalStats",
    "TopEvalsResponse",
    "ViewRecord",
    "RecentViewsResponse",
]
