import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request

from evalhub.core.exceptions import AnalyticsStoreError, InvalidPathError
from evalhub.schemas import EvalStats, RecentViewsResponse, TopEvalsResponse, ViewRequest
from evalhub.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def get_analytics(request: Request) -> AnalyticsService:
    analytics = getattr(request.app.state, "analytics", None)
    if analytics is None:
        raise HTTPException(status_code=503, detail="Analytics disabled")
    return analytics


@router.post("/view")
async def record_view(
    body: ViewRequest,
    request: Request,
    analytics: AnalyticsService = Depends(get_analytics),
):
    """Count one page view. Clients treat this as fire-and-forget."""
    try:
        analytics.record_view(body.path, request.headers)
    except InvalidPathError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalyticsStoreError as e:
        logger.error(f"View error: {e.__cause__}")
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True}


@router.get("/stats", response_model=Union[EvalStats, TopEvalsResponse])
async def get_stats(
    path: Optional[str] = None,
    limit: Optional[str] = None,
    analytics: AnalyticsService = Depends(get_analytics),
):
    """Counters for `path`, or the top `limit` evals when no path is given."""
    try:
        if path:
            return analytics.get_stats(path)
        return analytics.top_evals(limit)
    except AnalyticsStoreError as e:
        logger.error(f"Stats error: {e.__cause__}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/views", response_model=RecentViewsResponse)
async def get_recent_views(
    path: Optional[str] = None,
    limit: Optional[str] = None,
    analytics: AnalyticsService = Depends(get_analytics),
):
    """Newest raw view records for one path."""
    try:
        return analytics.recent_views(path, limit)
    except InvalidPathError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalyticsStoreError as e:
        logger.error(f"Views error: {e.__cause__}")
        raise HTTPException(status_code=500, detail=str(e))
