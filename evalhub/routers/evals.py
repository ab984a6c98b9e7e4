import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from evalhub.core.config import settings
from evalhub.core.constants import (
    get_use_cases,
    get_languages,
    get_difficulties,
    get_difficulty_descriptions,
    get_tag_categories,
)
from evalhub.core.exceptions import ContentLoadError
from evalhub.core.frameworks import FrameworkStatus, get_framework_slugs, get_frameworks
from evalhub.schemas import (
    EvalItem,
    EvalListResponse,
    ComparisonResponse,
    ReloadResponse,
    FacetsResponse,
)
from evalhub.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_STR, tags=["evals"])


def get_catalog(request: Request) -> CatalogService:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(status_code=500, detail="Services not initialized")
    return catalog


@router.get("/evals", response_model=EvalListResponse)
async def list_evals(
    tags: Optional[str] = Query(None, description="Comma-separated; item must have every tag"),
    frameworks: Optional[str] = Query(None, description="Comma-separated framework slugs"),
    use_cases: Optional[str] = Query(None, description="Comma-separated use cases"),
    languages: Optional[str] = Query(None, description="Comma-separated; item must have at least one"),
    difficulties: Optional[str] = Query(None, description="Comma-separated difficulty levels"),
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Faceted listing of the catalog.
    Unknown facet values are ignored; `query` in the response holds the
    canonical parameters actually applied.
    """
    query = {
        "tags": tags,
        "frameworks": frameworks,
        "use_cases": use_cases,
        "languages": languages,
        "difficulties": difficulties,
    }
    return catalog.search(query)


@router.get("/evals/compare", response_model=ComparisonResponse)
async def compare_evals(
    compare: Optional[str] = Query(None, description="Comma-separated eval paths, in selection order"),
    catalog: CatalogService = Depends(get_catalog),
):
    return catalog.compare({"compare": compare})


@router.post("/evals/reload", response_model=ReloadResponse)
async def reload_evals(catalog: CatalogService = Depends(get_catalog)):
    """Re-read the content directory."""
    try:
        result = catalog.reload()
    except ContentLoadError as e:
        logger.error(f"Reload failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return ReloadResponse(loaded=len(result.items), skipped=result.skipped)


@router.get("/evals/{path:path}", response_model=EvalItem)
async def get_eval(path: str, catalog: CatalogService = Depends(get_catalog)):
    item = catalog.get(path)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Eval not found: /{path}")
    return item


@router.get("/frameworks")
async def list_frameworks(status: Optional[FrameworkStatus] = None):
    return {"frameworks": [f.to_dict() for f in get_frameworks(status)]}


@router.get("/facets", response_model=FacetsResponse)
async def list_facets():
    """Accepted values for every filter parameter."""
    return FacetsResponse(
        use_cases=get_use_cases(),
        languages=get_languages(),
        difficulties=get_difficulties(),
        difficulty_descriptions=get_difficulty_descriptions(),
        frameworks=get_framework_slugs(),
        tag_categories=get_tag_categories(),
    )
