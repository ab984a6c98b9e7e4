import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request

from evalhub.core.config import settings
from evalhub.core.exceptions import ContentLoadError
from evalhub.core.logging_config import setup_logging, new_request_id, request_id_var
from evalhub.core.redis_store import get_view_store
from evalhub.routers import analytics, evals
from evalhub.services.analytics_service import AnalyticsService
from evalhub.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.ENVIRONMENT, settings.LOG_LEVEL, Path(settings.LOG_DIR) if settings.LOG_DIR else None)
    logger.info("🚀 Starting EvalHub API...")

    catalog = CatalogService(Path(settings.CONTENT_DIR), settings.MAX_COMPARISON_ITEMS)
    try:
        catalog.reload()
    except ContentLoadError as e:
        # Serve an empty catalog; /evals/reload can fix it later
        logger.error(f"Content not loaded: {e}")
    app.state.catalog = catalog

    app.state.analytics = None
    if settings.REDIS_ENABLED:
        try:
            app.state.analytics = AnalyticsService(
                get_view_store(),
                default_limit=settings.STATS_DEFAULT_LIMIT,
                max_limit=settings.STATS_MAX_LIMIT,
            )
        except RuntimeError as e:
            logger.warning(f"Analytics disabled: {e}")

    yield
    # Shutdown
    logger.info("🛑 Shutting down EvalHub API...")


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan if use_lifespan else None,
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or new_request_id()
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["x-request-id"] = request_id
        return response

    @app.get("/health")
    async def health_check(request: Request):
        health = {"status": "ok", "version": settings.APP_VERSION}
        analytics_service = getattr(request.app.state, "analytics", None)
        if analytics_service is not None:
            health["analytics"] = analytics_service.store.health_check()
        return health

    app.include_router(evals.router)
    app.include_router(analytics.router)
    return app


app = create_app()
