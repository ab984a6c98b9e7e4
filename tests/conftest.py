from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient

from evalhub.core.redis_store import RedisViewStore
from evalhub.main import create_app
from evalhub.schemas import EvalItem
from evalhub.services.analytics_service import AnalyticsService
from evalhub.services.catalog_service import CatalogService

REPO_CONTENT = Path(__file__).resolve().parents[1] / "content"


@pytest.fixture
def items():
    return [
        {
            "path": "/evalite/rag/faithfulness",
            "title": "RAG Faithfulness",
            "description": "Grounded answers",
            "use_case": "rag",
            "languages": ["typescript"],
            "difficulty": "intermediate",
            "tags": ["hallucination", "grounding", "production"],
        },
        {
            "path": "/evalite/chatbot/safety",
            "title": "Chatbot Safety",
            "description": "Unsafe turns",
            "use_case": "chatbot",
            "languages": ["typescript", "python"],
            "difficulty": "advanced",
            "tags": ["safety", "production", "testing"],
        },
        {
            "path": "/langsmith/rag/correctness",
            "title": "Answer Correctness",
            "description": "Reference answers",
            "use_case": "rag",
            "languages": ["python"],
            "difficulty": "beginner",
            "tags": ["safety"],
        },
        {
            "path": "/braintrust/misc/bare",
            "title": "Bare",
            "description": "No optional fields",
        },
    ]


@pytest.fixture
def eval_items(items):
    return [EvalItem(**item) for item in items]


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def view_store(redis_client):
    return RedisViewStore(client=redis_client, key_prefix="test", history_limit=5)


@pytest.fixture
def client(eval_items, view_store):
    app = create_app(use_lifespan=False)
    catalog = CatalogService(REPO_CONTENT)
    catalog.set_items(eval_items)
    app.state.catalog = catalog
    app.state.analytics = AnalyticsService(view_store)
    return TestClient(app)
