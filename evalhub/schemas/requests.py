"""Request schemas."""

from pydantic import BaseModel, Field
from typing import Any


class ViewRequest(BaseModel):
    """Page view beacon sent by the eval page."""
    # Checked by the analytics service: a missing or non-string path is a 400
    path: Any = Field(None, description="Content path that was viewed")

    class Config:
        json_schema_extra = {
            "example": {"path": "/evalite/rag/faithfulness"}
        }
