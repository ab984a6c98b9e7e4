"""Eval content schemas."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from evalhub.core.constants import UseCase, Language, Difficulty, Tag


class ChangelogEntry(BaseModel):
    version: str
    date: str
    author: Optional[str] = None
    changes: Optional[List[str]] = None

    @field_validator("version", "date", mode="before")
    @classmethod
    def coerce_to_str(cls, value):
        # YAML reads `1.0` as a float and `2024-01-05` as a date
        return str(value) if value is not None else value


class EvalItem(BaseModel):
    """One eval snippet from the content collection."""
    path: str = Field(..., description="Routable location, also the unique id (e.g. /evalite/rag/faithfulness)")
    title: str
    description: str
    use_case: Optional[UseCase] = None
    languages: Optional[List[Language]] = None
    tags: Optional[List[Tag]] = None
    difficulty: Optional[Difficulty] = None
    changelog: Optional[List[ChangelogEntry]] = Field(None, description="Newest first")
    models: Optional[List[str]] = None
    metrics: Optional[List[str]] = None
    setup_time: Optional[str] = None
    runtime_cost: Optional[str] = None
    data_requirements: Optional[str] = None
    eval_type: Optional[str] = None
    github_username: Optional[str] = None
    created_at: Optional[str] = None
    body: Optional[str] = Field(None, exclude=True, description="Markdown body below the frontmatter")

    model_config = {"use_enum_values": True, "extra": "ignore"}

    @field_validator("created_at", "setup_time", "runtime_cost", mode="before")
    @classmethod
    def coerce_scalar(cls, value):
        return str(value) if value is not None else value

    @field_validator("path")
    @classmethod
    def path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value

    @property
    def framework(self) -> Optional[str]:
        parts = self.path.split("/")
        return parts[1] if len(parts) > 1 and parts[1] else None


class ComparisonEval(BaseModel):
    """Denormalized snapshot of the fields shown in the comparison table."""
    path: str
    title: str
    description: str
    use_case: Optional[str] = None
    languages: Optional[List[str]] = None
    difficulty: Optional[str] = None
    tags: Optional[List[str]] = None
    models: Optional[List[str]] = None
    setup_time: Optional[str] = None
    runtime_cost: Optional[str] = None
    data_requirements: Optional[str] = None
    eval_type: Optional[str] = None
    metrics: Optional[List[str]] = None
