"""
Centralized constants and enums for EvalHub.

This module is the single source of truth for the closed value sets used by
content frontmatter and by filter query parameters. Adding a new use case,
language or tag only requires editing this file.
"""

from enum import Enum
from typing import List, Dict, FrozenSet

from evalhub.core.frameworks import get_framework_slugs


# ============================================================================
# Use Cases
# ============================================================================

class UseCase(str, Enum):
    """Kind of system an evaluation pattern targets."""
    RAG = "rag"
    CHATBOT = "chatbot"
    CODE_GEN = "code-gen"
    CLASSIFICATION = "classification"
    PROMPT_ENGINEERING = "prompt-engineering"
    EXPERIMENTATION = "experimentation"
    OTHER = "other"


def get_use_cases() -> List[str]:
    """Get all use case values."""
    return [use_case.value for use_case in UseCase]


# ============================================================================
# Languages
# ============================================================================

class Language(str, Enum):
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    YAML = "yaml"


def get_languages() -> List[str]:
    """Get all language values."""
    return [language.value for language in Language]


# ============================================================================
# Difficulty
# ============================================================================

class Difficulty(str, Enum):
    """Difficulty levels for an evaluation snippet."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def get_difficulties() -> List[str]:
    """Get all difficulty values."""
    return [level.value for level in Difficulty]


def get_difficulty_descriptions() -> Dict[str, str]:
    """Get human-readable descriptions for each difficulty level."""
    return {
        Difficulty.BEGINNER.value: "Drop-in eval, minimal setup",
        Difficulty.INTERMEDIATE.value: "Needs a dataset or custom scorer",
        Difficulty.ADVANCED.value: "Multi-step pipeline or production wiring"
    }


# ============================================================================
# Tags
# ============================================================================

class Tag(str, Enum):
    # Metrics
    ACCURACY = "accuracy"
    PRECISION = "precision"
    RECALL = "recall"
    F1 = "f1"
    LATENCY = "latency"
    RELEVANCE = "relevance"
    COHERENCE = "coherence"
    COMPLETENESS = "completeness"
    CORRECTNESS = "correctness"
    COVERAGE = "coverage"
    # Concerns
    HALLUCINATION = "hallucination"
    SAFETY = "safety"
    GROUNDING = "grounding"
    CONTEXT = "context"
    MEMORY = "memory"
    MODERATION = "moderation"
    # Stage
    PRODUCTION = "production"
    TESTING = "testing"
    BENCHMARKING = "benchmarking"
    STREAMING = "streaming"


TAG_CATEGORIES: Dict[str, Dict] = {
    "metrics": {
        "label": "Metrics",
        "tags": [
            Tag.ACCURACY, Tag.PRECISION, Tag.RECALL, Tag.F1, Tag.LATENCY,
            Tag.RELEVANCE, Tag.COHERENCE, Tag.COMPLETENESS, Tag.CORRECTNESS,
            Tag.COVERAGE,
        ],
    },
    "concerns": {
        "label": "Concerns",
        "tags": [
            Tag.HALLUCINATION, Tag.SAFETY, Tag.GROUNDING, Tag.CONTEXT,
            Tag.MEMORY, Tag.MODERATION,
        ],
    },
    "stage": {
        "label": "Stage",
        "tags": [Tag.PRODUCTION, Tag.TESTING, Tag.BENCHMARKING, Tag.STREAMING],
    },
}


def get_tags() -> List[str]:
    """Get all tag values."""
    return [tag.value for tag in Tag]


def get_tag_categories() -> Dict[str, Dict]:
    """Get tag categories with plain string tags (JSON friendly)."""
    return {
        key: {"label": category["label"], "tags": [tag.value for tag in category["tags"]]}
        for key, category in TAG_CATEGORIES.items()
    }


# ============================================================================
# Facets
# ============================================================================

class Facet(str, Enum):
    """Filter dimensions. Values double as URL query parameter names."""
    TAGS = "tags"
    FRAMEWORKS = "frameworks"
    USE_CASES = "use_cases"
    LANGUAGES = "languages"
    DIFFICULTIES = "difficulties"


COMPARE_PARAM = "compare"
MAX_COMPARISON_ITEMS = 4


def get_facet_values() -> Dict[Facet, FrozenSet[str]]:
    """
    Closed set of accepted values per facet.

    Frameworks come from the framework registry so that a new framework
    only needs registering once.
    """
    return {
        Facet.TAGS: frozenset(get_tags()),
        Facet.FRAMEWORKS: frozenset(get_framework_slugs()),
        Facet.USE_CASES: frozenset(get_use_cases()),
        Facet.LANGUAGES: frozenset(get_languages()),
        Facet.DIFFICULTIES: frozenset(get_difficulties()),
    }


# ============================================================================
# Popularity
# ============================================================================

class PopularityTier(str, Enum):
    HOT = "hot"
    POPULAR = "popular"
    RISING = "rising"


POPULARITY_THRESHOLDS = [
    (100, PopularityTier.HOT),
    (50, PopularityTier.POPULAR),
    (10, PopularityTier.RISING),
]


def popularity_tier(view_count: int) -> PopularityTier | None:
    """Map a view count to a popularity badge, None below the lowest tier."""
    for threshold, tier in POPULARITY_THRESHOLDS:
        if view_count >= threshold:
            return tier
    return None


def format_view_count(count: int) -> str:
    """Compact view count: 1.2M, 3.4k, or the plain number."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}k"
    return str(count)
