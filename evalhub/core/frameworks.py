"""
Registry of supported evaluation frameworks.

An eval's framework is the first segment of its content path
(`/evalite/rag/x` belongs to `evalite`), so every slug here doubles as a
top-level content directory.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional


class FrameworkType(str, Enum):
    LOCAL = "local"
    CLOUD = "cloud"
    AGNOSTIC = "agnostic"


class FrameworkStatus(str, Enum):
    ACTIVE = "active"
    COMING_SOON = "coming-soon"


@dataclass(frozen=True)
class Framework:
    name: str
    slug: str
    language: str
    type: FrameworkType
    color: str
    icon: str
    description: str
    website: str
    file_extension: str
    status: FrameworkStatus
    docs_url: Optional[str] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["type"] = self.type.value
        data["status"] = self.status.value
        return data


FRAMEWORKS: Dict[str, Framework] = {
    "evalite": Framework(
        name="Evalite",
        slug="evalite",
        language="TypeScript",
        type=FrameworkType.LOCAL,
        color="primary",
        icon="i-simple-icons-typescript",
        description="TypeScript-native eval framework built on Vitest",
        website="https://v1.evalite.dev/",
        file_extension=".eval.ts",
        status=FrameworkStatus.ACTIVE,
        docs_url="https://v1.evalite.dev/guides/quickstart/",
    ),
    "promptfoo": Framework(
        name="Promptfoo",
        slug="promptfoo",
        language="YAML/CLI",
        type=FrameworkType.LOCAL,
        color="info",
        icon="i-heroicons-command-line",
        description="CLI-first evaluation framework with YAML configs",
        website="https://promptfoo.dev",
        file_extension=".yaml",
        status=FrameworkStatus.COMING_SOON,
        docs_url="https://promptfoo.dev/docs",
    ),
    "langsmith": Framework(
        name="LangSmith",
        slug="langsmith",
        language="Python",
        type=FrameworkType.CLOUD,
        color="secondary",
        icon="i-simple-icons-python",
        description="LangChain ecosystem evaluation platform",
        website="https://smith.langchain.com",
        file_extension=".py",
        status=FrameworkStatus.COMING_SOON,
        docs_url="https://docs.smith.langchain.com",
    ),
    "braintrust": Framework(
        name="Braintrust",
        slug="braintrust",
        language="Python/TS",
        type=FrameworkType.CLOUD,
        color="warning",
        icon="i-heroicons-light-bulb",
        description="Enterprise AI evaluation and monitoring",
        website="https://braintrust.dev",
        file_extension=".py",
        status=FrameworkStatus.COMING_SOON,
        docs_url="https://braintrust.dev/docs",
    ),
}


def get_framework_by_slug(slug: str) -> Optional[Framework]:
    return FRAMEWORKS.get(slug)


def get_framework_slugs() -> List[str]:
    return list(FRAMEWORKS.keys())


def get_frameworks(status: Optional[FrameworkStatus] = None) -> List[Framework]:
    """All frameworks in declaration order, optionally narrowed by status."""
    if status is None:
        return list(FRAMEWORKS.values())
    return [f for f in FRAMEWORKS.values() if f.status == status]
