import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import ValidationError

from evalhub.core.exceptions import ContentLoadError, InvalidFrontmatterError
from evalhub.schemas.evals import EvalItem

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)
ORDER_PREFIX_RE = re.compile(r"^\d+\.")


def split_frontmatter(text: str) -> Tuple[Optional[dict], str]:
    """Return (frontmatter, body). Frontmatter is None when the file has none."""
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None, text
    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        raise InvalidFrontmatterError("Frontmatter must be a YAML mapping")
    return data, text[match.end():]


def content_path(relative: Path) -> str:
    """
    Routable path for a content file.

    `1.evalite/2.rag/faithfulness.md` -> `/evalite/rag/faithfulness`;
    `index.md` files map to their directory.
    """
    parts = [ORDER_PREFIX_RE.sub("", part) for part in relative.with_suffix("").parts]
    if parts and parts[-1] == "index":
        parts = parts[:-1]
    return "/" + "/".join(parts)


@dataclass
class LoadResult:
    items: List[EvalItem] = field(default_factory=list)
    errors: List[InvalidFrontmatterError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.errors)


class ContentLoader:
    """Loads eval pages from a directory of markdown files."""

    def __init__(self, content_root: Path):
        self.content_root = Path(content_root)

    def load_file(self, file: Path) -> EvalItem:
        relative = file.relative_to(self.content_root)
        try:
            text = file.read_text(encoding="utf-8")
            frontmatter, body = split_frontmatter(text)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise InvalidFrontmatterError(f"Cannot read {relative}: {e}", file_path=str(relative)) from e
        except InvalidFrontmatterError as e:
            e.file_path = str(relative)
            raise

        if frontmatter is None:
            raise InvalidFrontmatterError(f"No frontmatter in {relative}", file_path=str(relative))

        try:
            return EvalItem(**{**frontmatter, "path": content_path(relative), "body": body})
        except ValidationError as e:
            raise InvalidFrontmatterError(
                f"Invalid frontmatter in {relative}: {e.error_count()} error(s)",
                file_path=str(relative),
                errors=e.errors(),
            ) from e

    def load(self) -> LoadResult:
        if not self.content_root.is_dir():
            raise ContentLoadError(
                f"Content directory not found: {self.content_root}",
                content_dir=str(self.content_root),
            )

        files = sorted(self.content_root.rglob("*.md"))
        logger.info(f"📄 Found {len(files)} content files in {self.content_root}")

        result = LoadResult()
        seen = set()
        for file in files:
            try:
                item = self.load_file(file)
            except InvalidFrontmatterError as e:
                logger.warning(str(e))
                result.errors.append(e)
                continue
            if item.framework is None:
                logger.debug(f"Skipping {item.path}: not under a framework directory")
                continue
            if item.path in seen:
                logger.warning(f"Duplicate content path {item.path} ({file}), keeping the first")
                continue
            seen.add(item.path)
            result.items.append(item)

        logger.info(f"✅ Loaded {len(result.items)} evals, skipped {result.skipped}")
        return result
