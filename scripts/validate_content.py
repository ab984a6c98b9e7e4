import argparse
import logging
import sys
from pathlib import Path

from evalhub.core.config import get_settings
from evalhub.core.exceptions import ContentLoadError
from evalhub.core.filtering import framework_of
from evalhub.core.frameworks import get_framework_by_slug
from evalhub.ingestion.loader import ContentLoader

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> int:
    """
    Validate every markdown file in the content directory.
    Exits non-zero when any file is rejected, so CI can gate on it.
    """
    parser = argparse.ArgumentParser(description="Validate eval content frontmatter")
    parser.add_argument("content_dir", nargs="?", default=get_settings().CONTENT_DIR)
    parser.add_argument("--strict", action="store_true", help="Also fail on evals under unknown frameworks")
    args = parser.parse_args()

    try:
        result = ContentLoader(Path(args.content_dir)).load()
    except ContentLoadError as e:
        logger.error(f"❌ {e}")
        return 2

    for error in result.errors:
        print(f"✗ {error.file_path}: {error}")
        for detail in error.errors:
            location = ".".join(str(part) for part in detail.get("loc", ()))
            print(f"    {location}: {detail.get('msg')}")

    # Top-level pages (/, /about) belong to no framework
    unknown = [
        item.path for item in result.items
        if item.path.count("/") > 1 and not get_framework_by_slug(framework_of(item.path))
    ]
    for path in unknown:
        print(f"? {path}: not under a registered framework")

    print(f"\n{len(result.items)} valid, {result.skipped} rejected")
    if result.errors or (args.strict and unknown):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
