import argparse
import logging

from evalhub.core.redis_store import get_view_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def reset_analytics():
    """Show the current top evals, then wipe every view counter."""
    parser = argparse.ArgumentParser(description="Reset EvalHub view counters")
    parser.add_argument("--force", action="store_true", help="Delete without confirmation")
    args = parser.parse_args()

    store = get_view_store()
    top = store.top(10)
    logger.info(f"Top {len(top)} evals before reset:")
    for row in top:
        print(f" - {row['path']}: {row['view_count']}")

    if not args.force:
        confirm = input("Delete all view counters? (y/n): ")
        if confirm.lower() != "y":
            logger.info("Skipped")
            return

    store.reset()
    logger.info("Deleted.")


if __name__ == "__main__":
    reset_analytics()
