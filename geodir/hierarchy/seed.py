"""
Nepal seeder — loads a flat feed and builds the country's division tree.

Run via:
  python -m geodir.hierarchy.seed data.json
  alembic upgrade head && python -m geodir.hierarchy.seed data.csv

Safe to run multiple times: the country is keyed by ISO code and every
division is upserted on (country_id, parent_id, level, name).
"""

import logging
import sys
from pathlib import Path

from geodir.database import SessionLocal
from geodir.hierarchy.builder import BuildSummary, build_hierarchy
from geodir.hierarchy.feed import load_feed

logger = logging.getLogger(__name__)


def seed_from_file(path: str, session=None) -> BuildSummary:
    """
    Build the hierarchy from a feed file.
    Uses a session if provided (for testability); opens its own otherwise.
    """
    feed_path = Path(path)
    rows = load_feed(feed_path.read_bytes(), feed_path.name)

    _owns_session = session is None
    if _owns_session:
        session = SessionLocal()
    try:
        return build_hierarchy(session, rows)
    finally:
        if _owns_session:
            session.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    if len(sys.argv) != 2:
        print("usage: python -m geodir.hierarchy.seed <feed.json|feed.csv>", file=sys.stderr)
        sys.exit(2)
    try:
        summary = seed_from_file(sys.argv[1])
        print(
            f"✓ Seeded country id={summary.country_id}: "
            f"created {sum(summary.created.values())}, "
            f"reused {sum(summary.reused.values())}, "
            f"skipped {summary.skipped_rows} rows"
        )
        sys.exit(0)
    except Exception as e:
        print(f"✗ Seed failed: {e}", file=sys.stderr)
        sys.exit(1)
