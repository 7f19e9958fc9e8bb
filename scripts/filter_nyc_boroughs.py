#!/usr/bin/env python3
"""
Remove every school outside the NYC five boroughs from the record store.

Deletes run in fixed-size batches. The run is idempotent: a second pass
finds nothing left to delete.

Usage:
    python scripts/filter_nyc_boroughs.py [--batch-size N] [--dry-run] [--database-url URL]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings
from src.data.cleanup import filter_to_nyc_boroughs
from src.data.db import get_engine, get_session_factory, init_db
from src.data.store import SchoolStore

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Delete non-NYC schools from the record store"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=get_settings().CLEANUP_BATCH_SIZE,
        help="DBNs per delete statement (default: %(default)s)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be deleted without deleting"
    )
    parser.add_argument(
        "--database-url",
        help="Override DATABASE_URL"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        engine = get_engine(args.database_url)
        init_db(engine)
        store = SchoolStore(get_session_factory(engine))
        result = filter_to_nyc_boroughs(store, batch_size=args.batch_size, dry_run=args.dry_run)
    except Exception:
        logger.exception("Cleanup failed; batches already deleted are kept, rerun to finish")
        return 1

    logger.info(
        "Deleted %d of %d schools in %d batches; %d remain",
        result.deleted, result.total_before, result.batches, result.remaining,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
