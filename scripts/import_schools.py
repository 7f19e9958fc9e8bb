#!/usr/bin/env python3
"""
Import schools from the NYC School Survey CSV into the record store.

Rows are upserted by DBN in batches; a failed batch is logged and the
import continues with the next one.

Usage:
    python scripts/import_schools.py [CSV_PATH] [--batch-size N] [--database-url URL]
"""

import argparse
import logging
import math
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.exc import SQLAlchemyError

from config.settings import get_settings
from src.data.db import get_engine, get_session_factory, init_db
from src.data.importer import load_survey_csv
from src.data.store import SchoolStore

logger = logging.getLogger(__name__)


def import_in_batches(store: SchoolStore, schools: list, batch_size: int) -> tuple[int, int]:
    """Upsert schools batch by batch. Returns (imported, failed)."""
    imported = 0
    failed = 0
    total_batches = math.ceil(len(schools) / batch_size)
    for i in range(0, len(schools), batch_size):
        batch = schools[i:i + batch_size]
        batch_num = i // batch_size + 1
        try:
            imported += store.upsert_schools(batch)
            logger.info("Batch %d/%d: processed %d schools (total: %d/%d)",
                        batch_num, total_batches, len(batch), imported, len(schools))
        except SQLAlchemyError as e:
            failed += len(batch)
            logger.error("Batch %d/%d failed: %s", batch_num, total_batches, e)
    return imported, failed


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Import NYC School Survey data")
    parser.add_argument("csv_path", nargs="?", default=settings.SURVEY_CSV_PATH,
                        help="Survey CSV export (default: %(default)s)")
    parser.add_argument("--batch-size", type=int, default=settings.IMPORT_BATCH_SIZE,
                        help="Schools per upsert batch (default: %(default)s)")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        result = load_survey_csv(args.csv_path)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1

    engine = get_engine(args.database_url)
    init_db(engine)
    store = SchoolStore(get_session_factory(engine))
    imported, failed = import_in_batches(store, result.schools, args.batch_size)

    logger.info("Import complete: %d imported, %d failed, %d rows skipped",
                imported, failed, len(result.errors))
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
