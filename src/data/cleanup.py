"""Batch maintenance: keep only NYC 5-borough schools in the record store."""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol

from config.settings import get_settings
from .geography import count_by_borough, get_borough_from_dbn, is_nyc_5_borough

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def select_all(self, fields=None) -> list[dict]: ...

    def delete_where_dbn_in(self, dbns) -> int: ...


@dataclass
class CleanupResult:
    """Outcome of a cleanup run."""

    total_before: int
    deleted: int
    batches: int
    remaining: int
    dry_run: bool = False


def find_non_nyc_dbns(store: RecordStore) -> tuple[int, list[str]]:
    """Return the total record count and the DBNs that are not NYC 5-borough."""
    rows = store.select_all(["dbn"])
    non_nyc = [row["dbn"] for row in rows if not is_nyc_5_borough(row["dbn"])]
    return len(rows), non_nyc


def filter_to_nyc_boroughs(
    store: RecordStore,
    batch_size: Optional[int] = None,
    dry_run: bool = False,
) -> CleanupResult:
    """
    Delete every school whose DBN does not map to a NYC borough.

    Deletes run sequentially in chunks of ``batch_size`` so no single
    statement grows past the store's parameter limit. Store errors propagate;
    batches already deleted stay deleted and a rerun picks up the rest.
    """
    if batch_size is None:
        batch_size = get_settings().CLEANUP_BATCH_SIZE
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    logger.info("Filtering record store to NYC 5-borough schools only")
    total, non_nyc = find_non_nyc_dbns(store)
    logger.info("Current total: %d schools", total)
    logger.info("Non-NYC schools to remove: %d", len(non_nyc))

    if dry_run:
        for dbn in non_nyc[:10]:
            logger.info("Would delete %s", dbn)
        return CleanupResult(total, 0, 0, total, dry_run=True)

    batch_count = math.ceil(len(non_nyc) / batch_size)
    deleted = 0
    for i in range(0, len(non_nyc), batch_size):
        batch = non_nyc[i:i + batch_size]
        deleted += store.delete_where_dbn_in(batch)
        logger.info("Deleted batch %d/%d", i // batch_size + 1, batch_count)

    remaining = len(store.select_all(["dbn"]))
    logger.info("Complete! Record store now contains %d NYC 5-borough schools", remaining)
    return CleanupResult(total, deleted, batch_count, remaining)


def borough_report(store: RecordStore, example_limit: int = 10) -> tuple[dict[str, int], list[str]]:
    """
    Count schools per borough.

    Returns the counts (including 'Non-NYC') and up to ``example_limit``
    "DBN - Name" strings for schools outside the five boroughs.
    """
    rows = store.select_all(["dbn", "name"])
    counts = count_by_borough(row["dbn"] for row in rows)
    examples = [
        f"{row['dbn']} - {row['name']}"
        for row in rows
        if get_borough_from_dbn(row["dbn"]) is None
    ][:example_limit]
    return counts, examples
