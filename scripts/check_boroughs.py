#!/usr/bin/env python3
"""
Report how the schools in the record store split across the five boroughs.

Usage:
    python scripts/check_boroughs.py [--database-url URL]
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.data.cleanup import borough_report
from src.data.db import get_engine, get_session_factory
from src.data.geography import NON_NYC
from src.data.store import SchoolStore


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Count schools by borough")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    store = SchoolStore(get_session_factory(get_engine(args.database_url)))
    counts, examples = borough_report(store)
    total = sum(counts.values())

    print("Schools by Borough:")
    print("==================")
    for borough, count in counts.items():
        print(f"{borough}: {count} schools")

    if examples:
        print("\nExample Non-NYC Schools (first 10):")
        for example in examples:
            print(f"  - {example}")

    print(f"\nTotal: {total} schools")
    print(f"NYC 5-Borough: {total - counts[NON_NYC]}")
    print(f"Non-NYC: {counts[NON_NYC]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
