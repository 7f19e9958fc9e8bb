"""NYC community school district to borough classification."""

import re
from collections import Counter
from types import MappingProxyType
from typing import Iterable, Optional

from .models import Borough

NON_NYC = "Non-NYC"

_DBN_PATTERN = re.compile(r"[0-9]{2}[A-Z][0-9]{3}")
_LEADING_DIGITS = re.compile(r"[0-9]+")

DISTRICT_TO_BOROUGH = MappingProxyType({
    # Manhattan (Districts 1-6)
    1: Borough.MANHATTAN,
    2: Borough.MANHATTAN,
    3: Borough.MANHATTAN,
    4: Borough.MANHATTAN,
    5: Borough.MANHATTAN,
    6: Borough.MANHATTAN,
    # Bronx (Districts 7-12)
    7: Borough.BRONX,
    8: Borough.BRONX,
    9: Borough.BRONX,
    10: Borough.BRONX,
    11: Borough.BRONX,
    12: Borough.BRONX,
    # Brooklyn (Districts 13-23, plus citywide District 32)
    13: Borough.BROOKLYN,
    14: Borough.BROOKLYN,
    15: Borough.BROOKLYN,
    16: Borough.BROOKLYN,
    17: Borough.BROOKLYN,
    18: Borough.BROOKLYN,
    19: Borough.BROOKLYN,
    20: Borough.BROOKLYN,
    21: Borough.BROOKLYN,
    22: Borough.BROOKLYN,
    23: Borough.BROOKLYN,
    32: Borough.BROOKLYN,
    # Queens (Districts 24-30)
    24: Borough.QUEENS,
    25: Borough.QUEENS,
    26: Borough.QUEENS,
    27: Borough.QUEENS,
    28: Borough.QUEENS,
    29: Borough.QUEENS,
    30: Borough.QUEENS,
    # Staten Island (District 31)
    31: Borough.STATEN_ISLAND,
})


def extract_district_from_dbn(dbn) -> int:
    """
    Extract the district number from a DBN.

    DBN format is ##X### where ## is the zero-padded district, X the borough
    letter and ### the school number, e.g. 02M158 -> district 2. Anything
    that does not start with a digit yields 0.
    """
    if not isinstance(dbn, str):
        return 0
    match = _LEADING_DIGITS.match(dbn[:2])
    return int(match.group()) if match else 0


def get_borough_for_district(district: int) -> Optional[Borough]:
    return DISTRICT_TO_BOROUGH.get(district)


def get_borough_from_dbn(dbn) -> Optional[Borough]:
    """Get the borough for a DBN, or None if it is not a NYC 5-borough school."""
    return get_borough_for_district(extract_district_from_dbn(dbn))


def is_nyc_5_borough(dbn) -> bool:
    """Check if a DBN belongs to a NYC 5-borough school."""
    return get_borough_from_dbn(dbn) is not None


def is_valid_dbn(dbn) -> bool:
    """Check that a code has the full ##X### shape."""
    return isinstance(dbn, str) and bool(_DBN_PATTERN.fullmatch(dbn))


def get_nyc_districts() -> list[int]:
    """All valid NYC 5-borough district numbers."""
    return sorted(DISTRICT_TO_BOROUGH)


def get_districts_for_borough(borough: Borough) -> list[int]:
    """District numbers that belong to a borough."""
    return sorted(d for d, b in DISTRICT_TO_BOROUGH.items() if b == borough)


def count_by_borough(dbns: Iterable[str]) -> dict[str, int]:
    """Count DBNs per borough; unmapped codes are counted under 'Non-NYC'."""
    counts = Counter()
    for dbn in dbns:
        borough = get_borough_from_dbn(dbn)
        counts[borough.value if borough else NON_NYC] += 1

    result = {b.value: counts.get(b.value, 0) for b in Borough}
    result[NON_NYC] = counts.get(NON_NYC, 0)
    return result
