"""Import school records from the NYC School Survey CSV export."""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .geography import extract_district_from_dbn
from .models import School
from .scoring import round_half_up

logger = logging.getLogger(__name__)

_DBN_PREFIX = re.compile(r"^([0-9]{2}[A-Z][0-9]{3})")

# School field -> (CSV header, which occurrence to use when the header repeats)
SURVEY_COLUMNS = {
    "student_safety": ("Safety", "first"),
    "student_teacher_trust": ("Student-Teacher Trust", "first"),
    "student_engagement": ("Skills For Success", "first"),
    "teacher_quality": ("Strong Core Instruction", "first"),
    "teacher_collaboration": ("Peer Collaboration", "first"),
    "teacher_leadership": ("Instructional Leadership", "first"),
    "guardian_satisfaction": ("Family Satisfaction with Child's Education", "last"),
    "guardian_communication": ("Outreach to Parents", "last"),
    "guardian_school_trust": ("Parent-Principal Trust", "last"),
}

# Family score -> survey measures averaged to seed it
FAMILY_SOURCES = {
    "academics_score": ("teacher_quality", "student_engagement"),
    "climate_score": ("student_safety", "guardian_satisfaction"),
    "progress_score": ("teacher_collaboration", "teacher_leadership"),
}


@dataclass
class ImportResult:
    """Schools parsed from a survey file, plus per-row problems."""

    schools: list[School] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def extract_school_name(name_field: str) -> str:
    """'02M158 - P.S. 158 Bayard Taylor' -> 'P.S. 158 Bayard Taylor'."""
    parts = name_field.split(" - ")
    if len(parts) < 2:
        return name_field.strip()
    return " - ".join(parts[1:]).strip()


def derive_grade_band(name: str) -> str:
    """Guess a grade band from a school name, defaulting to K-5."""
    lower = name.lower()
    # J.H.S. also contains H.S., so middle schools are checked first
    if any(s in lower for s in ("middle school", "m.s.", "junior high", "j.h.s.")):
        return "6-8"
    if "high school" in lower or "h.s." in lower:
        return "9-12"
    if any(s in lower for s in ("p.s.", "elementary", "primary")):
        return "K-5"
    if "k-8" in lower:
        return "K-8"
    return "K-5"


def parse_score(value) -> Optional[float]:
    """Parse '85', '85%' or '85.4' to a whole-number score; blanks and N/A are None."""
    if value is None:
        return None
    text = str(value).strip().rstrip("%")
    if not text or text.upper() == "N/A":
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return round_half_up(number) if math.isfinite(number) else None


def _find_column(columns: list[str], header: str, occurrence: str) -> Optional[str]:
    """Locate a header, allowing for pandas' '.1', '.2' suffixes on repeats."""
    pattern = re.compile(rf"^{re.escape(header)}(\.\d+)?$")
    matches = [c for c in columns if pattern.match(c)]
    if not matches:
        return None
    return matches[-1] if occurrence == "last" else matches[0]


def _mean_score(values) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round_half_up(sum(present) / len(present))


def parse_survey_frame(df: pd.DataFrame) -> ImportResult:
    """Turn a survey DataFrame (header already applied) into School records."""
    result = ImportResult()
    if df.empty:
        return result

    columns = list(df.columns)
    name_col = columns[0]
    column_map = {}
    for field_name, (header, occurrence) in SURVEY_COLUMNS.items():
        col = _find_column(columns, header, occurrence)
        if col is None:
            logger.warning("Survey column not found: %s", header)
        column_map[field_name] = col

    seen = set()
    for idx, row in df.iterrows():
        name_field = str(row[name_col] or "").strip()
        if not name_field:
            continue

        match = _DBN_PREFIX.match(name_field)
        if not match:
            result.errors.append(f"Row {idx}: No valid DBN found in \"{name_field}\"")
            continue

        dbn = match.group(1)
        if dbn in seen:
            result.errors.append(f"Row {idx}: Duplicate DBN {dbn}")
            continue
        seen.add(dbn)

        name = extract_school_name(name_field)
        survey = {
            field_name: (parse_score(row[col]) if col is not None else None)
            for field_name, col in column_map.items()
        }
        families = {
            family: _mean_score(survey[s] for s in sources)
            for family, sources in FAMILY_SOURCES.items()
        }

        result.schools.append(
            School(
                dbn=dbn,
                name=name,
                district=extract_district_from_dbn(dbn),
                grade_band=derive_grade_band(name),
                **families,
                **survey,
            )
        )

    return result


def load_survey_csv(path: Union[str, Path]) -> ImportResult:
    """
    Load the survey export.

    The first line is a title banner and the second holds the column
    headers; the first column reads '<DBN> - <School Name>'.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Survey CSV not found: {path}")

    df = pd.read_csv(path, header=1, dtype=str, keep_default_na=False)
    result = parse_survey_frame(df)
    logger.info("Parsed %d schools from %s", len(result.schools), path.name)
    if result.errors:
        logger.warning("Encountered %d errors during parsing (first 10):", len(result.errors))
        for err in result.errors[:10]:
            logger.warning("  - %s", err)
    return result
