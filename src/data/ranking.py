"""Filtering, sorting and ranking of school lists by Overall Score."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

from .geography import get_borough_from_dbn
from .models import Borough, RankedSchool, School, ScoreTier
from .scoring import ScoringPolicy, compute_family_scores, compute_overall_score, get_score_tier

SORT_OPTIONS = ("overall", "academics", "climate", "progress", "name")

# Metrics shown in the school list, keyed by DataFrame column
SCHOOL_METRICS = {
    "overall_score": {"label": "Overall Score", "format": "{:.0f}"},
    "academics": {"label": "Academics", "format": "{:.0f}"},
    "climate": {"label": "Climate", "format": "{:.0f}"},
    "progress": {"label": "Progress", "format": "{:.0f}"},
    "ela_proficiency": {"label": "ELA Proficient (%)", "format": "{:.0f}%"},
    "math_proficiency": {"label": "Math Proficient (%)", "format": "{:.0f}%"},
    "enrollment": {"label": "Enrollment", "format": "{:,.0f}"},
    "student_teacher_ratio": {"label": "Student-Teacher Ratio", "format": "{:.1f}:1"},
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _normalize(value: str) -> str:
    return _NON_ALNUM.sub("", (value or "").lower())


@dataclass
class SchoolFilter:
    """Criteria for the school list. Unset fields match everything."""

    search: str = ""
    district: Optional[int] = None
    borough: Optional[Borough] = None
    grade_band: Optional[str] = None
    min_score: Optional[float] = None
    tiers: Optional[frozenset] = None

    def matches(self, ranked: RankedSchool) -> bool:
        school = ranked.school
        if self.search:
            query = _normalize(self.search)
            if query not in _normalize(school.name) and query not in _normalize(school.dbn):
                return False
        if self.district is not None and school.district != self.district:
            return False
        if self.borough is not None and ranked.borough != self.borough:
            return False
        if self.grade_band and school.grade_band != self.grade_band:
            return False
        if self.min_score is not None:
            if ranked.overall_score is None or ranked.overall_score < self.min_score:
                return False
        if self.tiers and ranked.tier not in self.tiers:
            return False
        return True


def score_school(school: School, policy: Optional[ScoringPolicy] = None) -> RankedSchool:
    """Attach the Overall Score, tier and borough to a school."""
    score = compute_overall_score(school, policy)
    return RankedSchool(
        school=school,
        overall_score=score,
        tier=get_score_tier(score),
        borough=get_borough_from_dbn(school.dbn),
        family_scores=compute_family_scores(school),
    )


def _sort_key(sort_by: str):
    if sort_by == "overall":
        return lambda r: r.overall_score
    return lambda r: r.family_scores.get(sort_by)


def sort_schools(ranked: Iterable[RankedSchool], sort_by: str = "overall") -> list[RankedSchool]:
    """
    Sort ranked schools.

    Score sorts are descending with schools lacking the value placed last;
    'name' sorts alphabetically. Ties keep their input order.
    """
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unknown sort option: {sort_by}")

    ranked = list(ranked)
    if sort_by == "name":
        return sorted(ranked, key=lambda r: r.school.name.lower())

    key = _sort_key(sort_by)
    present = [r for r in ranked if key(r) is not None]
    missing = [r for r in ranked if key(r) is None]
    return sorted(present, key=key, reverse=True) + missing


def filter_schools(ranked: Iterable[RankedSchool], criteria: Optional[SchoolFilter] = None) -> list[RankedSchool]:
    if criteria is None:
        return list(ranked)
    return [r for r in ranked if criteria.matches(r)]


def rank_schools(
    schools: Iterable[School],
    criteria: Optional[SchoolFilter] = None,
    sort_by: str = "overall",
    policy: Optional[ScoringPolicy] = None,
) -> list[RankedSchool]:
    """Score, filter and sort a list of schools."""
    ranked = [score_school(s, policy) for s in schools]
    return sort_schools(filter_schools(ranked, criteria), sort_by)


def tier_counts(ranked: Iterable[RankedSchool]) -> dict[ScoreTier, int]:
    counts = {tier: 0 for tier in ScoreTier}
    for r in ranked:
        counts[r.tier] += 1
    return counts


def schools_to_dataframe(ranked: Iterable[RankedSchool]) -> pd.DataFrame:
    """Flatten ranked schools into a DataFrame for tables and charts."""
    rows = []
    for r in ranked:
        s = r.school
        rows.append({
            "dbn": s.dbn,
            "name": s.name,
            "district": s.district,
            "borough": r.borough.value if r.borough else None,
            "grade_band": s.grade_band,
            "overall_score": r.overall_score,
            "tier": r.tier.value,
            "color": r.color,
            "academics": r.family_scores.get("academics"),
            "climate": r.family_scores.get("climate"),
            "progress": r.family_scores.get("progress"),
            "ela_proficiency": s.ela_proficiency,
            "math_proficiency": s.math_proficiency,
            "enrollment": s.enrollment,
            "student_teacher_ratio": s.student_teacher_ratio,
            "latitude": s.latitude,
            "longitude": s.longitude,
        })
    columns = [
        "dbn", "name", "district", "borough", "grade_band", "overall_score", "tier", "color",
        "academics", "climate", "progress", "ela_proficiency", "math_proficiency",
        "enrollment", "student_teacher_ratio", "latitude", "longitude",
    ]
    return pd.DataFrame(rows, columns=columns)


def get_metric_label(metric_key: str) -> str:
    """Get display label for a metric."""
    return SCHOOL_METRICS.get(metric_key, {}).get("label", metric_key)


def format_metric_value(metric_key: str, value) -> str:
    """Format a metric value for display."""
    if value is None or pd.isna(value):
        return "N/A"
    fmt = SCHOOL_METRICS.get(metric_key, {}).get("format", "{}")
    try:
        return fmt.format(value)
    except (ValueError, TypeError):
        return str(value)
