"""Data models for NYC school records, favorites and reviews."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Optional


class Borough(str, Enum):
    """The five NYC boroughs."""

    MANHATTAN = "Manhattan"
    BRONX = "Bronx"
    BROOKLYN = "Brooklyn"
    QUEENS = "Queens"
    STATEN_ISLAND = "Staten Island"


class ScoreTier(str, Enum):
    """Overall Score tier, with the color used to display it."""

    OUTSTANDING = "outstanding"
    STRONG = "strong"
    BELOW_AVERAGE = "below_average"

    @property
    def color(self) -> str:
        return _TIER_COLORS[self]

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_COLORS = {
    ScoreTier.OUTSTANDING: "green",
    ScoreTier.STRONG: "yellow",
    ScoreTier.BELOW_AVERAGE: "red",
}

_TIER_LABELS = {
    ScoreTier.OUTSTANDING: "Outstanding",
    ScoreTier.STRONG: "Strong",
    ScoreTier.BELOW_AVERAGE: "Below Average",
}


# NYC School Survey measures that make up the climate family
SURVEY_FIELDS = (
    "student_safety",
    "student_teacher_trust",
    "student_engagement",
    "teacher_quality",
    "teacher_collaboration",
    "teacher_leadership",
    "guardian_satisfaction",
    "guardian_communication",
    "guardian_school_trust",
)


@dataclass(frozen=True)
class School:
    """Represents a NYC public school."""

    dbn: str
    name: str
    district: int
    address: str = ""
    grade_band: str = ""

    # Sub-metric families (0-100)
    academics_score: Optional[float] = None
    climate_score: Optional[float] = None
    progress_score: Optional[float] = None

    # Academic detail
    ela_proficiency: Optional[float] = None
    math_proficiency: Optional[float] = None

    # NYC School Survey
    student_safety: Optional[float] = None
    student_teacher_trust: Optional[float] = None
    student_engagement: Optional[float] = None
    teacher_quality: Optional[float] = None
    teacher_collaboration: Optional[float] = None
    teacher_leadership: Optional[float] = None
    guardian_satisfaction: Optional[float] = None
    guardian_communication: Optional[float] = None
    guardian_school_trust: Optional[float] = None

    enrollment: Optional[int] = None
    student_teacher_ratio: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.dbn})"

    @property
    def survey_scores(self) -> list[float]:
        """Survey measures that are present."""
        return [v for v in (getattr(self, f) for f in SURVEY_FIELDS) if v is not None]

    @classmethod
    def from_dict(cls, data: dict) -> "School":
        """Build a School from a mapping, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Favorite:
    """A school saved by a user."""

    user_id: str
    school_dbn: str
    created_at: Optional[datetime] = None


@dataclass
class Review:
    """A parent review of a school."""

    id: int
    user_id: str
    school_dbn: str
    rating: int
    review_text: Optional[str] = None
    helpful_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class RatingStats:
    """Aggregate review rating for a school."""

    average_rating: float = 0.0
    total_reviews: int = 0


@dataclass
class RankedSchool:
    """A school paired with its derived Overall Score."""

    school: School
    overall_score: Optional[float]
    tier: ScoreTier
    borough: Optional[Borough] = None
    family_scores: dict = field(default_factory=dict)

    @property
    def color(self) -> str:
        return self.tier.color
