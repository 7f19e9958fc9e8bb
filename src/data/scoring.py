"""Overall Score computation and score tiers."""

import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Mapping, Optional

from config.settings import get_settings
from .models import School, ScoreTier

FAMILIES = ("academics", "climate", "progress")

# Inclusive lower bounds; a score exactly on a boundary belongs to the higher tier
OUTSTANDING_MIN = 80
STRONG_MIN = 60


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Weights and missing-data handling for the Overall Score.

    With ``renormalize`` on, families a school has no data for are left out
    and the remaining weights are scaled back up to 1, so the score stays on
    a true 0-100 scale. With it off, a missing family counts as 0.
    """

    weights: Mapping[str, float] = field(
        default_factory=lambda: {"academics": 0.40, "climate": 0.30, "progress": 0.30},
        hash=False,
    )
    renormalize: bool = True
    precision: int = 0

    def __post_init__(self):
        # Weights are validated once, here, and read-only afterwards
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        unknown = set(self.weights) - set(FAMILIES)
        if unknown:
            raise ValueError(f"Unknown score families: {', '.join(sorted(unknown))}")
        if any(w < 0 for w in self.weights.values()):
            raise ValueError("Score weights must be non-negative")
        if sum(self.weights.values()) <= 0:
            raise ValueError("Score weights must sum to a positive number")
        if self.precision < 0:
            raise ValueError("Score precision must be >= 0")


def default_policy() -> ScoringPolicy:
    """Build the scoring policy from settings."""
    settings = get_settings()
    return ScoringPolicy(
        weights=dict(settings.SCORE_WEIGHTS),
        renormalize=settings.SCORE_RENORMALIZE,
        precision=settings.SCORE_PRECISION,
    )


def _present(value) -> bool:
    if value is None:
        return False
    try:
        return not math.isnan(value)
    except TypeError:
        return False


def _mean(values) -> Optional[float]:
    values = [float(v) for v in values if _present(v)]
    if not values:
        return None
    return sum(values) / len(values)


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def round_half_up(value: float, precision: int = 0) -> float:
    """Round with halves going away from zero, e.g. 80.5 -> 81."""
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_family_scores(school: School) -> dict[str, Optional[float]]:
    """
    Resolve the Academics, Climate and Progress family values for a school.

    Academics falls back to the mean of ELA and Math proficiency, Climate to
    the mean of the school survey measures. Values are clamped to 0-100.
    """
    academics = school.academics_score
    if not _present(academics):
        academics = _mean([school.ela_proficiency, school.math_proficiency])

    climate = school.climate_score
    if not _present(climate):
        climate = _mean(school.survey_scores)

    progress = school.progress_score
    if not _present(progress):
        progress = None

    return {
        name: (_clamp(value) if value is not None else None)
        for name, value in (("academics", academics), ("climate", climate), ("progress", progress))
    }


def compute_overall_score(school: School, policy: Optional[ScoringPolicy] = None) -> Optional[float]:
    """
    Compute the 0-100 Overall Score for a school.

    Returns None only when the school has no data for any weighted family.
    """
    if school is None:
        raise ValueError("A school record is required to compute a score")

    policy = policy or default_policy()
    families = compute_family_scores(school)

    weighted_sum = 0.0
    total_weight = 0.0
    has_data = False
    for name, weight in policy.weights.items():
        value = families.get(name)
        if value is None:
            if not policy.renormalize:
                total_weight += weight
            continue
        has_data = True
        weighted_sum += value * weight
        total_weight += weight

    if not has_data or total_weight <= 0:
        return None

    # Strip float noise first so 65.49999999999999 still rounds to 66
    score = round(weighted_sum / total_weight, 9)
    return round_half_up(_clamp(score), policy.precision)


def get_score_tier(score: Optional[float]) -> ScoreTier:
    """Map an Overall Score to its tier. Missing scores fall in the lowest tier."""
    if score is None:
        return ScoreTier.BELOW_AVERAGE
    if score >= OUTSTANDING_MIN:
        return ScoreTier.OUTSTANDING
    if score >= STRONG_MIN:
        return ScoreTier.STRONG
    return ScoreTier.BELOW_AVERAGE


def get_score_color(score: Optional[float]) -> str:
    """'green', 'yellow' or 'red' for an Overall Score."""
    return get_score_tier(score).color


def get_score_label(score: Optional[float]) -> str:
    return get_score_tier(score).label
