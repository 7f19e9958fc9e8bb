"""Tests for the Overall Score and score tiers."""

import math

import pytest

from src.data.models import School, ScoreTier
from src.data.scoring import (
    ScoringPolicy,
    compute_family_scores,
    compute_overall_score,
    get_score_color,
    get_score_label,
    get_score_tier,
    round_half_up,
)


def _school(**kwargs) -> School:
    return School(dbn="02M158", name="Test School", district=2, **kwargs)


DEFAULT = ScoringPolicy()


class TestComputeOverallScore:
    def test_weighted_sum_of_all_families(self):
        school = _school(academics_score=90, climate_score=80, progress_score=70)
        score = compute_overall_score(school, DEFAULT)
        assert score == 81
        assert get_score_color(score) == "green"

    def test_deterministic(self):
        school = _school(academics_score=73, climate_score=61, progress_score=88)
        assert compute_overall_score(school, DEFAULT) == compute_overall_score(school, DEFAULT)

    def test_rounds_half_up(self):
        # 0.4*81 + 0.3*80 + 0.3*80 = 80.4 -> 80; 0.4*82 + 0.3*80 + 0.3*80 = 80.8 -> 81
        assert compute_overall_score(_school(academics_score=81, climate_score=80, progress_score=80), DEFAULT) == 80
        assert compute_overall_score(_school(academics_score=82, climate_score=80, progress_score=80), DEFAULT) == 81

    def test_exact_half_rounds_up_despite_float_noise(self):
        # 0.4*70 + 0.3*65 + 0.3*60 = 65.5
        school = _school(academics_score=70, climate_score=65, progress_score=60)
        assert compute_overall_score(school, DEFAULT) == 66

    def test_precision(self):
        policy = ScoringPolicy(precision=1)
        school = _school(academics_score=81, climate_score=80, progress_score=80)
        assert compute_overall_score(school, policy) == 80.4

    def test_missing_progress_is_renormalized(self):
        school = _school(academics_score=90, climate_score=80)
        # (90*0.4 + 80*0.3) / 0.7 = 85.71
        assert compute_overall_score(school, DEFAULT) == 86

    def test_single_family_scores_its_own_value(self):
        assert compute_overall_score(_school(climate_score=64), DEFAULT) == 64

    def test_missing_family_not_penalized(self):
        full = _school(academics_score=75, climate_score=75, progress_score=75)
        partial = _school(academics_score=75, climate_score=75)
        assert compute_overall_score(full, DEFAULT) == compute_overall_score(partial, DEFAULT)

    def test_without_renormalization_missing_counts_as_zero(self):
        policy = ScoringPolicy(renormalize=False)
        school = _school(academics_score=90, climate_score=80)
        assert compute_overall_score(school, policy) == 60

    def test_no_data_returns_none(self):
        assert compute_overall_score(_school(), DEFAULT) is None

    def test_none_school_raises(self):
        with pytest.raises(ValueError):
            compute_overall_score(None, DEFAULT)

    def test_result_stays_in_range(self):
        high = _school(academics_score=150, climate_score=120, progress_score=101)
        low = _school(academics_score=-10, climate_score=-5, progress_score=-1)
        assert compute_overall_score(high, DEFAULT) == 100
        assert compute_overall_score(low, DEFAULT) == 0

    def test_nan_treated_as_missing(self):
        school = _school(academics_score=float("nan"), climate_score=70)
        score = compute_overall_score(school, DEFAULT)
        assert score == 70
        assert not math.isnan(score)

    def test_custom_weights(self):
        policy = ScoringPolicy(weights={"academics": 1.0})
        school = _school(academics_score=55, climate_score=99, progress_score=99)
        assert compute_overall_score(school, policy) == 55

    def test_uses_settings_policy_by_default(self):
        school = _school(academics_score=90, climate_score=80, progress_score=70)
        assert compute_overall_score(school) == 81


class TestFamilyScores:
    def test_academics_falls_back_to_proficiency(self):
        families = compute_family_scores(_school(ela_proficiency=60, math_proficiency=80))
        assert families["academics"] == 70

    def test_academics_uses_single_proficiency(self):
        assert compute_family_scores(_school(math_proficiency=64))["academics"] == 64

    def test_explicit_academics_wins(self):
        families = compute_family_scores(_school(academics_score=50, ela_proficiency=90, math_proficiency=90))
        assert families["academics"] == 50

    def test_climate_falls_back_to_survey(self):
        families = compute_family_scores(_school(student_safety=90, guardian_satisfaction=70))
        assert families["climate"] == 80

    def test_missing_families_are_none(self):
        assert compute_family_scores(_school()) == {"academics": None, "climate": None, "progress": None}


class TestScoringPolicy:
    def test_unknown_family_rejected(self):
        with pytest.raises(ValueError, match="Unknown"):
            ScoringPolicy(weights={"sports": 1.0})

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            ScoringPolicy(weights={"academics": -0.4, "climate": 1.0})

    def test_zero_total_rejected(self):
        with pytest.raises(ValueError):
            ScoringPolicy(weights={"academics": 0.0})

    def test_negative_precision_rejected(self):
        with pytest.raises(ValueError):
            ScoringPolicy(precision=-1)

    def test_weights_are_read_only(self):
        policy = ScoringPolicy()
        with pytest.raises(TypeError):
            policy.weights["academics"] = -1
        assert policy.weights["academics"] == 0.40

    def test_caller_dict_does_not_leak_in(self):
        weights = {"academics": 1.0}
        policy = ScoringPolicy(weights=weights)
        weights["academics"] = -5
        assert policy.weights["academics"] == 1.0

    def test_hashable_and_comparable(self):
        assert hash(ScoringPolicy()) == hash(ScoringPolicy())
        assert ScoringPolicy() == ScoringPolicy()
        assert ScoringPolicy(weights={"academics": 1.0}) != ScoringPolicy()


class TestScoreTier:
    @pytest.mark.parametrize("score, color", [
        (100, "green"),
        (80, "green"),
        (79.9, "yellow"),
        (60, "yellow"),
        (59.9, "red"),
        (0, "red"),
    ])
    def test_color_boundaries(self, score, color):
        assert get_score_color(score) == color

    def test_tiers(self):
        assert get_score_tier(80) is ScoreTier.OUTSTANDING
        assert get_score_tier(60) is ScoreTier.STRONG
        assert get_score_tier(59) is ScoreTier.BELOW_AVERAGE

    def test_labels_share_thresholds(self):
        assert get_score_label(80) == "Outstanding"
        assert get_score_label(79) == "Strong"
        assert get_score_label(59) == "Below Average"

    def test_missing_score_is_lowest_tier(self):
        assert get_score_tier(None) is ScoreTier.BELOW_AVERAGE


class TestRoundHalfUp:
    def test_half_goes_up(self):
        assert round_half_up(80.5) == 81
        assert round_half_up(92.5) == 93

    def test_precision(self):
        assert round_half_up(80.45, 1) == 80.5
