"""Tests for filtering, sorting and ranking schools."""

import math

import pandas as pd
import pytest

from src.data.models import Borough, School, ScoreTier
from src.data.ranking import (
    SchoolFilter,
    format_metric_value,
    get_metric_label,
    rank_schools,
    schools_to_dataframe,
    score_school,
    sort_schools,
    tier_counts,
)
from src.data.scoring import ScoringPolicy

POLICY = ScoringPolicy()


def _dbns(ranked):
    return [r.school.dbn for r in ranked]


class TestScoreSchool:
    def test_attaches_score_tier_and_borough(self, sample_schools):
        ranked = score_school(sample_schools[0], POLICY)
        assert ranked.overall_score == 81
        assert ranked.tier is ScoreTier.OUTSTANDING
        assert ranked.color == "green"
        assert ranked.borough is Borough.MANHATTAN
        assert ranked.family_scores["academics"] == 90

    def test_non_nyc_school_has_no_borough(self, sample_schools):
        assert score_school(sample_schools[-1], POLICY).borough is None

    def test_school_without_data(self):
        ranked = score_school(School(dbn="02M999", name="Empty", district=2), POLICY)
        assert ranked.overall_score is None
        assert ranked.tier is ScoreTier.BELOW_AVERAGE


class TestRankSchools:
    def test_sorted_by_overall_descending(self, sample_schools):
        ranked = rank_schools(sample_schools, policy=POLICY)
        assert _dbns(ranked) == ["84K100", "02M158", "75X010", "13K282", "25Q032", "31R456"]

    def test_missing_scores_sort_last(self, sample_schools):
        empty = School(dbn="02M999", name="Empty", district=2)
        ranked = rank_schools([empty] + sample_schools, policy=POLICY)
        assert ranked[-1].school.dbn == "02M999"

    def test_sort_by_family(self, sample_schools):
        ranked = rank_schools(sample_schools, sort_by="progress", policy=POLICY)
        assert _dbns(ranked)[:3] == ["02M158", "13K282", "31R456"]

    def test_sort_by_name(self, sample_schools):
        ranked = rank_schools(sample_schools, sort_by="name", policy=POLICY)
        names = [r.school.name.lower() for r in ranked]
        assert names == sorted(names)

    def test_ties_keep_input_order(self):
        a = School(dbn="02M001", name="A", district=2, climate_score=70)
        b = School(dbn="02M002", name="B", district=2, climate_score=70)
        assert _dbns(rank_schools([b, a], policy=POLICY)) == ["02M002", "02M001"]

    def test_unknown_sort(self, sample_schools):
        with pytest.raises(ValueError):
            rank_schools(sample_schools, sort_by="rating", policy=POLICY)

    def test_sort_schools_accepts_generator(self, sample_schools):
        ranked = sort_schools(score_school(s, POLICY) for s in sample_schools)
        assert len(ranked) == 6


class TestSchoolFilter:
    def test_search_ignores_punctuation_and_case(self, sample_schools):
        ranked = rank_schools(sample_schools, SchoolFilter(search="ps 158"), policy=POLICY)
        assert _dbns(ranked) == ["02M158"]

    def test_search_matches_dbn(self, sample_schools):
        ranked = rank_schools(sample_schools, SchoolFilter(search="13k282"), policy=POLICY)
        assert _dbns(ranked) == ["13K282"]

    def test_borough(self, sample_schools):
        ranked = rank_schools(sample_schools, SchoolFilter(borough=Borough.STATEN_ISLAND), policy=POLICY)
        assert _dbns(ranked) == ["31R456"]

    def test_district_and_grade_band(self, sample_schools):
        assert _dbns(rank_schools(sample_schools, SchoolFilter(district=25), policy=POLICY)) == ["25Q032"]
        assert _dbns(rank_schools(sample_schools, SchoolFilter(grade_band="K-8"), policy=POLICY)) == ["31R456"]

    def test_min_score_excludes_unscored(self, sample_schools):
        empty = School(dbn="02M999", name="Empty", district=2)
        ranked = rank_schools(sample_schools + [empty], SchoolFilter(min_score=80), policy=POLICY)
        assert _dbns(ranked) == ["84K100", "02M158"]

    def test_tiers(self, sample_schools):
        criteria = SchoolFilter(tiers=frozenset({ScoreTier.STRONG}))
        assert _dbns(rank_schools(sample_schools, criteria, policy=POLICY)) == ["75X010", "13K282", "25Q032"]


class TestTierCounts:
    def test_counts_every_tier(self, sample_schools):
        counts = tier_counts(rank_schools(sample_schools, policy=POLICY))
        assert counts == {
            ScoreTier.OUTSTANDING: 2,
            ScoreTier.STRONG: 3,
            ScoreTier.BELOW_AVERAGE: 1,
        }

    def test_empty(self):
        assert set(tier_counts([]).values()) == {0}


class TestDataFrame:
    def test_columns_and_values(self, sample_schools):
        df = schools_to_dataframe(rank_schools(sample_schools, policy=POLICY))
        assert len(df) == 6
        top = df.iloc[0]
        assert top["dbn"] == "84K100"
        assert pd.isna(top["borough"])
        assert top["tier"] == "outstanding"
        assert "overall_score" in df.columns

    def test_empty_has_columns(self):
        df = schools_to_dataframe([])
        assert df.empty
        assert "color" in df.columns


class TestMetricFormatting:
    def test_label(self):
        assert get_metric_label("overall_score") == "Overall Score"
        assert get_metric_label("unknown") == "unknown"

    def test_format(self):
        assert format_metric_value("ela_proficiency", 85.2) == "85%"
        assert format_metric_value("enrollment", 1250) == "1,250"
        assert format_metric_value("student_teacher_ratio", 14.0) == "14.0:1"

    @pytest.mark.parametrize("value", [None, math.nan])
    def test_missing(self, value):
        assert format_metric_value("overall_score", value) == "N/A"
