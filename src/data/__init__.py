from .models import School, Borough, ScoreTier, RankedSchool
from .scoring import compute_overall_score, get_score_color, get_score_tier
from .geography import extract_district_from_dbn, get_borough_from_dbn, is_nyc_5_borough

__all__ = [
    "School",
    "Borough",
    "ScoreTier",
    "RankedSchool",
    "compute_overall_score",
    "get_score_color",
    "get_score_tier",
    "extract_district_from_dbn",
    "get_borough_from_dbn",
    "is_nyc_5_borough",
]
