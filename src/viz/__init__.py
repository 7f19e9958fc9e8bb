from .charts import (
    create_tier_distribution,
    create_score_histogram,
    create_borough_chart,
    create_family_comparison,
    create_survey_comparison,
)

__all__ = [
    "create_tier_distribution",
    "create_score_histogram",
    "create_borough_chart",
    "create_family_comparison",
    "create_survey_comparison",
]
