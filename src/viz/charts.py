"""Plotly chart generators for school list and comparison views."""

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from src.data.models import SURVEY_FIELDS, RankedSchool, ScoreTier


# Tier colors shared by every chart that shows a tier
TIER_COLORS = {
    "green": "#2ca02c",
    "yellow": "#f2b701",
    "red": "#d62728",
}

COLORS = {
    "primary": "#1f77b4",
    "missing": "#999999",
}

# Color sequence for comparing multiple schools
ENTITY_COLORS = px.colors.qualitative.Set2

SURVEY_LABELS = {
    "student_safety": "Safety",
    "student_teacher_trust": "Student-Teacher Trust",
    "student_engagement": "Engagement",
    "teacher_quality": "Core Instruction",
    "teacher_collaboration": "Peer Collaboration",
    "teacher_leadership": "Instructional Leadership",
    "guardian_satisfaction": "Family Satisfaction",
    "guardian_communication": "Outreach to Parents",
    "guardian_school_trust": "Parent-Principal Trust",
}


def create_tier_distribution(df: pd.DataFrame) -> go.Figure:
    """Bar chart of how many schools fall in each score tier."""
    if df.empty:
        return _empty_chart("No schools match the current filters")

    order = [t.value for t in ScoreTier]
    counts = df["tier"].value_counts().reindex(order, fill_value=0)
    labels = [t.label for t in ScoreTier]
    colors = [TIER_COLORS[t.color] for t in ScoreTier]

    fig = go.Figure(
        go.Bar(
            x=labels,
            y=counts.values,
            marker_color=colors,
            text=counts.values,
            textposition="outside",
        )
    )
    fig.update_layout(
        title="Schools by Overall Score Tier",
        yaxis_title="Schools",
        showlegend=False,
    )
    return fig


def create_score_histogram(df: pd.DataFrame) -> go.Figure:
    """Distribution of Overall Scores, colored by tier."""
    scored = df.dropna(subset=["overall_score"]) if not df.empty else df
    if scored.empty:
        return _empty_chart("No scored schools to display")

    fig = px.histogram(
        scored,
        x="overall_score",
        color="color",
        color_discrete_map=TIER_COLORS,
        nbins=20,
        range_x=[0, 100],
        title="Overall Score Distribution",
    )
    fig.update_layout(
        xaxis_title="Overall Score",
        yaxis_title="Schools",
        showlegend=False,
        bargap=0.05,
    )
    return fig


def create_borough_chart(counts: dict[str, int]) -> go.Figure:
    """Bar chart of school counts per borough."""
    if not counts or not any(counts.values()):
        return _empty_chart("No schools loaded")

    fig = px.bar(
        x=list(counts.keys()),
        y=list(counts.values()),
        color_discrete_sequence=[COLORS["primary"]],
        title="Schools by Borough",
    )
    fig.update_layout(xaxis_title="", yaxis_title="Schools")
    return fig


def create_family_comparison(ranked: list[RankedSchool]) -> go.Figure:
    """
    Grouped bars comparing Overall Score and each sub-metric family.

    Args:
        ranked: Schools already scored with ``score_school``
    """
    rows = []
    for r in ranked:
        values = {"Overall": r.overall_score, **{k.title(): v for k, v in r.family_scores.items()}}
        for metric, value in values.items():
            rows.append({
                "School": r.school.name,
                "Metric": metric,
                "Score": value if value is not None else 0,
                "Missing": value is None,
            })

    if not rows:
        return _empty_chart("Add schools to compare")

    df = pd.DataFrame(rows)
    fig = px.bar(
        df,
        x="Metric",
        y="Score",
        color="School",
        barmode="group",
        color_discrete_sequence=ENTITY_COLORS,
        title="Overall Score and Components",
    )

    for _, row in df[df["Missing"]].iterrows():
        fig.add_annotation(
            x=row["Metric"],
            y=2,
            text="n/a",
            showarrow=False,
            font=dict(size=10, color=COLORS["missing"]),
        )

    fig.update_layout(
        yaxis_title="Score (0-100)",
        yaxis_range=[0, 100],
        legend_title="",
        hovermode="x unified",
    )
    return fig


def create_survey_comparison(ranked: list[RankedSchool]) -> go.Figure:
    """Grouped bars for the NYC School Survey measures of each school."""
    rows = []
    for r in ranked:
        for field_name in SURVEY_FIELDS:
            value = getattr(r.school, field_name)
            if value is not None:
                rows.append({
                    "School": r.school.name,
                    "Measure": SURVEY_LABELS[field_name],
                    "Percent Positive": value,
                })

    if not rows:
        return _empty_chart("No survey data available")

    fig = px.bar(
        pd.DataFrame(rows),
        x="Measure",
        y="Percent Positive",
        color="School",
        barmode="group",
        color_discrete_sequence=ENTITY_COLORS,
        title="NYC School Survey",
    )
    fig.update_layout(
        yaxis_title="% Positive",
        yaxis_range=[0, 100],
        legend_title="",
        xaxis_tickangle=-30,
    )
    return fig


def _empty_chart(message: str) -> go.Figure:
    """Create an empty chart with a message."""
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(size=16, color="gray"),
    )
    fig.update_layout(
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        height=300,
    )
    return fig
