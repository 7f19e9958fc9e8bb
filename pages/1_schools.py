"""
Schools Page - Search, filter and rank NYC schools by Overall Score.
"""

import streamlit as st

from config.settings import get_settings
from src.data.client import get_client, get_session_user_id
from src.data.comparison import ComparisonFullError, ComparisonSelection, SessionStateStorage
from src.data.geography import get_nyc_districts
from src.data.models import Borough, ScoreTier
from src.data.ranking import (
    SORT_OPTIONS,
    SchoolFilter,
    format_metric_value,
    get_metric_label,
    rank_schools,
    schools_to_dataframe,
)
from src.viz.charts import create_score_histogram, create_tier_distribution

st.set_page_config(
    page_title="Schools - NYC School Finder",
    page_icon="🔍",
    layout="wide",
)

TIER_BADGES = {"green": "🟢", "yellow": "🟡", "red": "🔴"}
TABLE_METRICS = ["overall_score", "academics", "climate", "progress", "enrollment"]


def main():
    st.title("🔍 Find a School")
    st.markdown("Search and filter NYC public schools, ranked by Overall Score.")

    settings = get_settings()
    client = get_client()
    selection = ComparisonSelection(SessionStateStorage(st.session_state))
    user_id = get_session_user_id(st.session_state)
    saved = {s.dbn for s in client.get_favorite_schools(user_id)}

    # Filters
    col1, col2, col3, col4 = st.columns([3, 1, 1, 1])
    with col1:
        search = st.text_input("Search:", placeholder="School name or DBN...")
    with col2:
        borough_name = st.selectbox("Borough:", ["All"] + [b.value for b in Borough])
    with col3:
        district = st.selectbox("District:", ["All"] + get_nyc_districts())
    with col4:
        grade_band = st.selectbox("Grades:", ["All"] + settings.GRADE_BANDS)

    col5, col6 = st.columns([2, 1])
    with col5:
        tier_values = st.multiselect(
            "Tiers:",
            options=[t.value for t in ScoreTier],
            format_func=lambda v: ScoreTier(v).label,
        )
    with col6:
        sort_by = st.selectbox("Sort by:", SORT_OPTIONS, format_func=str.title)

    criteria = SchoolFilter(
        search=search,
        district=None if district == "All" else int(district),
        borough=None if borough_name == "All" else Borough(borough_name),
        grade_band=None if grade_band == "All" else grade_band,
        tiers=frozenset(ScoreTier(v) for v in tier_values) or None,
    )
    ranked = rank_schools(client.get_all_schools(), criteria, sort_by)
    df = schools_to_dataframe(ranked)

    st.caption(f"{len(ranked):,} schools")

    chart_col1, chart_col2 = st.columns(2)
    with chart_col1:
        st.plotly_chart(create_tier_distribution(df), use_container_width=True)
    with chart_col2:
        st.plotly_chart(create_score_histogram(df), use_container_width=True)

    st.divider()

    for i, r in enumerate(ranked[:100]):
        school = r.school
        row = df.iloc[i]
        col_a, col_b, col_c = st.columns([5, 1, 1])
        with col_a:
            borough = r.borough.value if r.borough else "Outside NYC"
            st.markdown(
                f"{TIER_BADGES[r.color]} **{school.name}** · {school.dbn} · "
                f"District {school.district}, {borough}"
            )
            st.caption(" · ".join(
                f"{get_metric_label(m)}: {format_metric_value(m, row[m])}"
                for m in TABLE_METRICS
            ))
        with col_b:
            if selection.contains(school.dbn):
                st.button("✓ Comparing", key=f"cmp_{school.dbn}", disabled=True)
            elif st.button("Compare", key=f"cmp_{school.dbn}"):
                try:
                    selection.add(school.dbn)
                    st.rerun()
                except ComparisonFullError as e:
                    st.warning(str(e))
        with col_c:
            label = "★ Saved" if school.dbn in saved else "☆ Save"
            if st.button(label, key=f"fav_{school.dbn}"):
                client.toggle_favorite(user_id, school.dbn)
                st.rerun()

    if len(ranked) > 100:
        st.info("Showing the top 100 schools. Narrow the filters to see more.")


if __name__ == "__main__":
    main()
