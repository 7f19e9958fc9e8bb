"""
Compare Page - Put NYC schools side-by-side.
"""

import streamlit as st

from src.data.client import get_client
from src.data.comparison import ComparisonFullError, ComparisonSelection, SessionStateStorage
from src.data.ranking import format_metric_value, get_metric_label, schools_to_dataframe, score_school
from src.viz.charts import create_family_comparison, create_survey_comparison

st.set_page_config(
    page_title="Compare Schools - NYC School Finder",
    page_icon="📊",
    layout="wide",
)

COMPARE_METRICS = [
    "overall_score", "academics", "climate", "progress",
    "ela_proficiency", "math_proficiency", "enrollment", "student_teacher_ratio",
]


def main():
    st.title("📊 School Comparison")

    client = get_client()
    selection = ComparisonSelection(SessionStateStorage(st.session_state))
    st.markdown(f"Compare up to {selection.max_schools} schools across key metrics.")

    # Sidebar for school selection
    with st.sidebar:
        st.header("Select Schools")

        search_query = st.text_input("Search schools:", placeholder="Enter school name or DBN...")
        if search_query and len(search_query) >= 2:
            results = client.search_schools(search_query, limit=20)
            options = {s.display_name: s for s in results}
            if options:
                selected = st.selectbox("Select to add:", options=[""] + list(options.keys()))
                if selected and st.button("Add to Comparison"):
                    try:
                        selection.add(options[selected].dbn)
                        st.rerun()
                    except ComparisonFullError as e:
                        st.warning(str(e))
            else:
                st.info("No results found.")

        st.divider()
        st.subheader("Selected for Comparison")
        st.caption(f"{len(selection)}/{selection.max_schools} selected")

        for i, dbn in enumerate(selection.dbns):
            col1, col2 = st.columns([3, 1])
            with col1:
                st.write(f"{i + 1}. {dbn}")
            with col2:
                if st.button("✕", key=f"remove_{dbn}"):
                    selection.remove(dbn)
                    st.rerun()

        if len(selection) and st.button("Clear All"):
            selection.clear()
            st.rerun()

    schools = client.get_schools_by_dbn(selection.dbns)
    if not schools:
        st.info("👈 Use the sidebar, or the Schools page, to pick schools to compare.")
        return

    ranked = [score_school(s) for s in schools]
    df = schools_to_dataframe(ranked).set_index("name")

    table = {
        get_metric_label(m): [format_metric_value(m, v) for v in df[m]]
        for m in COMPARE_METRICS
    }
    st.dataframe(
        {"School": list(df.index), "Tier": [r.tier.label for r in ranked], **table},
        use_container_width=True,
        hide_index=True,
    )

    st.plotly_chart(create_family_comparison(ranked), use_container_width=True)
    st.plotly_chart(create_survey_comparison(ranked), use_container_width=True)


if __name__ == "__main__":
    main()
