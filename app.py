"""
NYC Kindergarten School Finder

Browse, filter and compare NYC public elementary schools by Overall Score,
academics, school climate and progress.
"""

import logging

import streamlit as st

from src.data.client import get_client
from src.data.db import check_connection
from src.data.geography import count_by_borough
from src.data.ranking import rank_schools, tier_counts
from src.data.models import ScoreTier
from src.viz.charts import create_borough_chart

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="NYC School Finder",
    page_icon="🏫",
    layout="wide",
    initial_sidebar_state="expanded",
)


def main():
    if not check_connection():
        st.sidebar.warning("School database unavailable. Some features may not work.")

    st.title("NYC Kindergarten School Finder")

    st.markdown(
        """
        Find the right public elementary school for your child across the five boroughs.

        - **Overall Score**: Academics (40%), School Climate (30%) and Progress (30%) on a 0-100 scale
        - **Academics**: share of students meeting state standards in ELA and Math
        - **Climate**: safety, trust and family engagement from the NYC School Survey
        - **Progress**: how well the school helps students grow year over year

        ### Getting Started

        Use the sidebar to navigate between pages:

        1. **Schools** - Search, filter and rank schools
        2. **Compare** - Put up to 4 schools side-by-side
        3. **Chat** - Ask questions about NYC schools using AI
        4. **Favorites** - Your saved schools, ratings and reviews
        """
    )

    schools = get_client().get_all_schools()
    ranked = rank_schools(schools)
    tiers = tier_counts(ranked)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(label="Schools", value=f"{len(schools):,}")
        st.caption("NYC public schools")
    with col2:
        st.metric(label="Outstanding", value=f"{tiers[ScoreTier.OUTSTANDING]:,}")
        st.caption("Overall Score 80+")
    with col3:
        st.metric(label="Strong", value=f"{tiers[ScoreTier.STRONG]:,}")
        st.caption("Overall Score 60-79")
    with col4:
        st.metric(label="Below Average", value=f"{tiers[ScoreTier.BELOW_AVERAGE]:,}")
        st.caption("Overall Score under 60")

    if schools:
        st.plotly_chart(create_borough_chart(count_by_borough(s.dbn for s in schools)), use_container_width=True)
    else:
        st.info("No schools loaded yet. Run `python scripts/import_schools.py` to import the survey data.")

    st.markdown("---")
    st.info(
        "💡 **Tip**: When a school has no data for a component, the Overall Score "
        "is reweighted across the components it does have."
    )


if __name__ == "__main__":
    main()
