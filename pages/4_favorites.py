"""
Favorites Page - Saved schools, parent ratings and reviews.
"""

import logging

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from src.data.client import get_client, get_session_user_id
from src.data.comparison import ComparisonFullError, ComparisonSelection, SessionStateStorage
from src.data.ranking import format_metric_value, score_school

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Favorites - NYC School Finder",
    page_icon="⭐",
    layout="wide",
)


def _stars(rating: float) -> str:
    full = int(round(rating))
    return "★" * full + "☆" * (5 - full)


def main():
    st.title("⭐ My Schools")
    st.markdown("Schools you saved from the Schools page, with ratings from other parents.")

    client = get_client()
    user_id = get_session_user_id(st.session_state)
    selection = ComparisonSelection(SessionStateStorage(st.session_state))

    try:
        schools = client.get_favorite_schools(user_id)
    except SQLAlchemyError as e:
        logger.warning("Failed to load favorites: %s", e)
        st.error("Saved schools are unavailable right now.")
        return

    if not schools:
        st.info("👈 Use ☆ Save on the Schools page to build your list.")
        return

    for school in schools:
        r = score_school(school)
        reviews, stats = client.get_school_reviews(school.dbn)

        with st.container(border=True):
            col1, col2, col3 = st.columns([4, 1, 1])
            with col1:
                st.subheader(school.name)
                st.caption(
                    f"{school.dbn} · Overall Score {format_metric_value('overall_score', r.overall_score)} "
                    f"({r.tier.label})"
                )
                if stats.total_reviews:
                    st.markdown(f"{_stars(stats.average_rating)} {stats.average_rating} ({stats.total_reviews} reviews)")
                else:
                    st.markdown("No reviews yet")
            with col2:
                if st.button("Compare", key=f"cmp_{school.dbn}", disabled=selection.contains(school.dbn)):
                    try:
                        selection.add(school.dbn)
                        st.rerun()
                    except ComparisonFullError as e:
                        st.warning(str(e))
            with col3:
                if st.button("Remove", key=f"unfav_{school.dbn}"):
                    client.toggle_favorite(user_id, school.dbn)
                    st.rerun()

            with st.expander("Reviews"):
                for review in reviews:
                    st.markdown(f"{_stars(review.rating)} {review.review_text or ''}")

                mine = client.get_user_review(user_id, school.dbn)
                with st.form(key=f"review_{school.dbn}"):
                    rating = st.slider("Your rating", 1, 5, value=mine.rating if mine else 4)
                    text = st.text_area("Your review", value=(mine.review_text or "") if mine else "")
                    if st.form_submit_button("Update review" if mine else "Post review"):
                        client.save_review(user_id, school.dbn, int(rating), text.strip() or None)
                        st.rerun()


if __name__ == "__main__":
    main()
