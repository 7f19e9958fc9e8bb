"""Client used by the UI pages and chat tools for schools, favorites and reviews."""

from typing import Any, MutableMapping, Optional
import logging
import uuid

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from config.settings import get_settings
from .db import get_session_factory
from .models import RatingStats, Review, School
from .ranking import SchoolFilter, rank_schools
from .store import FavoriteStore, ReviewStore, SchoolStore

logger = logging.getLogger(__name__)

USER_ID_KEY = "user_id"


class SchoolClient:
    """Cached access to the school records in the record store."""

    def __init__(
        self,
        store: Optional[SchoolStore] = None,
        favorites: Optional[FavoriteStore] = None,
        reviews: Optional[ReviewStore] = None,
    ):
        self.store = store or SchoolStore(get_session_factory())
        self.favorites = favorites or FavoriteStore(get_session_factory())
        self.reviews = reviews or ReviewStore(get_session_factory())

    def _fetch_all(self) -> list[School]:
        """Load every school, returning [] if the store is unavailable."""
        try:
            return self.store.get_schools()
        except SQLAlchemyError as e:
            logger.error("Failed to load schools: %s", e)
            return []

    # -------------------------------------------------------------------------
    # Directory/Search Methods
    # -------------------------------------------------------------------------

    @st.cache_data(ttl=get_settings().CACHE_TTL_SECONDS, show_spinner=False)
    def get_all_schools(_self) -> list[School]:
        """Get all schools in the record store."""
        return _self._fetch_all()

    def search_schools(self, query: str, limit: int = 50) -> list[School]:
        """Search for schools by name or DBN, best Overall Score first."""
        ranked = rank_schools(self.get_all_schools(), SchoolFilter(search=query))
        return [r.school for r in ranked[:limit]]

    def get_school_by_dbn(self, dbn: str) -> Optional[School]:
        """Look up a single school by its DBN."""
        dbn = (dbn or "").strip().upper()
        for school in self.get_all_schools():
            if school.dbn == dbn:
                return school
        return None

    def get_schools_by_dbn(self, dbns: list[str]) -> list[School]:
        """Schools for the given DBNs, in the order requested."""
        by_dbn = {s.dbn: s for s in self.get_all_schools()}
        return [by_dbn[d] for d in dbns if d in by_dbn]

    # -------------------------------------------------------------------------
    # Favorites and Reviews
    # -------------------------------------------------------------------------

    def get_favorite_schools(self, user_id: str) -> list[School]:
        """The user's saved schools, oldest first."""
        dbns = [f.school_dbn for f in self.favorites.get_user_favorites(user_id)]
        return self.get_schools_by_dbn(dbns)

    def is_favorite(self, user_id: str, dbn: str) -> bool:
        return self.favorites.is_favorite(user_id, dbn)

    def toggle_favorite(self, user_id: str, dbn: str) -> bool:
        """Save or unsave a school. Returns True if it is now saved."""
        if self.favorites.is_favorite(user_id, dbn):
            self.favorites.remove_favorite(user_id, dbn)
            return False
        self.favorites.add_favorite(user_id, dbn)
        return True

    def get_school_reviews(self, dbn: str) -> tuple[list[Review], RatingStats]:
        return self.reviews.get_reviews(dbn), self.reviews.get_school_rating_stats(dbn)

    def get_user_review(self, user_id: str, dbn: str) -> Optional[Review]:
        return self.reviews.get_user_review(user_id, dbn)

    def save_review(self, user_id: str, dbn: str, rating: int, review_text: Optional[str] = None) -> Review:
        """Create the user's review of a school, or update it if one exists."""
        existing = self.reviews.get_user_review(user_id, dbn)
        if existing is None:
            return self.reviews.create_review(user_id, dbn, rating, review_text)
        return self.reviews.update_review(existing.id, user_id, rating, review_text)


def get_session_user_id(state: MutableMapping[str, Any]) -> str:
    """Anonymous per-session user id, created on first use."""
    if USER_ID_KEY not in state:
        state[USER_ID_KEY] = f"guest-{uuid.uuid4().hex[:12]}"
    return state[USER_ID_KEY]


# Singleton instance
_client: Optional[SchoolClient] = None


def get_client() -> SchoolClient:
    """Get or create the school client singleton."""
    global _client
    if _client is None:
        _client = SchoolClient()
    return _client
