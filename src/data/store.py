"""Record store for schools, favorites and reviews."""

import logging
from typing import Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import sessionmaker

from .db import FavoriteRow, ReviewRow, SchoolRow, _utcnow, session_scope
from .models import Favorite, RatingStats, Review, School

logger = logging.getLogger(__name__)

SCHOOL_COLUMNS = tuple(c.key for c in SchoolRow.__table__.columns)


class StoreError(Exception):
    """Base class for record store errors."""


class DuplicateFavoriteError(StoreError):
    """The school is already in the user's favorites."""


class ReviewNotFoundError(StoreError):
    """No review with that id belongs to the user."""


def _school_from_row(row: SchoolRow) -> School:
    return School.from_dict({key: getattr(row, key) for key in SCHOOL_COLUMNS})


def _review_from_row(row: ReviewRow) -> Review:
    return Review(
        id=row.id,
        user_id=row.user_id,
        school_dbn=row.school_dbn,
        rating=row.rating,
        review_text=row.review_text,
        helpful_count=row.helpful_count or 0,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _validate_rating(rating: int) -> int:
    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        raise ValueError(f"Rating must be an integer from 1 to 5, got {rating!r}")
    return rating


class SchoolStore:
    """Read, upsert and delete school records."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    def select_all(self, fields: Optional[Iterable[str]] = None) -> list[dict]:
        """
        Fetch every school row as a dict.

        Args:
            fields: Column names to select (default: all columns)
        """
        names = list(fields) if fields else list(SCHOOL_COLUMNS)
        unknown = [n for n in names if n not in SCHOOL_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown school fields: {', '.join(unknown)}")

        columns = [getattr(SchoolRow, n) for n in names]
        with session_scope(self._session_factory) as session:
            rows = session.execute(select(*columns).order_by(SchoolRow.dbn)).mappings().all()
            return [dict(r) for r in rows]

    def get_schools(self) -> list[School]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(select(SchoolRow).order_by(SchoolRow.dbn)).all()
            return [_school_from_row(r) for r in rows]

    def get_school(self, dbn: str) -> Optional[School]:
        with session_scope(self._session_factory) as session:
            row = session.get(SchoolRow, dbn)
            return _school_from_row(row) if row else None

    def upsert_schools(self, schools: Iterable[School]) -> int:
        """Insert or update schools keyed by DBN. Returns the number written."""
        count = 0
        with session_scope(self._session_factory) as session:
            for school in schools:
                session.merge(SchoolRow(**school.to_dict()))
                count += 1
        logger.info("Upserted %d schools", count)
        return count

    def delete_where_dbn_in(self, dbns: Iterable[str]) -> int:
        """Delete the given DBNs in a single statement. Returns rows deleted."""
        dbns = list(dbns)
        if not dbns:
            return 0
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(SchoolRow).where(SchoolRow.dbn.in_(dbns)))
            return result.rowcount

    def count(self) -> int:
        with session_scope(self._session_factory) as session:
            return session.scalar(select(func.count()).select_from(SchoolRow))


class FavoriteStore:
    """Per-user saved schools."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    def get_user_favorites(self, user_id: str) -> list[Favorite]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                select(FavoriteRow)
                .where(FavoriteRow.user_id == user_id)
                .order_by(FavoriteRow.created_at, FavoriteRow.id)
            ).all()
            return [Favorite(r.user_id, r.school_dbn, r.created_at) for r in rows]

    def is_favorite(self, user_id: str, school_dbn: str) -> bool:
        with session_scope(self._session_factory) as session:
            return self._find(session, user_id, school_dbn) is not None

    def add_favorite(self, user_id: str, school_dbn: str) -> Favorite:
        with session_scope(self._session_factory) as session:
            if self._find(session, user_id, school_dbn) is not None:
                raise DuplicateFavoriteError(f"{school_dbn} is already a favorite of {user_id}")
            row = FavoriteRow(user_id=user_id, school_dbn=school_dbn)
            session.add(row)
            session.flush()
            return Favorite(row.user_id, row.school_dbn, row.created_at)

    def remove_favorite(self, user_id: str, school_dbn: str) -> bool:
        """Remove a favorite. Returns False if the user had not saved the school."""
        with session_scope(self._session_factory) as session:
            result = session.execute(
                delete(FavoriteRow).where(
                    FavoriteRow.user_id == user_id,
                    FavoriteRow.school_dbn == school_dbn,
                )
            )
            return result.rowcount > 0

    @staticmethod
    def _find(session, user_id: str, school_dbn: str) -> Optional[FavoriteRow]:
        return session.scalars(
            select(FavoriteRow).where(
                FavoriteRow.user_id == user_id,
                FavoriteRow.school_dbn == school_dbn,
            ).limit(1)
        ).first()


class ReviewStore:
    """School reviews. Updates and deletes are limited to the review's author."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    def get_reviews(self, school_dbn: str) -> list[Review]:
        """All reviews for a school, newest first."""
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                select(ReviewRow)
                .where(ReviewRow.school_dbn == school_dbn)
                .order_by(ReviewRow.created_at.desc(), ReviewRow.id.desc())
            ).all()
            return [_review_from_row(r) for r in rows]

    def get_user_review(self, user_id: str, school_dbn: str) -> Optional[Review]:
        with session_scope(self._session_factory) as session:
            row = session.scalars(
                select(ReviewRow).where(
                    ReviewRow.user_id == user_id,
                    ReviewRow.school_dbn == school_dbn,
                ).limit(1)
            ).first()
            return _review_from_row(row) if row else None

    def create_review(
        self,
        user_id: str,
        school_dbn: str,
        rating: int,
        review_text: Optional[str] = None,
    ) -> Review:
        _validate_rating(rating)
        with session_scope(self._session_factory) as session:
            row = ReviewRow(
                user_id=user_id,
                school_dbn=school_dbn,
                rating=rating,
                review_text=review_text,
                helpful_count=0,
            )
            session.add(row)
            session.flush()
            return _review_from_row(row)

    def update_review(
        self,
        review_id: int,
        user_id: str,
        rating: int,
        review_text: Optional[str] = None,
    ) -> Review:
        _validate_rating(rating)
        with session_scope(self._session_factory) as session:
            row = session.get(ReviewRow, review_id)
            if row is None or row.user_id != user_id:
                raise ReviewNotFoundError(f"Review {review_id} not found or unauthorized")
            row.rating = rating
            row.review_text = review_text
            row.updated_at = _utcnow()
            session.flush()
            return _review_from_row(row)

    def delete_review(self, review_id: int, user_id: str) -> bool:
        """Delete a review owned by the user. Returns False if nothing matched."""
        with session_scope(self._session_factory) as session:
            result = session.execute(
                delete(ReviewRow).where(ReviewRow.id == review_id, ReviewRow.user_id == user_id)
            )
            return result.rowcount > 0

    def get_school_rating_stats(self, school_dbn: str) -> RatingStats:
        with session_scope(self._session_factory) as session:
            average, total = session.execute(
                select(func.avg(ReviewRow.rating), func.count(ReviewRow.id))
                .where(ReviewRow.school_dbn == school_dbn)
            ).one()
        return RatingStats(
            average_rating=round(float(average or 0), 1),
            total_reviews=int(total or 0),
        )
