"""
Database connection management and ORM tables for the record store.

Provides the engine, a transactional session scope and the SQLAlchemy models
behind schools, favorites and reviews.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from config.settings import get_settings

logger = logging.getLogger(__name__)

# Global engine instance (created lazily)
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class SchoolRow(Base):
    """A school record as stored in the ``schools`` table."""
    __tablename__ = "schools"

    dbn: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    district: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[str] = mapped_column(Text, default="")
    grade_band: Mapped[str] = mapped_column(String(10), default="")

    academics_score: Mapped[Optional[float]] = mapped_column(Float)
    climate_score: Mapped[Optional[float]] = mapped_column(Float)
    progress_score: Mapped[Optional[float]] = mapped_column(Float)
    ela_proficiency: Mapped[Optional[float]] = mapped_column(Float)
    math_proficiency: Mapped[Optional[float]] = mapped_column(Float)

    student_safety: Mapped[Optional[float]] = mapped_column(Float)
    student_teacher_trust: Mapped[Optional[float]] = mapped_column(Float)
    student_engagement: Mapped[Optional[float]] = mapped_column(Float)
    teacher_quality: Mapped[Optional[float]] = mapped_column(Float)
    teacher_collaboration: Mapped[Optional[float]] = mapped_column(Float)
    teacher_leadership: Mapped[Optional[float]] = mapped_column(Float)
    guardian_satisfaction: Mapped[Optional[float]] = mapped_column(Float)
    guardian_communication: Mapped[Optional[float]] = mapped_column(Float)
    guardian_school_trust: Mapped[Optional[float]] = mapped_column(Float)

    enrollment: Mapped[Optional[int]] = mapped_column(Integer)
    student_teacher_ratio: Mapped[Optional[float]] = mapped_column(Float)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    last_updated: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f"<SchoolRow(dbn='{self.dbn}', name='{self.name}')>"


class FavoriteRow(Base):
    """A school saved by a user."""
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "school_dbn", name="uq_favorite_user_school"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    school_dbn: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class ReviewRow(Base):
    """A parent review of a school."""
    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    school_dbn: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    review_text: Mapped[Optional[str]] = mapped_column(Text)
    helpful_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


def get_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Get or create the SQLAlchemy engine.

    Args:
        database_url: Optional override for the configured DATABASE_URL
        echo: If True, log all SQL statements
    """
    global _engine

    if _engine is None or database_url is not None:
        settings = get_settings()
        url = database_url or settings.DATABASE_URL
        if echo is None:
            echo = settings.DATABASE_ECHO
        if url.startswith("sqlite"):
            _engine = create_engine(url, echo=echo)
        else:
            _engine = create_engine(
                url,
                echo=echo,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,
            )

    return _engine


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Get the session factory, rebinding it when an engine is given."""
    global _SessionLocal

    if _SessionLocal is None or engine is not None:
        eng = engine or get_engine()
        _SessionLocal = sessionmaker(
            bind=eng,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    return _SessionLocal


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    Commits on success, rolls back and re-raises on exception.
    """
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all tables if they don't exist."""
    Base.metadata.create_all(bind=engine or get_engine())


def check_connection(engine: Optional[Engine] = None) -> bool:
    """Return True if the database answers a trivial query."""
    eng = engine or get_engine()
    try:
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("Database connection failed: %s", e)
        return False
