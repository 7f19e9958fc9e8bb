"""Shared fixtures: an in-memory SQLite record store and sample schools."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.data.db import init_db
from src.data.models import School
from src.data.store import FavoriteStore, ReviewStore, SchoolStore


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def school_store(session_factory):
    return SchoolStore(session_factory)


@pytest.fixture
def favorite_store(session_factory):
    return FavoriteStore(session_factory)


@pytest.fixture
def review_store(session_factory):
    return ReviewStore(session_factory)


@pytest.fixture
def sample_schools():
    return [
        School(
            dbn="02M158", name="P.S. 158 Bayard Taylor", district=2, grade_band="K-5",
            academics_score=90, climate_score=80, progress_score=70,
            ela_proficiency=85, math_proficiency=88, enrollment=750,
        ),
        School(
            dbn="13K282", name="P.S. 282 Park Slope", district=13, grade_band="K-5",
            academics_score=70, climate_score=65, progress_score=60,
        ),
        School(
            dbn="31R456", name="P.S. 456 Staten Island School", district=31, grade_band="K-8",
            academics_score=50, climate_score=55, progress_score=45,
        ),
        School(
            dbn="25Q032", name="P.S. 32 State Street", district=25, grade_band="K-5",
            ela_proficiency=60, math_proficiency=70,
        ),
        School(dbn="75X010", name="District 75 Program", district=75, climate_score=70),
        School(dbn="84K100", name="Charter Academy", district=84, academics_score=95),
    ]
