"""Application settings and configuration management."""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_weights(name: str, default: dict[str, float]) -> dict[str, float]:
    """Parse weights of the form 'academics=0.4,climate=0.3,progress=0.3'."""
    value = os.getenv(name)
    if not value:
        return dict(default)
    weights = {}
    for part in value.split(","):
        key, _, raw = part.partition("=")
        weights[key.strip()] = float(raw)
    return weights


class Settings:
    """Application settings loaded from environment variables."""

    # API Keys
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")

    # Record store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///nyc_schools.db")
    DATABASE_ECHO: bool = _env_bool("DATABASE_ECHO", False)

    # Survey CSV used by scripts/import_schools.py
    SURVEY_CSV_PATH: str = os.getenv("SURVEY_CSV_PATH", "data/nyc_school_survey.csv")

    # Overall Score
    SCORE_WEIGHTS: dict = _env_weights(
        "SCORE_WEIGHTS",
        {"academics": 0.40, "climate": 0.30, "progress": 0.30},
    )
    SCORE_RENORMALIZE: bool = _env_bool("SCORE_RENORMALIZE", True)
    SCORE_PRECISION: int = int(os.getenv("SCORE_PRECISION", "0"))

    # Batch maintenance
    CLEANUP_BATCH_SIZE: int = int(os.getenv("CLEANUP_BATCH_SIZE", "100"))
    IMPORT_BATCH_SIZE: int = int(os.getenv("IMPORT_BATCH_SIZE", "100"))

    # Cache settings
    CACHE_TTL_SECONDS: int = 3600

    # App settings
    MAX_COMPARISON_SCHOOLS: int = 4
    GRADE_BANDS: list = ["K-5", "K-8", "6-8", "9-12"]

    # LLM settings (Gemini)
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gemini-2.5-flash")
    LLM_MAX_TOKENS: int = 4096
    LLM_TEMPERATURE: float = 0.3

    @property
    def has_google_key(self) -> bool:
        return bool(self.GOOGLE_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
