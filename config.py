"""
Configuration management for MediSchedule
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "MediSchedule"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./medischedule.db"
    DATABASE_ECHO: bool = False

    # Interaction rule table (class -> members/avoidWith/separateFrom + aliases)
    INTERACTION_RULES_PATH: str = str(BASE_DIR / "data" / "interaction_rules.json")

    # Label text provider (openFDA)
    OPENFDA_LABEL_URL: str = "https://api.fda.gov/drug/label.json"
    OPENFDA_NDC_URL: str = "https://api.fda.gov/drug/ndc.json"
    OPENFDA_TIMEOUT_SECONDS: float = 4.0
    OPENFDA_API_KEY: Optional[str] = None

    # Reminders
    REMINDER_FOLLOWUP_MINUTES: int = 30

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


@dataclass(frozen=True)
class SchedulerConfig:
    """Tunables for anchor generation, clustering and slot separation.

    Passed explicitly into the scheduler; nothing here is read from
    module-level state at scheduling time.
    """

    # Meal anchoring
    AFTER_FOOD_MINUTES: int = 30
    BEFORE_FOOD_MINUTES: int = -45

    # Clustering / separation
    MERGE_WINDOW_SECONDS: float = 10 * 60
    DEFAULT_MIN_GAP_SECONDS: float = 15 * 60

    # Awake window handling for no-food-rule medications
    AFTER_WAKE_PAD_MINUTES: int = 15
    BEFORE_BED_PAD_MINUTES: int = 15
    EDGE_EQUALITY_LEEWAY_SECONDS: float = 120
    CLAMP_MARGIN_MINUTES: int = 5
    OVERNIGHT_FALLBACK_HOURS: int = 16


# Database table names
class TableNames:
    MEDICATIONS = "medications"
    ROUTINES = "routines"
    APPOINTMENTS = "appointments"
    DOSE_LOGS = "dose_logs"


settings = get_settings()
scheduler_config = SchedulerConfig()
