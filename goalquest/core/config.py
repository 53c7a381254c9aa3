# goalquest/core/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "GoalQuest API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Database Configuration
    DATABASE_URL: str

    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:5173"

    # Goal / task limits enforced by the API
    MAX_ACTIVE_GOALS_PER_TYPE: int = 3
    MAX_TASKS_PER_DAY_PER_GOAL: int = 5

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @property
    def is_sqlite(self) -> bool:
        """Check if we're running against a SQLite database (local dev / tests)"""
        return self.DATABASE_URL.startswith("sqlite")

# Create a global settings instance
settings = Settings()
