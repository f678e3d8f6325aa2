from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()


class Settings(BaseSettings):
    database_url: str = "sqlite:///./brandpawa.db"
    database_echo: bool = False
    log_level: str = "INFO"

    # Points awarded for every completed challenge task
    points_per_task: int = 10
    # Fallback bonus when a challenge definition has no reward of its own
    default_reward_points: int = 100
    # Days since the last completion for which a streak still counts as alive
    streak_grace_days: int = 1

    # Optional YAML file with extra diagnostic definitions
    diagnostics_path: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix='BRANDPAWA_')


# Instantiate settings
settings = Settings()


def get_settings() -> Settings:
    return settings


if __name__ == "__main__":
    # For testing the configuration loading
    print("BrandPawa Configuration:")
    print(f"  Database URL: {settings.database_url}")
    print(f"  Log level: {settings.log_level}")
    print(f"  Points per task: {settings.points_per_task}")
    print(f"  Default reward points: {settings.default_reward_points}")
    print(f"  Streak grace days: {settings.streak_grace_days}")
    print("\nTo override, set environment variables like BRANDPAWA_DATABASE_URL, BRANDPAWA_LOG_LEVEL, BRANDPAWA_POINTS_PER_TASK.")
