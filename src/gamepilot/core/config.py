from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    MAX_HISTORY_SIZE: int = 1000
    ENABLE_TEMPORAL_PATTERNS: bool = True
    ENABLE_SESSION_TRACKING: bool = True
    ENABLE_COMPOUND_MOODS: bool = True
    ENABLE_FEEDBACK_LOOP: bool = True

    MOOD_RECENT_HOURS: float = 24.0
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"

    model_config = SettingsConfigDict(
        env_prefix="GAMEPILOT_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore"
    )

settings = Settings()
