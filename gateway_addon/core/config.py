from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    ADDON_ID: str = Field("gateway-addon", description="Identifier of the add-on process")

    LOG_DIR: str = Field("logs")
    LOG_LEVEL: str = Field("INFO")

    ACTION_HISTORY_LIMIT: int = Field(
        100, description="Completed actions retained per device"
    )

    @field_validator("ACTION_HISTORY_LIMIT")
    @classmethod
    def validate_action_history_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("ACTION_HISTORY_LIMIT must be >= 1")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {value}")
        return normalized

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
