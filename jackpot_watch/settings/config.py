from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import os


def _get_default_redis_url() -> str:
    """根据环境自动选择Redis URL"""
    if os.getenv("DOCKER_ENV") == "true" or os.path.exists("/.dockerenv"):
        return "redis://redis:6379/0"
    return "redis://localhost:6379/0"


class Settings(BaseSettings):
    env: str = Field(default="dev")
    log_level: str = Field(default="INFO")

    # Threshold override, kept raw; resolution happens once per run
    jackpot_threshold: Optional[str] = Field(default=None)

    # Notification transport
    email_from: Optional[str] = Field(default=None)
    email_to: Optional[str] = Field(default=None)
    mail_api_url: str = Field(default="https://api.mailchannels.net/tx/v1/send")
    mail_api_key: Optional[str] = Field(default=None)

    # State store / scheduler broker
    redis_url: str = Field(default_factory=_get_default_redis_url)
    state_key_prefix: str = Field(default="")

    # Feeds
    http_timeout: float = Field(default=20.0)

    # Scheduled check, daily at 3pm ET
    check_schedule_hour: int = Field(default=15)
    check_schedule_minute: int = Field(default=0)
    check_timezone: str = Field(default="America/New_York")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()


def reload_settings() -> Settings:
    global settings
    settings = Settings()
    return settings
