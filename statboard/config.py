import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Statboard"
    server_url: str = Field(
        "http://127.0.0.1:8529", description="Base URL of the statistics server."
    )
    request_timeout_seconds: float = Field(
        10.0, gt=0, description="Timeout applied to every request to the server."
    )
    refresh_interval_seconds: int = Field(
        60, description="Default refresh interval for descriptor polling on the frontend."
    )
    username: Optional[str] = Field(None, description="Basic auth user for the server.")
    password: Optional[str] = Field(None, description="Basic auth password for the server.")
    log_level: str = Field("INFO", description="Level name for statboard loggers.")

    @field_validator("server_url")
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    def ensure_known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'.")
        return level

    class Config:
        env_prefix = "STATBOARD_"


settings = Settings()
