# tasks_api/core/config.py
import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    # 기본 앱 설정
    app_env: str = Field("local", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # HTTP
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")
    cors_allow_origins: str = Field("*", alias="CORS_ALLOW_ORIGINS")

    # 목록 조회 페이지 크기
    default_page_size: int = Field(10, alias="DEFAULT_PAGE_SIZE", ge=1)
    max_page_size: int = Field(100, alias="MAX_PAGE_SIZE", ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def log_level_value(self) -> int:
        name = self.log_level.strip().upper()
        if name not in _LOG_LEVELS:
            allowed = "|".join(sorted(_LOG_LEVELS))
            raise RuntimeError(f"LOG_LEVEL must be one of {allowed}")
        return getattr(logging, name)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
