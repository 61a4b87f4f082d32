"""Configuration management using Pydantic Settings."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """paraflow 설정. PARAFLOW_ 접두사의 환경 변수에서 읽습니다."""

    model_config = SettingsConfigDict(
        env_prefix="PARAFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "console"] = "console"

    # ModuleAdapter 동기 함수용 스레드 풀 크기 (None이면 ThreadPoolExecutor 기본값)
    adapter_max_workers: Optional[int] = Field(default=None, ge=1)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
